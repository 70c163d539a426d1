from .constants import VERSION
from .discovery import DiscoveryState, Nat64Discovery
from .errors import BaseNat64Error, DiscoveryFailed, InvalidAddress, InvalidPrefix, PrefixNotFound, ResolverError
from .translator import Ipv4Address, Ipv6Address, Nat64Prefix, derive_prefix, parse_ipv4, parse_ipv6, synthesize

__version__ = VERSION

__all__ = [
    "BaseNat64Error",
    "DiscoveryFailed",
    "DiscoveryState",
    "InvalidAddress",
    "InvalidPrefix",
    "Ipv4Address",
    "Ipv6Address",
    "Nat64Discovery",
    "Nat64Prefix",
    "PrefixNotFound",
    "ResolverError",
    "derive_prefix",
    "parse_ipv4",
    "parse_ipv6",
    "synthesize",
]
