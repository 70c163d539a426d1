"""
IPv4/IPv6 address handling for NAT64 (RFC 6052).

Everything in this module is pure. It parses address literals, derives the NAT64 prefix
from a pair of addresses returned for the same host and synthesizes IPv6 addresses
with an IPv4 address embedded in them.
"""

import ipaddress
import re
from dataclasses import dataclass
from typing import Any, Type

from nat64_info.errors import InvalidAddress, InvalidPrefix, PrefixNotFound
from nat64_info.utils.modeling import BaseValueType

IPV4_LEN = 4
IPV6_LEN = 16

# bytes of a valid prefix, head and suffix together
NAT64_PREFIX_LEN = IPV6_LEN - IPV4_LEN

# four decimal octets, no leading zeros, no signs or whitespace
_IPV4_RE = re.compile(r"(0|[1-9][0-9]{0,2})(\.(0|[1-9][0-9]{0,2})){3}", re.ASCII)


class Ipv4Address(BaseValueType):
    """
    IPv4 address parsed from the dotted-decimal notation, e.g. '192.0.2.1'.
    """

    _value: ipaddress.IPv4Address

    def __init__(self, source_value: Any, object_path: str = "/") -> None:
        if not isinstance(source_value, str):
            raise InvalidAddress(source_value, f"expected string, got '{type(source_value).__name__}'")
        if not _IPV4_RE.fullmatch(source_value):
            raise InvalidAddress(source_value, "expected four dot-separated decimal octets")
        try:
            self._value = ipaddress.IPv4Address(source_value)
        except ValueError as e:
            raise InvalidAddress(source_value, "octet out of range") from e

    @classmethod
    def from_packed(cls: Type["Ipv4Address"], packed: bytes) -> "Ipv4Address":
        if len(packed) != IPV4_LEN:
            raise InvalidAddress(packed, f"expected {IPV4_LEN} bytes, got {len(packed)}")
        return cls(str(ipaddress.IPv4Address(packed)))

    @property
    def packed(self) -> bytes:
        return self._value.packed

    def to_std(self) -> ipaddress.IPv4Address:
        return self._value

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        return f'{type(self).__name__}("{self._value}")'

    def __eq__(self, o: object) -> bool:
        return isinstance(o, Ipv4Address) and o._value == self._value

    def __hash__(self) -> int:
        return hash(self._value)

    def serialize(self) -> Any:
        return str(self._value)


class Ipv6Address(BaseValueType):
    """
    IPv6 address parsed from the standard textual notation.

    Supports one '::' compression and a trailing dotted IPv4 part ('64:ff9b::192.0.2.1').
    Zone identifiers and prefix lengths are rejected.
    """

    _value: ipaddress.IPv6Address

    def __init__(self, source_value: Any, object_path: str = "/") -> None:
        if not isinstance(source_value, str):
            raise InvalidAddress(source_value, f"expected string, got '{type(source_value).__name__}'")
        if "%" in source_value or "/" in source_value:
            raise InvalidAddress(source_value, "zone identifiers and prefix lengths are not allowed")
        try:
            self._value = ipaddress.IPv6Address(source_value)
        except ValueError as e:
            raise InvalidAddress(source_value, str(e)) from e

    @classmethod
    def from_packed(cls: Type["Ipv6Address"], packed: bytes) -> "Ipv6Address":
        if len(packed) != IPV6_LEN:
            raise InvalidAddress(packed, f"expected {IPV6_LEN} bytes, got {len(packed)}")
        return cls(str(ipaddress.IPv6Address(packed)))

    @property
    def packed(self) -> bytes:
        return self._value.packed

    def to_std(self) -> ipaddress.IPv6Address:
        return self._value

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        return f'{type(self).__name__}("{self._value}")'

    def __eq__(self, o: object) -> bool:
        return isinstance(o, Ipv6Address) and o._value == self._value

    def __hash__(self) -> int:
        return hash(self._value)

    def serialize(self) -> Any:
        return str(self._value)


@dataclass(frozen=True)
class Nat64Prefix:
    """
    NAT64 prefix, the bytes surrounding the embedded IPv4 address.

    A synthesized address is 'head + IPv4 + suffix'. The usual /96 prefix has 12 bytes
    of head and no suffix. Construction is not validated, see 'validate()'.
    """

    head: bytes
    suffix: bytes = b""

    @classmethod
    def from_network(cls, network: str) -> "Nat64Prefix":
        """Create a prefix from a /96 IPv6 network, e.g. '64:ff9b::/96'."""

        try:
            net = ipaddress.IPv6Network(network)
        except ValueError as e:
            raise InvalidPrefix(f"failed to parse IPv6 network '{network}': {e}") from e
        if net.prefixlen != NAT64_PREFIX_LEN * 8:
            raise InvalidPrefix(f"expected /96 IPv6 network, got prefix length of {net.prefixlen}")
        return cls(net.network_address.packed[:NAT64_PREFIX_LEN])

    @property
    def prefix_length(self) -> int:
        return len(self.head) * 8

    def is_valid(self) -> bool:
        return len(self.head) + len(self.suffix) == NAT64_PREFIX_LEN

    def validate(self) -> None:
        if not self.is_valid():
            raise InvalidPrefix(
                f"NAT64 prefix head ({len(self.head)} B) and suffix ({len(self.suffix)} B)"
                f" must have {NAT64_PREFIX_LEN} bytes together"
            )

    def __str__(self) -> str:
        if self.is_valid() and not self.suffix:
            network = ipaddress.IPv6Network((self.head + bytes(IPV4_LEN), self.prefix_length))
            return network.with_prefixlen
        return f"{self.head.hex()}/{self.suffix.hex()}"


WELL_KNOWN_PREFIX = Nat64Prefix.from_network("64:ff9b::/96")


def parse_ipv4(text: Any) -> Ipv4Address:
    return Ipv4Address(text)


def parse_ipv6(text: Any) -> Ipv6Address:
    return Ipv6Address(text)


def derive_prefix(ipv4: Ipv4Address, ipv6: Ipv6Address) -> Nat64Prefix:
    """
    Derive the NAT64 prefix from the IPv4 and IPv6 addresses of the same host.

    The IPv4 bytes must appear intact inside the IPv6 address. When they appear more than once,
    the rightmost occurrence is used, which is where the /96 prefix puts them.

    Raises:
        PrefixNotFound: The IPv6 address does not embed the IPv4 address.
    """

    v4 = ipv4.packed
    v6 = ipv6.packed
    pos = v6.rfind(v4)
    if pos < 0:
        raise PrefixNotFound(f"'{ipv4}' is not embedded in '{ipv6}'")
    return Nat64Prefix(v6[:pos], v6[pos + IPV4_LEN :])


def synthesize(prefix: Nat64Prefix, ipv4: Ipv4Address) -> Ipv6Address:
    """
    Embed the IPv4 address into the NAT64 prefix.

    Raises:
        InvalidPrefix: The prefix would not produce exactly 16 bytes.
    """

    prefix.validate()
    return Ipv6Address.from_packed(prefix.head + ipv4.packed + prefix.suffix)
