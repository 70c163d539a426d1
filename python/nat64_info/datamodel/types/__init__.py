from .base_types import StrBase, UnitBase
from .types import DomainName, IPAddress, IPv6Network96, TimeUnit

__all__ = [
    "DomainName",
    "IPAddress",
    "IPv6Network96",
    "StrBase",
    "TimeUnit",
    "UnitBase",
]
