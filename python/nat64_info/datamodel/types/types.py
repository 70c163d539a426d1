import ipaddress
import re
from typing import Any, Union

from nat64_info.datamodel.types.base_types import StrBase, UnitBase
from nat64_info.errors import InvalidPrefix
from nat64_info.translator import Nat64Prefix

MAX_NAME_LEN = 253

# letters, digits and hyphens, no hyphen at either end
_LABEL_RE = re.compile(r"(?!-)[a-zA-Z0-9-]{1,63}(?<!-)")


class TimeUnit(UnitBase):
    _units = {"us": 1, "ms": 10**3, "s": 10**6, "m": 60 * 10**6, "h": 3600 * 10**6, "d": 24 * 3600 * 10**6}

    def seconds(self) -> float:
        return self._base_value / 1000**2

    def millis(self) -> int:
        return self._base_value // 1000

    def micros(self) -> int:
        return self._base_value


class DomainName(StrBase):
    """
    Domain name of a host, e.g. the NAT64 probe host.

    Internationalized names are accepted and converted to punycode, which is what is looked up in DNS.
    """

    _punycode: str

    def __init__(self, source_value: Any, object_path: str = "/") -> None:
        super().__init__(source_value, object_path)
        try:
            punycode = self._value.encode("idna").decode("ascii")
        except UnicodeError as e:
            raise ValueError(f"'{self._value}' cannot be converted to punycode: {e}", object_path) from e

        name = punycode[:-1] if punycode.endswith(".") else punycode
        if not 0 < len(name) <= MAX_NAME_LEN:
            raise ValueError(f"domain name must have 1 to {MAX_NAME_LEN} characters, got '{self._value}'", object_path)
        for label in name.split("."):
            if not _LABEL_RE.fullmatch(label):
                raise ValueError(f"'{label}' is not a valid label in domain name '{self._value}'", object_path)
        self._punycode = punycode

    def __hash__(self) -> int:
        if self._value.endswith("."):
            return hash(self._value)
        return hash(f"{self._value}.")

    def punycode(self) -> str:
        return self._punycode


class IPAddress(StrBase):
    """
    IPv4 or IPv6 address, e.g. address of a nameserver.
    """

    _addr: Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

    def __init__(self, source_value: Any, object_path: str = "/") -> None:
        super().__init__(source_value, object_path)
        try:
            self._addr = ipaddress.ip_address(self._value)
        except ValueError as e:
            raise ValueError(f"failed to parse IP address '{self._value}'.", object_path) from e

    def to_std(self) -> Union[ipaddress.IPv4Address, ipaddress.IPv6Address]:
        return self._addr


class IPv6Network96(StrBase):
    """
    IPv6 network with /96 prefix length, used as a statically configured NAT64 prefix.
    """

    _prefix: Nat64Prefix

    def __init__(self, source_value: Any, object_path: str = "/") -> None:
        super().__init__(source_value, object_path)
        if "/" not in self._value:
            raise ValueError(
                "Expected IPv6 network address with /96 prefix length."
                " Maybe, you forgot to add /96 after the base address?",
                object_path,
            )
        try:
            self._prefix = Nat64Prefix.from_network(self._value)
        except InvalidPrefix as e:
            raise ValueError(str(e), object_path) from e

    def to_prefix(self) -> Nat64Prefix:
        return self._prefix
