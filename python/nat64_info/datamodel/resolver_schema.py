from typing import List, Literal, Optional

from nat64_info.constants import RESOLVER_TIMEOUT
from nat64_info.datamodel.types import IPAddress, TimeUnit
from nat64_info.utils.modeling import ConfigSchema

ResolverBackendEnum = Literal["dnspython", "system"]


class ResolverSchema(ConfigSchema):
    """
    DNS lookups used by the NAT64 prefix discovery.

    ---
    backend: 'dnspython' sends A/AAAA queries directly, 'system' asks the operating system (getaddrinfo).
    timeout: Upper bound for a single lookup.
    nameservers: Nameservers used by the 'dnspython' backend instead of the system ones.
    """

    backend: ResolverBackendEnum = "dnspython"
    timeout: TimeUnit = TimeUnit(RESOLVER_TIMEOUT)
    nameservers: Optional[List[IPAddress]] = None

    def _validate(self) -> None:
        if int(self.timeout) <= 0:
            raise ValueError("'timeout' must be a positive time value")
        if self.nameservers is not None and self.backend != "dnspython":
            raise ValueError("'nameservers' can only be used with the 'dnspython' backend")
