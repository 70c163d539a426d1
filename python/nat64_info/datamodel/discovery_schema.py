from typing import Optional

from nat64_info.constants import NAT64_PREFIX_TTL, NAT64_PROBE_HOST
from nat64_info.datamodel.types import DomainName, IPv6Network96, TimeUnit
from nat64_info.utils.modeling import ConfigSchema


class DiscoverySchema(ConfigSchema):
    """
    NAT64 prefix discovery (RFC 7050 style, using a probe host).

    ---
    probe_host: Host with an IPv4-only address, its A and AAAA answers are compared to find the NAT64 prefix.
    ttl: How long a discovered NAT64 prefix is reused before it is discovered again.
    static_prefix: Use this /96 NAT64 prefix and skip the discovery.
    """

    probe_host: DomainName = DomainName(NAT64_PROBE_HOST)
    ttl: TimeUnit = TimeUnit(NAT64_PREFIX_TTL)
    static_prefix: Optional[IPv6Network96] = None

    def _validate(self) -> None:
        if int(self.ttl) <= 0:
            raise ValueError("'ttl' must be a positive time value")
