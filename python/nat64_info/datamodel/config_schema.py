import logging
from pathlib import Path

from nat64_info.datamodel.discovery_schema import DiscoverySchema
from nat64_info.datamodel.logging_schema import LoggingSchema
from nat64_info.datamodel.resolver_schema import ResolverSchema
from nat64_info.utils.modeling import ConfigSchema, parse_file

logger = logging.getLogger(__name__)


class Nat64Config(ConfigSchema):
    """
    nat64-info declarative configuration.

    ---
    discovery: NAT64 prefix discovery configuration.
    resolver: DNS lookups configuration.
    logging: Logging and debugging configuration.
    """

    discovery: DiscoverySchema = DiscoverySchema()
    resolver: ResolverSchema = ResolverSchema()
    logging: LoggingSchema = LoggingSchema()

    @classmethod
    def from_file(cls, path: Path) -> "Nat64Config":
        logger.debug(f"Loading configuration from '{path}'")
        return cls(parse_file(path))
