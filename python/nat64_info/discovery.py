"""
NAT64 prefix discovery and translation of IPv4 addresses.

See RFC 6146 and RFC 6052 for more info on what NAT64 is.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Optional

from nat64_info.constants import NAT64_PROBE_HOST
from nat64_info.datamodel.config_schema import Nat64Config
from nat64_info.errors import DiscoveryFailed, PrefixNotFound, ResolverError
from nat64_info.logging import get_logger
from nat64_info.resolver import Resolver, create_resolver
from nat64_info.translator import Ipv6Address, Nat64Prefix, derive_prefix, parse_ipv4, synthesize
from nat64_info.utils.functional import Result

logger = get_logger(__name__)

DEFAULT_TTL = 60.0

Clock = Callable[[], float]


@dataclass(frozen=True)
class DiscoveryState:
    """
    Cached result of the NAT64 prefix discovery.

    'discovered_at' is set if and only if 'prefix' is set.
    """

    prefix: Optional[Nat64Prefix] = None
    discovered_at: Optional[float] = None

    def __post_init__(self) -> None:
        if (self.prefix is None) != (self.discovered_at is None):
            raise ValueError("'prefix' and 'discovered_at' must be set together")

    @property
    def is_resolved(self) -> bool:
        return self.prefix is not None


UNRESOLVED = DiscoveryState()


class Nat64Discovery:
    """
    Discovers the NAT64 prefix of the current network and translates IPv4 addresses to IPv6.

    The prefix is found by comparing the A and AAAA answers for the probe host. It is cached
    for 'ttl' seconds and discovered again on the first request after that, which keeps it
    correct when the device moves to another network. A failed discovery is not cached.

    There should be one instance for the whole application, all requests share its cache.
    """

    def __init__(
        self,
        resolver: Resolver,
        probe_host: str = NAT64_PROBE_HOST,
        ttl: float = DEFAULT_TTL,
        static_prefix: Optional[Nat64Prefix] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError(f"TTL must be positive, got {ttl}")
        if static_prefix is not None:
            static_prefix.validate()

        self._resolver = resolver
        self._probe_host = probe_host
        self._ttl = ttl
        self._static_prefix = static_prefix
        self._clock = clock
        self._state = UNRESOLVED
        self._inflight: "Optional[asyncio.Task[Result[Nat64Prefix, str]]]" = None

    @classmethod
    def from_config(cls, config: Nat64Config, resolver: Optional[Resolver] = None) -> "Nat64Discovery":
        static = config.discovery.static_prefix
        return cls(
            resolver if resolver is not None else create_resolver(config.resolver),
            probe_host=config.discovery.probe_host.punycode(),
            ttl=config.discovery.ttl.seconds(),
            static_prefix=static.to_prefix() if static is not None else None,
        )

    @property
    def probe_host(self) -> str:
        return self._probe_host

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def state(self) -> DiscoveryState:
        return self._state

    @property
    def prefix(self) -> Optional[Nat64Prefix]:
        if self._static_prefix is not None:
            return self._static_prefix
        return self._state.prefix

    @property
    def is_resolved(self) -> bool:
        return self.prefix is not None

    def invalidate(self) -> None:
        """Drop the cached prefix, e.g. when the application knows that the network has changed."""

        if self._state.is_resolved:
            logger.info(f"Dropping NAT64 prefix {self._state.prefix} on request")
        self._state = UNRESOLVED

    def _is_fresh(self) -> bool:
        state = self._state
        return state.discovered_at is not None and self._clock() - state.discovered_at < self._ttl

    def _expire_if_stale(self) -> None:
        state = self._state
        if state.is_resolved and not self._is_fresh():
            logger.debug(f"NAT64 prefix {state.prefix} expired after {self._ttl}s")
            self._state = UNRESOLVED

    async def _lookup(self) -> Nat64Prefix:
        ipv4, ipv6 = await asyncio.gather(
            self._resolver.lookup_ipv4(self._probe_host),
            self._resolver.lookup_ipv6(self._probe_host),
            return_exceptions=True,
        )
        for res in (ipv4, ipv6):
            if isinstance(res, ResolverError):
                raise DiscoveryFailed(f"DNS lookup failed: {res}") from res
            if isinstance(res, Exception):
                # the resolver is expected to raise ResolverError only, treat anything else as a failed lookup too
                raise DiscoveryFailed(f"DNS lookup failed: {type(res).__name__}: {res}") from res
            if isinstance(res, BaseException):
                raise res
        if not ipv4 or not ipv6:
            raise DiscoveryFailed(f"no addresses returned for '{self._probe_host}'")

        if ipv6[0].to_std().ipv4_mapped is not None:
            raise DiscoveryFailed(f"'{ipv6[0]}' is an IPv4-mapped address, there is no DNS64 on this network")

        # with more addresses returned, the first ones are used
        try:
            return derive_prefix(ipv4[0], ipv6[0])
        except PrefixNotFound as e:
            raise DiscoveryFailed(str(e)) from e

    async def _discover(self) -> Result[Nat64Prefix, str]:
        try:
            prefix = await self._lookup()
        except DiscoveryFailed as e:
            logger.warning(f"NAT64 prefix discovery using '{self._probe_host}' failed: {e}")
            return Result.err(str(e))

        # replace the whole state at once
        self._state = DiscoveryState(prefix, self._clock())
        logger.notice(f"Discovered NAT64 prefix {prefix} using '{self._probe_host}'")
        return Result.ok(prefix)

    def _discovery_done(self, task: "asyncio.Task[Result[Nat64Prefix, str]]") -> None:
        if self._inflight is task:
            self._inflight = None

    async def _join_discovery(self) -> Optional[Nat64Prefix]:
        """
        Wait for the discovery in progress, or start a new one.

        At most one discovery runs at a time, concurrent requests share its result.
        """

        task = self._inflight
        if task is None or task.done():
            task = asyncio.ensure_future(self._discover())
            task.add_done_callback(self._discovery_done)
            self._inflight = task

        # a cancelled request must not cancel the discovery for the others
        res = await asyncio.shield(task)
        return res.unwrap() if res.is_ok() else None

    async def _ensure_prefix(self) -> Optional[Nat64Prefix]:
        if self._static_prefix is not None:
            return self._static_prefix

        self._expire_if_stale()
        state = self._state
        if state.is_resolved:
            logger.debug(f"Using cached NAT64 prefix {state.prefix}")
            return state.prefix

        return await self._join_discovery()

    async def discover(self) -> Optional[Nat64Prefix]:
        """
        Discover the NAT64 prefix now, even when a fresh one is cached.

        Returns:
            The prefix, or None when no NAT64 prefix could be discovered on this network.
        """

        if self._static_prefix is not None:
            return self._static_prefix

        if self._inflight is None or self._inflight.done():
            self._state = UNRESOLVED
        return await self._join_discovery()

    async def translate(self, ipv4_text: str) -> Optional[Ipv6Address]:
        """
        Get the IPv6 address to reach the given IPv4 address through NAT64.

        Returns:
            The IPv6 address, or None when there is no NAT64 on this network.

        Raises:
            InvalidAddress: 'ipv4_text' is not a valid IPv4 address.
            InvalidPrefix: Internal error, the NAT64 prefix is malformed.
        """

        ipv4 = parse_ipv4(ipv4_text)
        prefix = await self._ensure_prefix()
        if prefix is None:
            logger.debug(f"No NAT64 prefix, '{ipv4}' is not translated")
            return None
        return synthesize(prefix, ipv4)

    async def get_ipv6_address(self, ipv4_text: str) -> Optional[str]:
        """Same as 'translate()', but works with the textual form of the addresses."""

        ipv6 = await self.translate(ipv4_text)
        return str(ipv6) if ipv6 is not None else None
