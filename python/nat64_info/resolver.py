import asyncio
import logging
import socket
from abc import ABC, abstractmethod  # pylint: disable=no-name-in-module
from typing import Callable, List, Optional, Sequence, TypeVar

import dns.asyncresolver
import dns.exception
import dns.rdatatype
import dns.resolver

from nat64_info.datamodel.resolver_schema import ResolverSchema
from nat64_info.errors import InvalidAddress, ResolverError
from nat64_info.translator import Ipv4Address, Ipv6Address

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _parse_answer(hostname: str, addresses: Sequence[str], parse: Callable[[str], T]) -> List[T]:
    result: List[T] = []
    for addr in addresses:
        try:
            parsed = parse(addr)
        except InvalidAddress as e:
            raise ResolverError(f"malformed address in the answer: {e}", hostname) from e
        if parsed not in result:
            result.append(parsed)
    if not result:
        raise ResolverError("no addresses in the answer", hostname)
    return result


class Resolver(ABC):
    """
    DNS lookups needed by the NAT64 prefix discovery.

    Implementations must bound every lookup by a timeout and report any failure,
    including an empty answer, by raising 'ResolverError'.
    """

    @abstractmethod
    async def lookup_ipv4(self, hostname: str) -> List[Ipv4Address]:
        """Return IPv4 addresses of the host in the order they were received."""

    @abstractmethod
    async def lookup_ipv6(self, hostname: str) -> List[Ipv6Address]:
        """Return IPv6 addresses of the host in the order they were received."""


class DnsPythonResolver(Resolver):
    """Sends A and AAAA queries using dnspython."""

    def __init__(self, timeout: float, nameservers: Optional[List[str]] = None) -> None:
        self._timeout = timeout
        try:
            self._resolver = dns.asyncresolver.Resolver(configure=not nameservers)
        except dns.resolver.NoResolverConfiguration as e:
            raise ResolverError(f"failed to load system resolver configuration: {e}") from e
        if nameservers:
            self._resolver.nameservers = list(nameservers)
        self._resolver.lifetime = timeout

    async def _query(self, hostname: str, rdtype: dns.rdatatype.RdataType) -> List[str]:
        logger.debug(f"Querying {rdtype.name} records of '{hostname}'")
        try:
            answer = await self._resolver.resolve(hostname, rdtype, search=False, lifetime=self._timeout)
        except dns.resolver.NXDOMAIN as e:
            raise ResolverError("domain name does not exist", hostname) from e
        except dns.resolver.NoAnswer as e:
            raise ResolverError(f"no {rdtype.name} records", hostname) from e
        except dns.resolver.NoNameservers as e:
            raise ResolverError("no nameserver was able to answer", hostname) from e
        except dns.exception.Timeout as e:
            raise ResolverError(f"{rdtype.name} lookup timed out after {self._timeout}s", hostname) from e
        except dns.exception.DNSException as e:
            raise ResolverError(f"{rdtype.name} lookup failed: {e}", hostname) from e
        return [rdata.address for rdata in answer]

    async def lookup_ipv4(self, hostname: str) -> List[Ipv4Address]:
        return _parse_answer(hostname, await self._query(hostname, dns.rdatatype.A), Ipv4Address)

    async def lookup_ipv6(self, hostname: str) -> List[Ipv6Address]:
        return _parse_answer(hostname, await self._query(hostname, dns.rdatatype.AAAA), Ipv6Address)


class SystemResolver(Resolver):
    """Asks the operating system resolver (getaddrinfo), like a regular application would."""

    def __init__(self, timeout: float) -> None:
        self._timeout = timeout

    async def _getaddrinfo(self, hostname: str, family: socket.AddressFamily) -> List[str]:
        logger.debug(f"Resolving '{hostname}' using getaddrinfo() with {family.name}")
        loop = asyncio.get_running_loop()
        try:
            infos = await asyncio.wait_for(
                loop.getaddrinfo(hostname, None, family=family, type=socket.SOCK_STREAM),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise ResolverError(f"lookup timed out after {self._timeout}s", hostname) from e
        except OSError as e:
            raise ResolverError(f"lookup failed: {e}", hostname) from e

        # link-local results carry a scope, e.g. 'fe80::1%eth0'
        return [str(sockaddr[0]).split("%", 1)[0] for _family, _type, _proto, _canon, sockaddr in infos]

    async def lookup_ipv4(self, hostname: str) -> List[Ipv4Address]:
        return _parse_answer(hostname, await self._getaddrinfo(hostname, socket.AF_INET), Ipv4Address)

    async def lookup_ipv6(self, hostname: str) -> List[Ipv6Address]:
        return _parse_answer(hostname, await self._getaddrinfo(hostname, socket.AF_INET6), Ipv6Address)


def create_resolver(config: ResolverSchema) -> Resolver:
    timeout = config.timeout.seconds()
    if config.backend == "system":
        return SystemResolver(timeout)
    nameservers = [str(ns) for ns in config.nameservers] if config.nameservers else None
    return DnsPythonResolver(timeout, nameservers)
