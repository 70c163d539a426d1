import asyncio
from typing import List, Optional

import pytest

from nat64_info.datamodel import Nat64Config
from nat64_info.discovery import DiscoveryState, Nat64Discovery
from nat64_info.errors import InvalidAddress, InvalidPrefix, ResolverError
from nat64_info.resolver import Resolver
from nat64_info.translator import Ipv4Address, Ipv6Address, Nat64Prefix, parse_ipv6

PROBE_HOST = "nat64.example.net"


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResolver(Resolver):
    def __init__(
        self,
        ipv4: Optional[List[str]] = None,
        ipv6: Optional[List[str]] = None,
        fail_ipv4: bool = False,
        fail_ipv6: bool = False,
        delay: float = 0,
    ) -> None:
        self.ipv4 = ["192.0.0.1"] if ipv4 is None else ipv4
        self.ipv6 = ["64:ff9b::192.0.0.1"] if ipv6 is None else ipv6
        self.fail_ipv4 = fail_ipv4
        self.fail_ipv6 = fail_ipv6
        self.delay = delay
        self.ipv4_lookups: List[str] = []
        self.ipv6_lookups: List[str] = []

    async def lookup_ipv4(self, hostname: str) -> List[Ipv4Address]:
        self.ipv4_lookups.append(hostname)
        await asyncio.sleep(self.delay)
        if self.fail_ipv4:
            raise ResolverError("lookup timed out", hostname)
        return [Ipv4Address(a) for a in self.ipv4]

    async def lookup_ipv6(self, hostname: str) -> List[Ipv6Address]:
        self.ipv6_lookups.append(hostname)
        await asyncio.sleep(self.delay)
        if self.fail_ipv6:
            raise ResolverError("domain name does not exist", hostname)
        return [Ipv6Address(a) for a in self.ipv6]

    @property
    def lookups(self) -> int:
        assert len(self.ipv4_lookups) == len(self.ipv6_lookups)
        return len(self.ipv4_lookups)


def create_discovery(resolver: Resolver, clock: Optional[FakeClock] = None, ttl: float = 60) -> Nat64Discovery:
    return Nat64Discovery(resolver, probe_host=PROBE_HOST, ttl=ttl, clock=clock or FakeClock())


@pytest.mark.asyncio
async def test_translate():
    resolver = FakeResolver()
    discovery = create_discovery(resolver)

    assert await discovery.translate("8.8.8.8") == parse_ipv6("64:ff9b::808:808")
    assert resolver.ipv4_lookups == [PROBE_HOST]
    assert resolver.ipv6_lookups == [PROBE_HOST]
    assert discovery.is_resolved
    assert str(discovery.prefix) == "64:ff9b::/96"


@pytest.mark.asyncio
async def test_get_ipv6_address():
    discovery = create_discovery(FakeResolver())
    assert await discovery.get_ipv6_address("8.8.8.8") == "64:ff9b::808:808"


@pytest.mark.asyncio
async def test_translate_with_suffix():
    resolver = FakeResolver(ipv4=["192.0.2.33"], ipv6=["2001:db8:c000:221:2100::1"])
    discovery = create_discovery(resolver)
    assert await discovery.get_ipv6_address("198.51.100.1") == "2001:db8:c633:6401:2100::1"


@pytest.mark.asyncio
async def test_cached_within_ttl():
    clock = FakeClock()
    resolver = FakeResolver()
    discovery = create_discovery(resolver, clock)

    await discovery.translate("8.8.8.8")
    discovered_at = discovery.state.discovered_at

    clock.advance(59.9)
    assert await discovery.get_ipv6_address("1.1.1.1") == "64:ff9b::101:101"
    assert resolver.lookups == 1
    assert discovery.state.discovered_at == discovered_at


@pytest.mark.asyncio
async def test_rediscovered_after_ttl():
    clock = FakeClock()
    resolver = FakeResolver()
    discovery = create_discovery(resolver, clock)

    await discovery.translate("8.8.8.8")
    assert resolver.lookups == 1

    clock.advance(60)
    resolver.ipv6 = ["2001:db8:64::192.0.0.1"]
    assert await discovery.get_ipv6_address("8.8.8.8") == "2001:db8:64::808:808"
    assert resolver.lookups == 2
    assert discovery.state.discovered_at == clock.now


@pytest.mark.asyncio
async def test_expired_prefix_dropped_when_rediscovery_fails():
    clock = FakeClock()
    resolver = FakeResolver()
    discovery = create_discovery(resolver, clock)

    assert await discovery.translate("8.8.8.8") is not None

    clock.advance(61)
    resolver.fail_ipv4 = True
    assert await discovery.translate("8.8.8.8") is None
    assert resolver.lookups == 2
    assert discovery.state == DiscoveryState()
    assert discovery.prefix is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "fail_ipv4,fail_ipv6",
    [(True, False), (False, True), (True, True)],
)
async def test_lookup_failure_means_no_translation(fail_ipv4: bool, fail_ipv6: bool):
    resolver = FakeResolver(fail_ipv4=fail_ipv4, fail_ipv6=fail_ipv6)
    discovery = create_discovery(resolver)

    assert await discovery.translate("8.8.8.8") is None
    assert await discovery.get_ipv6_address("8.8.8.8") is None
    assert not discovery.is_resolved
    assert discovery.state.discovered_at is None
    # failures are not cached, every request tries again
    assert resolver.lookups == 2


class BrokenResolver(FakeResolver):
    """Resolver failing with an exception other than ResolverError."""

    def __init__(self, error: Exception) -> None:
        super().__init__()
        self.error = error

    async def lookup_ipv4(self, hostname: str) -> List[Ipv4Address]:
        self.ipv4_lookups.append(hostname)
        raise self.error


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [asyncio.TimeoutError(), OSError("network is unreachable"), RuntimeError("bug")])
async def test_unexpected_resolver_error_means_no_translation(error: Exception):
    resolver = BrokenResolver(error)
    discovery = create_discovery(resolver)

    assert await discovery.translate("8.8.8.8") is None
    assert await discovery.get_ipv6_address("8.8.8.8") is None
    assert await discovery.discover() is None
    assert not discovery.is_resolved
    assert resolver.lookups == 3


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "ipv4,ipv6",
    [
        ([], ["64:ff9b::192.0.0.1"]),
        (["192.0.0.1"], []),
        # no DNS64, the host simply has an IPv6 address
        (["192.0.0.1"], ["2001:db8::1"]),
        (["192.0.0.1"], ["::ffff:192.0.0.1"]),
    ],
)
async def test_no_prefix_means_no_translation(ipv4: List[str], ipv6: List[str]):
    resolver = FakeResolver(ipv4=ipv4, ipv6=ipv6)
    discovery = create_discovery(resolver)

    assert await discovery.translate("8.8.8.8") is None
    assert discovery.state == DiscoveryState()


@pytest.mark.asyncio
async def test_first_addresses_are_used():
    resolver = FakeResolver(
        ipv4=["192.0.0.1", "192.0.0.2"],
        ipv6=["2001:db8:64::192.0.0.1", "64:ff9b::192.0.0.2"],
    )
    discovery = create_discovery(resolver)
    assert await discovery.get_ipv6_address("8.8.8.8") == "2001:db8:64::808:808"


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["not-an-ip", "256.0.0.1", "01.2.3.4", "64:ff9b::1", ""])
async def test_invalid_address(value: str):
    resolver = FakeResolver()
    discovery = create_discovery(resolver)

    with pytest.raises(InvalidAddress):
        await discovery.translate(value)
    # invalid input does not trigger the discovery
    assert resolver.lookups == 0

    await discovery.translate("8.8.8.8")
    with pytest.raises(InvalidAddress):
        await discovery.translate(value)

    unavailable = create_discovery(FakeResolver(fail_ipv4=True))
    with pytest.raises(InvalidAddress):
        await unavailable.get_ipv6_address(value)


@pytest.mark.asyncio
async def test_concurrent_requests_share_discovery():
    resolver = FakeResolver(delay=0.01)
    discovery = create_discovery(resolver)

    results = await asyncio.gather(*(discovery.get_ipv6_address(f"10.0.0.{i}") for i in range(10)))

    assert results == [f"64:ff9b::a00:{i}" for i in range(10)]
    assert resolver.lookups == 1


@pytest.mark.asyncio
async def test_concurrent_requests_share_failed_discovery():
    resolver = FakeResolver(fail_ipv6=True, delay=0.01)
    discovery = create_discovery(resolver)

    results = await asyncio.gather(*(discovery.translate("8.8.8.8") for _ in range(5)))

    assert results == [None] * 5
    assert resolver.lookups == 1

    # the next request after the failed discovery tries again
    await discovery.translate("8.8.8.8")
    assert resolver.lookups == 2


@pytest.mark.asyncio
async def test_cancelled_request_does_not_cancel_discovery():
    resolver = FakeResolver(delay=0.05)
    discovery = create_discovery(resolver)

    first = asyncio.ensure_future(discovery.translate("8.8.8.8"))
    second = asyncio.ensure_future(discovery.translate("1.1.1.1"))
    await asyncio.sleep(0.01)
    first.cancel()

    assert await second == parse_ipv6("64:ff9b::101:101")
    assert resolver.lookups == 1
    with pytest.raises(asyncio.CancelledError):
        await first


@pytest.mark.asyncio
async def test_invalidate():
    resolver = FakeResolver()
    discovery = create_discovery(resolver)

    await discovery.translate("8.8.8.8")
    discovery.invalidate()
    assert discovery.state == DiscoveryState()

    await discovery.translate("8.8.8.8")
    assert resolver.lookups == 2


@pytest.mark.asyncio
async def test_discover_forces_lookup():
    resolver = FakeResolver()
    discovery = create_discovery(resolver)

    assert str(await discovery.discover()) == "64:ff9b::/96"
    assert str(await discovery.discover()) == "64:ff9b::/96"
    assert resolver.lookups == 2

    resolver.fail_ipv4 = True
    assert await discovery.discover() is None
    assert not discovery.is_resolved


@pytest.mark.asyncio
async def test_static_prefix_skips_discovery():
    resolver = FakeResolver()
    discovery = Nat64Discovery(resolver, static_prefix=Nat64Prefix.from_network("2001:db8:64::/96"))

    assert await discovery.get_ipv6_address("8.8.8.8") == "2001:db8:64::808:808"
    assert str(await discovery.discover()) == "2001:db8:64::/96"
    assert resolver.lookups == 0


def test_invalid_static_prefix():
    with pytest.raises(InvalidPrefix):
        Nat64Discovery(FakeResolver(), static_prefix=Nat64Prefix(bytes(8)))


@pytest.mark.parametrize("ttl", [0, -1])
def test_invalid_ttl(ttl: float):
    with pytest.raises(ValueError):
        Nat64Discovery(FakeResolver(), ttl=ttl)


@pytest.mark.asyncio
async def test_synthesis_fault_is_not_hidden(monkeypatch: pytest.MonkeyPatch):
    discovery = create_discovery(FakeResolver())
    await discovery.translate("8.8.8.8")

    # corrupt the cached prefix, translate must report it instead of returning None
    monkeypatch.setattr(discovery, "_state", DiscoveryState(Nat64Prefix(bytes(10)), discovery.state.discovered_at))
    with pytest.raises(InvalidPrefix):
        await discovery.translate("8.8.8.8")


def test_discovery_state_invariant():
    assert not DiscoveryState().is_resolved
    assert DiscoveryState(Nat64Prefix(bytes(12)), 1.0).is_resolved
    with pytest.raises(ValueError):
        DiscoveryState(Nat64Prefix(bytes(12)), None)
    with pytest.raises(ValueError):
        DiscoveryState(None, 1.0)


def test_from_config():
    config = Nat64Config(
        {
            "discovery": {"probe-host": "ipv4only.arpa", "ttl": "2m"},
            "resolver": {"backend": "system", "timeout": "500ms"},
        }
    )
    discovery = Nat64Discovery.from_config(config)
    assert discovery.probe_host == "ipv4only.arpa"
    assert discovery.ttl == 120.0
    assert discovery.prefix is None


def test_from_config_static_prefix():
    config = Nat64Config({"discovery": {"static-prefix": "64:ff9b::/96"}})
    discovery = Nat64Discovery.from_config(config, FakeResolver())
    assert str(discovery.prefix) == "64:ff9b::/96"
