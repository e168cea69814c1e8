"""Shared test fixtures for hamnetdb tests."""

from __future__ import annotations

import threading
from collections import Counter
from ipaddress import ip_address, ip_network

import pytest

from hamnetdb.errors import UpstreamError
from hamnetdb.models import Host, HostSet, Site, SiteSet, Subnet, SubnetSet

# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------


def make_host(address: str, name: str = "") -> Host:
    return Host(
        address=ip_address(address),
        callsign="DB0TST",
        name=name or f"host-{address}",
        host_type="Routing-Radio",
    )


def make_subnet(network: str) -> Subnet:
    return Subnet(ip_network(network))


H1 = make_host("10.0.0.1")
H2 = make_host("10.0.0.2")
H3 = make_host("10.0.0.10")

SAMPLE_SUBNETS: SubnetSet = (
    make_subnet("10.0.0.0/30"),
    make_subnet("10.0.0.4/30"),
    make_subnet("10.0.0.8/30"),
)
SAMPLE_SITES: SiteSet = (Site(callsign="DB0TST", name="Test site", latitude=48.1),)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced replacement for ``time.monotonic``."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeUpstream:
    """In-memory upstream accessor counting its fetch calls.

    ``fail`` holds method names that raise :class:`UpstreamError`.
    ``block`` (an event) makes ``fetch_routing_hosts`` wait until it is set;
    ``entered`` is set once the blocking call has started.
    """

    def __init__(
        self,
        routing_hosts: HostSet = (H1,),
        monitored_hosts: HostSet = (H1, H2),
        subnets: SubnetSet = SAMPLE_SUBNETS,
        sites: SiteSet = SAMPLE_SITES,
    ) -> None:
        self.routing_hosts = routing_hosts
        self.monitored_hosts = monitored_hosts
        self.subnets = subnets
        self.sites = sites
        self.calls: Counter[str] = Counter()
        self.fail: set[str] = set()
        self.block: threading.Event | None = None
        self.entered = threading.Event()
        self._lock = threading.Lock()

    def _record(self, name: str) -> None:
        with self._lock:
            self.calls[name] += 1
        if name in self.fail:
            raise UpstreamError(f"{name} failed")

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    def fetch_routing_hosts(self) -> HostSet:
        self.entered.set()
        if self.block is not None:
            self.block.wait(timeout=10)
        self._record("fetch_routing_hosts")
        return self.routing_hosts

    def fetch_monitored_hosts(self) -> HostSet:
        self._record("fetch_monitored_hosts")
        return self.monitored_hosts

    def fetch_subnets(self) -> SubnetSet:
        self._record("fetch_subnets")
        return self.subnets

    def fetch_sites(self) -> SiteSet:
        self._record("fetch_sites")
        return self.sites


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def upstream() -> FakeUpstream:
    return FakeUpstream()
