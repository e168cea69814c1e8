"""Upstream access contract – what the cache needs from a data source.

Any object providing the four ``fetch_*`` methods of :class:`HamnetDbAccess`
can sit behind :class:`hamnetdb.cache.CachingHamnetDbAccessor`.  Each method
either returns its full result set or raises
:class:`hamnetdb.errors.UpstreamError`; timeouts are the accessor's concern.

Accessors that can compute the unique host pairs more cheaply themselves
(e.g. with a database query) additionally implement
:class:`DirectPairSupport`.  Callers test for it with ``isinstance`` and
fall back to the generic computation in :mod:`hamnetdb.associations`.
"""

from typing import Protocol, runtime_checkable

from hamnetdb.models import HostAssociation, HostSet, IPNetwork, SiteSet, SubnetSet


@runtime_checkable
class HamnetDbAccess(Protocol):
    """Contract every upstream HamnetDB data source must satisfy."""

    def fetch_routing_hosts(self) -> HostSet: ...
    def fetch_monitored_hosts(self) -> HostSet: ...
    def fetch_subnets(self) -> SubnetSet: ...
    def fetch_sites(self) -> SiteSet: ...


@runtime_checkable
class DirectPairSupport(Protocol):
    """Optional capability: the source computes unique host pairs itself."""

    def fetch_unique_monitored_host_pairs(self, subnet: IPNetwork) -> HostAssociation: ...
    def fetch_unique_monitored_host_pairs_global(self) -> HostAssociation: ...
