"""Caching front-end for an upstream HamnetDB accessor.

Every query is served from a :class:`TypedResultStore` while the entry is at
most ``ttl`` seconds old; otherwise the upstream accessor is called and the
result stored.  Two locks coordinate the work:

- a coarse re-entrant lock held for the whole of every query and every
  refresh pass, so no reader ever sees a half-updated derived view;
- a non-blocking guard taken only by background passes, so a pass that
  fires while the previous one is still running is skipped, not queued.

In preemptive mode a timer thread starts a pass right away and then every
``ttl - 3s``, re-fetching all data kinds shortly before they would expire.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from types import TracebackType

from hamnetdb.access import DirectPairSupport, HamnetDbAccess
from hamnetdb.associations import (
    associate_hosts,
    exclude_parent_subnets,
    filter_unique_pairs,
    parse_network,
    restrict_to_network,
)
from hamnetdb.cache._config import CacheConfiguration
from hamnetdb.cache._store import DataKind, TypedResultStore
from hamnetdb.errors import CacheClosedError, InvalidArgumentError, UpstreamError
from hamnetdb.models import HostAssociation, HostSet, IPNetwork, SiteSet, SubnetSet

logger = logging.getLogger(__name__)

# Order of a preemptive pass: raw data first, derived views after their inputs.
_PASS_ORDER = (
    DataKind.ROUTING_HOSTS,
    DataKind.MONITORED_HOSTS,
    DataKind.SUBNETS,
    DataKind.HOST_PAIRS_GLOBAL,
    DataKind.HOST_ASSOCIATIONS_BY_SUBNET,
    DataKind.SITES,
)


@dataclass(frozen=True)
class CacheEntryInfo:
    """Snapshot of one cache entry, as reported by :meth:`cache_info`."""

    kind: DataKind
    fetched_at: float
    age: float
    expired: bool


class CachingHamnetDbAccessor:
    """Read-through TTL cache in front of a :class:`HamnetDbAccess`.

    Implements :class:`HamnetDbAccess` and :class:`DirectPairSupport` itself,
    so caches can be stacked and the generic helpers in
    :mod:`hamnetdb.associations` use the cached views.
    """

    def __init__(
        self,
        upstream: HamnetDbAccess,
        configuration: CacheConfiguration,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if upstream is None:
            raise InvalidArgumentError("The upstream HamnetDB accessor is None")

        self._upstream = upstream
        self._config = configuration.normalized()
        self._clock = clock
        self._store = TypedResultStore(self._config.ttl)

        self._lock = threading.RLock()
        self._pass_guard = threading.Lock()
        self._close_lock = threading.Lock()
        self._closed = False
        self._stop = threading.Event()
        self._timer_thread: threading.Thread | None = None
        self._executor: ThreadPoolExecutor | None = None

        self._loaders: dict[DataKind, Callable[[float], object]] = {
            DataKind.ROUTING_HOSTS: lambda _now: upstream.fetch_routing_hosts(),
            DataKind.MONITORED_HOSTS: lambda _now: upstream.fetch_monitored_hosts(),
            DataKind.SUBNETS: lambda _now: upstream.fetch_subnets(),
            DataKind.SITES: lambda _now: upstream.fetch_sites(),
            DataKind.HOST_PAIRS_GLOBAL: self._load_host_pairs_global,
            DataKind.HOST_ASSOCIATIONS_BY_SUBNET: self._load_host_associations,
        }

        if self._config.preemptive:
            self._start_timer()

    # -- Properties ---------------------------------------------------------

    @property
    def configuration(self) -> CacheConfiguration:
        """The effective (normalized) configuration."""
        return self._config

    @property
    def preemptive(self) -> bool:
        return self._config.preemptive

    @property
    def refresh_interval(self) -> float:
        """Seconds between background passes (the ttl when not preemptive)."""
        return self._config.refresh_interval

    @property
    def closed(self) -> bool:
        return self._closed

    # -- Queries ------------------------------------------------------------

    def query_routing_hosts(self) -> HostSet:
        """Return the hosts flagged as (BGP) routers."""
        return self._query(DataKind.ROUTING_HOSTS)  # type: ignore[return-value]

    def query_monitored_hosts(self) -> HostSet:
        """Return the hosts flagged for monitoring."""
        return self._query(DataKind.MONITORED_HOSTS)  # type: ignore[return-value]

    def query_subnets(self) -> SubnetSet:
        return self._query(DataKind.SUBNETS)  # type: ignore[return-value]

    def query_sites(self) -> SiteSet:
        return self._query(DataKind.SITES)  # type: ignore[return-value]

    def query_unique_monitored_host_pairs(self, subnet: IPNetwork | str) -> HostAssociation:
        """Return the unique monitored host pairs in subnets nested in *subnet*.

        Subnets that are parents of other listed subnets are not considered,
        and only subnets with exactly two monitored hosts are returned.
        Always served from the cached association map; unlike the global
        query it does not ask an upstream with :class:`DirectPairSupport`.
        Raises :class:`InvalidArgumentError` for a missing or invalid subnet.
        """
        network = parse_network(subnet)
        now = self._clock()
        with self._lock:
            self._check_open()
            association = self._get_or_refresh(DataKind.HOST_ASSOCIATIONS_BY_SUBNET, now)
            return filter_unique_pairs(restrict_to_network(association, network))  # type: ignore[arg-type]

    def query_unique_monitored_host_pairs_global(self) -> HostAssociation:
        """Return every subnet holding exactly two monitored hosts."""
        return dict(self._query(DataKind.HOST_PAIRS_GLOBAL))  # type: ignore[call-overload]

    def cache_info(self) -> list[CacheEntryInfo]:
        """Describe the stored entries, expired ones included."""
        now = self._clock()
        with self._lock:
            self._check_open()
            entries = self._store.entries()
        return [
            CacheEntryInfo(
                kind=kind,
                fetched_at=entry.fetched_at,
                age=now - entry.fetched_at,
                expired=now - entry.fetched_at > self._store.ttl,
            )
            for kind, entry in entries.items()
        ]

    # HamnetDbAccess / DirectPairSupport
    fetch_routing_hosts = query_routing_hosts
    fetch_monitored_hosts = query_monitored_hosts
    fetch_subnets = query_subnets
    fetch_sites = query_sites
    fetch_unique_monitored_host_pairs = query_unique_monitored_host_pairs
    fetch_unique_monitored_host_pairs_global = query_unique_monitored_host_pairs_global

    # -- Lifecycle ----------------------------------------------------------

    def close(self) -> None:
        """Stop the background timer and wait for running passes and queries.

        Nothing touches the store once this returns.  Concurrent callers all
        return after the teardown has finished; later calls are no-ops.
        """
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
            self._stop.set()
            if self._timer_thread is not None:
                self._timer_thread.join()
                self._timer_thread = None
            if self._executor is not None:
                self._executor.shutdown(wait=True, cancel_futures=True)
                self._executor = None
            # Wait for queries already past the open check
            with self._lock:
                pass
        logger.debug("HamnetDB cache closed")

    def __enter__(self) -> CachingHamnetDbAccessor:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # -- Refresh coordination -----------------------------------------------

    def _check_open(self) -> None:
        if self._closed:
            raise CacheClosedError("The HamnetDB cache has been closed")

    def _query(self, kind: DataKind) -> object:
        now = self._clock()
        with self._lock:
            self._check_open()
            return self._get_or_refresh(kind, now)

    def _get_or_refresh(self, kind: DataKind, now: float) -> object:
        """Serve *kind* from the store or refresh it.  Caller holds the lock."""
        entry = self._store.get(kind, now)
        if entry is not None:
            return entry.value
        return self._refresh(kind, now)

    def _refresh(self, kind: DataKind, now: float) -> object:
        """Load *kind* and store it.  On failure the store is left untouched."""
        value = self._loaders[kind](now)
        self._store.put(kind, value, now)
        return value

    def _load_host_pairs_global(self, now: float) -> HostAssociation:
        if isinstance(self._upstream, DirectPairSupport):
            return self._upstream.fetch_unique_monitored_host_pairs_global()
        hosts = self._get_or_refresh(DataKind.MONITORED_HOSTS, now)
        subnets = self._get_or_refresh(DataKind.SUBNETS, now)
        return filter_unique_pairs(associate_hosts(subnets, hosts))  # type: ignore[arg-type]

    def _load_host_associations(self, now: float) -> HostAssociation:
        hosts = self._get_or_refresh(DataKind.MONITORED_HOSTS, now)
        subnets = self._get_or_refresh(DataKind.SUBNETS, now)
        return associate_hosts(exclude_parent_subnets(subnets), hosts)  # type: ignore[arg-type]

    # -- Background refresh -------------------------------------------------

    def _start_timer(self) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="hamnetdb-cache-refresh"
        )
        self._timer_thread = threading.Thread(
            target=self._timer_loop,
            args=(self._executor,),
            daemon=True,
            name="hamnetdb-cache-timer",
        )
        self._timer_thread.start()

    def _timer_loop(self, executor: ThreadPoolExecutor) -> None:
        """Fire a refresh pass now and then every ``refresh_interval`` seconds."""
        logger.info(
            "Starting preemptive cache refresh at interval of %.0fs", self.refresh_interval
        )
        while not self._stop.is_set():
            executor.submit(self._run_refresh_pass)
            if self._stop.wait(timeout=self.refresh_interval):
                break

    def _run_refresh_pass(self) -> None:
        """Re-fetch every data kind, skipping if a pass is already running.

        The first failing kind aborts the pass so derived views are never
        computed from inputs of mixed age.
        """
        if not self._pass_guard.acquire(blocking=False):
            logger.warning(
                "SKIPPING preemptive cache refresh: previous refresh still ongoing. "
                "Please adjust the cache ttl."
            )
            return
        try:
            with self._lock:
                logger.info(
                    "Performing preemptive cache refresh. "
                    "If you see this too often, check your configuration."
                )
                for kind in _PASS_ORDER:
                    if self._closed:
                        return
                    try:
                        self._refresh(kind, self._clock())
                    except UpstreamError:
                        logger.warning(
                            "Preemptive cache refresh aborted: fetching %s failed",
                            kind,
                            exc_info=True,
                        )
                        return
                    except Exception:
                        logger.exception("Preemptive cache refresh aborted at %s", kind)
                        return
        finally:
            self._pass_guard.release()
