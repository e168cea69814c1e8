"""Typed result store – the most recent value per data kind."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)


class DataKind(StrEnum):
    """What a cache entry holds.  Each kind has exactly one value type."""

    ROUTING_HOSTS = "routing_hosts"  # HostSet
    MONITORED_HOSTS = "monitored_hosts"  # HostSet
    SUBNETS = "subnets"  # SubnetSet
    SITES = "sites"  # SiteSet
    HOST_PAIRS_GLOBAL = "host_pairs_global"  # HostAssociation, pairs only
    HOST_ASSOCIATIONS_BY_SUBNET = "host_associations_by_subnet"  # HostAssociation, all


@dataclass(frozen=True)
class CacheEntry:
    """A value together with the clock reading at which it was fetched."""

    value: object
    fetched_at: float


class TypedResultStore:
    """Mapping from :class:`DataKind` to its latest :class:`CacheEntry`.

    Not thread-safe on its own: the owning cache only touches it while
    holding its coarse lock.  Entries are replaced, never mutated or evicted.
    """

    def __init__(self, ttl: float) -> None:
        self.ttl = ttl
        self._entries: dict[DataKind, CacheEntry] = {}

    def get(self, kind: DataKind, now: float) -> CacheEntry | None:
        """Return the entry for *kind* if it is at most ``ttl`` seconds old.

        Expired entries are reported exactly like missing ones.
        """
        entry = self._entries.get(kind)
        if entry is None:
            return None
        age = now - entry.fetched_at
        if age > self.ttl:
            logger.info(
                "Cache data for %s is outdated (age %.1fs > ttl %.1fs)", kind, age, self.ttl
            )
            return None
        return entry

    def put(self, kind: DataKind, value: object, fetched_at: float) -> CacheEntry:
        """Store *value* for *kind*, replacing any previous entry."""
        entry = CacheEntry(value, fetched_at)
        self._entries[kind] = entry
        return entry

    def entries(self) -> dict[DataKind, CacheEntry]:
        """Return a shallow copy of all entries, expired ones included."""
        return dict(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
