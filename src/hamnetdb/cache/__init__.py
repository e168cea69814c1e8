"""Time-bounded cache in front of an upstream HamnetDB accessor.

This package re-exports the public names so that
``from hamnetdb.cache import CachingHamnetDbAccessor`` works without
knowing the module layout.
"""

from hamnetdb.cache._config import (  # noqa: F401
    MINIMUM_PREEMPTIVE_TTL,
    PREEMPTIVE_LEAD,
    CacheConfiguration,
)
from hamnetdb.cache._store import CacheEntry, DataKind, TypedResultStore  # noqa: F401
from hamnetdb.cache.accessor import CacheEntryInfo, CachingHamnetDbAccessor  # noqa: F401
