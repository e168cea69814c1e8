"""Cache configuration and the preemptive-mode policy."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Preemptive refresh below this ttl would hammer the upstream source.
MINIMUM_PREEMPTIVE_TTL = 120.0  # 2 minutes

# The background timer fires this much before entries expire.
PREEMPTIVE_LEAD = 3.0


@dataclass(frozen=True)
class CacheConfiguration:
    """How long entries live and whether they are refreshed in the background.

    ``ttl`` is in seconds; negative values are clamped to zero.
    """

    ttl: float
    preemptive: bool = False

    def __post_init__(self) -> None:
        if self.ttl < 0:
            object.__setattr__(self, "ttl", 0.0)

    @property
    def refresh_interval(self) -> float:
        """Period of the background timer (only meaningful when preemptive)."""
        return self.ttl - PREEMPTIVE_LEAD if self.preemptive else self.ttl

    def normalized(self) -> CacheConfiguration:
        """Return this configuration with the preemptive floor applied.

        A preemptive request with ``ttl`` below :data:`MINIMUM_PREEMPTIVE_TTL`
        degrades to pull-only mode and logs a warning instead of failing.
        """
        if self.preemptive and self.ttl < MINIMUM_PREEMPTIVE_TTL:
            logger.warning(
                "Requested cache ttl in preemptive mode (%.0fs) < minimum ttl for "
                "preemptive mode (%.0fs): disabling preemptive mode",
                self.ttl,
                MINIMUM_PREEMPTIVE_TTL,
            )
            return dataclasses.replace(self, preemptive=False)
        return self
