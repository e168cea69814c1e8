"""Wiring of settings, the JSON accessor and the cache."""

from __future__ import annotations

import logging

from hamnetdb.cache import CachingHamnetDbAccessor
from hamnetdb.json_api import JsonHamnetDbAccessor
from hamnetdb.settings import HamnetDbSettings

logger = logging.getLogger(__name__)


def setup_logging(level: int | str = logging.WARNING) -> None:
    """Configure the root ``hamnetdb`` logger with a single stream handler."""
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)-8s %(name)s - %(message)s"))
    app_logger = logging.getLogger("hamnetdb")
    app_logger.handlers = [handler]
    app_logger.setLevel(level.upper() if isinstance(level, str) else level)
    app_logger.propagate = False

    # Silence noisy third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def create_hamnet_db(settings: HamnetDbSettings | None = None) -> CachingHamnetDbAccessor:
    """Return a cached HamnetDB accessor built from *settings*.

    Settings are read from the environment when not given.  The caller owns
    the returned cache and must :meth:`~CachingHamnetDbAccessor.close` it.
    """
    settings = settings or HamnetDbSettings()
    upstream = JsonHamnetDbAccessor(
        settings.hosts_url,
        settings.subnets_url,
        settings.sites_url,
        timeout=settings.request_timeout,
    )
    config = settings.cache_configuration
    logger.info(
        "Creating HamnetDB cache (ttl=%.0fs, preemptive=%s) for %s",
        config.ttl,
        config.preemptive,
        settings.hosts_url,
    )
    return CachingHamnetDbAccessor(upstream, config)
