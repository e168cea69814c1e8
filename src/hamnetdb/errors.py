"""Exception types raised by the HamnetDB accessors and the cache."""


class HamnetDbError(Exception):
    """Base class for all errors raised by this package."""


class UpstreamError(HamnetDbError):
    """Fetching data from the upstream HamnetDB source failed.

    Covers network errors, non-success HTTP status codes and payloads that
    cannot be decoded.  The cache never retries on its own; the next query
    (or the next preemptive pass) tries again.
    """


class InvalidArgumentError(HamnetDbError, ValueError):
    """A query argument is missing or cannot be interpreted."""


class CacheClosedError(HamnetDbError, RuntimeError):
    """The cache has been closed and must not be queried any more."""
