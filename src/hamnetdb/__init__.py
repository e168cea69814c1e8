"""HamnetDB data access with a time-bounded cache."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("hamnetdb-cache")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
