"""HamnetDB settings loaded from environment variables."""

import logging

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hamnetdb.cache import CacheConfiguration

logger = logging.getLogger(__name__)

HAMNETDB_BASE_URL = "https://hamnetdb.net/csv.cgi"


class HamnetDbSettings(BaseSettings):
    """Configuration for the HamnetDB accessor and its cache.

    Values are read from ``HAMNETDB_*`` environment variables
    (case-insensitive) and optionally from a ``.env`` file in the working
    directory.
    """

    hosts_url: str = f"{HAMNETDB_BASE_URL}?tab=host&json=1"
    subnets_url: str = f"{HAMNETDB_BASE_URL}?tab=subnet&json=1"
    sites_url: str = f"{HAMNETDB_BASE_URL}?tab=site&json=1"
    request_timeout: float = Field(default=30, gt=0)

    cache_ttl: float = Field(default=600, ge=0)
    cache_preemptive: bool = False

    model_config = SettingsConfigDict(
        env_prefix="HAMNETDB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _validate_urls(self) -> "HamnetDbSettings":
        missing = [
            f"HAMNETDB_{name.upper()}"
            for name in ("hosts_url", "subnets_url", "sites_url")
            if not getattr(self, name).strip()
        ]
        if missing:
            raise ValueError(f"{', '.join(missing)} must not be empty.")
        return self

    @property
    def cache_configuration(self) -> CacheConfiguration:
        return CacheConfiguration(ttl=self.cache_ttl, preemptive=self.cache_preemptive)
