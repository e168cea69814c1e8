"""Tests for settings loading and the accessor factory."""

import logging

import pytest
from pydantic import ValidationError

from hamnetdb.cache import CachingHamnetDbAccessor
from hamnetdb.json_api import JsonHamnetDbAccessor
from hamnetdb.provider import create_hamnet_db, setup_logging
from hamnetdb.settings import HamnetDbSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """Isolate from the developer's environment and any ``.env`` file."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "HAMNETDB_HOSTS_URL",
        "HAMNETDB_SUBNETS_URL",
        "HAMNETDB_SITES_URL",
        "HAMNETDB_REQUEST_TIMEOUT",
        "HAMNETDB_CACHE_TTL",
        "HAMNETDB_CACHE_PREEMPTIVE",
    ):
        monkeypatch.delenv(name, raising=False)


class TestHamnetDbSettings:
    def test_defaults(self) -> None:
        settings = HamnetDbSettings()
        assert settings.hosts_url.endswith("tab=host&json=1")
        assert settings.cache_ttl == 600
        assert not settings.cache_preemptive
        assert settings.request_timeout == 30

    def test_environment_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("HAMNETDB_HOSTS_URL", "http://local/hosts")
        monkeypatch.setenv("hamnetdb_cache_ttl", "300")
        monkeypatch.setenv("HAMNETDB_CACHE_PREEMPTIVE", "true")
        settings = HamnetDbSettings()
        assert settings.hosts_url == "http://local/hosts"
        config = settings.cache_configuration
        assert config.ttl == 300
        assert config.preemptive

    def test_env_file(self, tmp_path) -> None:
        (tmp_path / ".env").write_text("HAMNETDB_REQUEST_TIMEOUT=12\n", encoding="utf-8")
        assert HamnetDbSettings().request_timeout == 12

    def test_blank_url_rejected(self, monkeypatch) -> None:
        monkeypatch.setenv("HAMNETDB_SITES_URL", " ")
        with pytest.raises(ValidationError, match="HAMNETDB_SITES_URL"):
            HamnetDbSettings()

    @pytest.mark.parametrize(("name", "value"), [("cache_ttl", -1), ("request_timeout", 0)])
    def test_out_of_range_rejected(self, name, value) -> None:
        with pytest.raises(ValidationError):
            HamnetDbSettings(**{name: value})


class TestCreateHamnetDb:
    def test_builds_cache_over_json_accessor(self) -> None:
        settings = HamnetDbSettings(hosts_url="http://h", subnets_url="http://n",
                                    sites_url="http://s", request_timeout=7, cache_ttl=90)
        with create_hamnet_db(settings) as cache:
            assert isinstance(cache, CachingHamnetDbAccessor)
            assert isinstance(cache._upstream, JsonHamnetDbAccessor)
            assert cache._upstream.timeout == 7
            assert cache.configuration.ttl == 90
            assert not cache.preemptive
        assert cache.closed

    def test_preemptive_below_floor_degrades(self) -> None:
        with create_hamnet_db(HamnetDbSettings(cache_ttl=60, cache_preemptive=True)) as cache:
            assert not cache.preemptive


class TestSetupLogging:
    def test_configures_package_logger(self) -> None:
        app_logger = logging.getLogger("hamnetdb")
        handlers, level, propagate = app_logger.handlers[:], app_logger.level, app_logger.propagate
        try:
            setup_logging("debug")
            assert app_logger.level == logging.DEBUG
            assert len(app_logger.handlers) == 1
            assert not app_logger.propagate
        finally:
            app_logger.handlers = handlers
            app_logger.setLevel(level)
            app_logger.propagate = propagate
