"""Unit tests for local timezone configuration."""
import logging
import os
from datetime import datetime, timedelta

import pytest
from dateutil import tz

from src.utils.config import LOCAL_TZ_ENV, get_local_timezone, read_env_file, reset_config_cache


def _offset(zone):
    return datetime(2020, 1, 15, 12, 0, tzinfo=zone).utcoffset()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run in an empty directory with the timezone variable unset."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(LOCAL_TZ_ENV, "")
    monkeypatch.delenv(LOCAL_TZ_ENV)
    reset_config_cache()
    yield tmp_path
    reset_config_cache()


class TestGetLocalTimezone:
    """Test get_local_timezone function."""

    def test_reads_environment_variable(self, clean_env, monkeypatch):
        """Test zone name is taken from the environment."""
        monkeypatch.setenv(LOCAL_TZ_ENV, "Asia/Taipei")
        assert _offset(get_local_timezone()) == timedelta(hours=8)

    def test_utc_name(self, clean_env, monkeypatch):
        """Test UTC is accepted."""
        monkeypatch.setenv(LOCAL_TZ_ENV, "UTC")
        assert _offset(get_local_timezone()) == timedelta(0)

    def test_unset_falls_back_to_system_zone(self, clean_env):
        """Test system local zone is used when unset."""
        assert isinstance(get_local_timezone(), tz.tzlocal)

    def test_unknown_name_falls_back_with_warning(self, clean_env, monkeypatch, caplog):
        """Test unknown zone names log a warning and use the system zone."""
        monkeypatch.setenv(LOCAL_TZ_ENV, "Mars/Olympus_Mons")
        with caplog.at_level(logging.WARNING, logger="src.utils.config"):
            zone = get_local_timezone()
        assert isinstance(zone, tz.tzlocal)
        assert "Mars/Olympus_Mons" in caplog.text

    def test_result_is_cached(self, clean_env, monkeypatch):
        """Test zone is resolved once until the cache is reset."""
        monkeypatch.setenv(LOCAL_TZ_ENV, "Asia/Taipei")
        first = get_local_timezone()
        monkeypatch.setenv(LOCAL_TZ_ENV, "UTC")
        assert get_local_timezone() is first

        reset_config_cache()
        assert _offset(get_local_timezone()) == timedelta(0)


class TestEnvFile:
    """Test .env file loading."""

    def test_reads_env_file(self, clean_env):
        """Test zone name is read from .env when not in the environment."""
        (clean_env / ".env").write_text(
            "# local settings\n"
            f"{LOCAL_TZ_ENV}=\"Asia/Tokyo\"\n"
            "UNRELATED=value\n",
            encoding="utf-8"
        )
        assert _offset(get_local_timezone()) == timedelta(hours=9)

    def test_environment_takes_precedence(self, clean_env, monkeypatch):
        """Test real environment variables win over .env."""
        (clean_env / ".env").write_text(f"{LOCAL_TZ_ENV}=Asia/Tokyo\n", encoding="utf-8")
        monkeypatch.setenv(LOCAL_TZ_ENV, "UTC")
        assert _offset(get_local_timezone()) == timedelta(0)

    def test_ignores_unrelated_keys(self, clean_env):
        """Test only the timezone key is exported from .env."""
        (clean_env / ".env").write_text("UNRELATED_DATE_KEY=1\n", encoding="utf-8")
        get_local_timezone()
        assert "UNRELATED_DATE_KEY" not in os.environ


class TestReadEnvFile:
    """Test read_env_file function."""

    def test_reads_only_requested_keys(self, tmp_path):
        """Test unrequested keys, comments and malformed lines are skipped."""
        env_path = tmp_path / ".env"
        env_path.write_text(
            "# comment\n"
            "\n"
            "NO_EQUALS_SIGN\n"
            " FIRST = 'one' \n"
            "SECOND=two=2\n"
            "OTHER=skip\n",
            encoding="utf-8"
        )
        assert read_env_file(env_path, ["FIRST", "SECOND"]) == {"FIRST": "one", "SECOND": "two=2"}

    def test_missing_file_is_empty(self, tmp_path):
        """Test a missing file yields no values."""
        assert read_env_file(tmp_path / "missing.env", [LOCAL_TZ_ENV]) == {}
