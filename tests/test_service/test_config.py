"""Tests for service configuration."""

import pytest

from mydata.service.config import DEFAULT_CORS, Settings, load_settings

_ENV = [
    "REPOSITORY",
    "HOST",
    "PORT",
    "CONFIG_PATH",
    "FS_LOCATION",
    "DOCUMENT_URL",
    "DB_NAME",
    "LOAD_TIMEOUT",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings()

        assert settings.repository == "filesystem"
        assert settings.host == "localhost"
        assert settings.port == 4242
        assert settings.config_path == "/etc/config"
        assert settings.fs_location == "default"
        assert settings.document_url == "sqlite:///data"
        assert settings.db_name == "MyData"
        assert settings.load_timeout is None
        assert settings.log_level == "INFO"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("REPOSITORY", "document")
        monkeypatch.setenv("HOST", "myTestHost")
        monkeypatch.setenv("PORT", "4243")
        monkeypatch.setenv("FS_LOCATION", "my/explicit/location")
        monkeypatch.setenv("DOCUMENT_URL", "sqlite:////var/lib/mydata")
        monkeypatch.setenv("DB_NAME", "TestDb")
        monkeypatch.setenv("LOAD_TIMEOUT", "2.5")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = load_settings()

        assert settings.repository == "document"
        assert settings.host == "myTestHost"
        assert settings.port == 4243
        assert settings.fs_location == "my/explicit/location"
        assert settings.document_url == "sqlite:////var/lib/mydata"
        assert settings.db_name == "TestDb"
        assert settings.load_timeout == 2.5
        assert settings.log_level == "DEBUG"

    def test_invalid_numbers_fall_back(self, monkeypatch):
        monkeypatch.setenv("PORT", "not-a-port")
        monkeypatch.setenv("LOAD_TIMEOUT", "soon")

        settings = load_settings()

        assert settings.port == 4242
        assert settings.load_timeout is None

    def test_cached_until_cleared(self, monkeypatch):
        first = load_settings()
        monkeypatch.setenv("HOST", "elsewhere")
        assert load_settings() is first

        load_settings.cache_clear()
        assert load_settings().host == "elsewhere"


class TestCorsMethods:
    def test_default_without_file(self, tmp_path):
        assert Settings(config_path=str(tmp_path)).cors_methods() == DEFAULT_CORS

    def test_read_from_config_file(self, tmp_path):
        (tmp_path / "cors").write_text("DELETE, POST,GET\n", encoding="utf-8")
        assert Settings(config_path=str(tmp_path)).cors_methods() == "DELETE,POST,GET"
