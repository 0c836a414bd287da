import pytest
from pydantic import ValidationError

from portfolio.exceptions import ConfigurationError
from portfolio.settings import LoggingSettings, ManifestSettings, load_storage_settings

R2_ENV = {
    "R2_ACCOUNT_ID": "acct",
    "R2_ACCESS_KEY_ID": "key",
    "R2_SECRET_ACCESS_KEY": "secret",
    "R2_BUCKET_NAME": "photos",
    "R2_PUBLIC_URL": "https://cdn.example.com/",
}


@pytest.fixture
def r2_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name, value in R2_ENV.items():
        monkeypatch.setenv(name, value)
    return monkeypatch


def test_load_from_environment(r2_env):
    settings = load_storage_settings()
    assert settings.bucket_name == "photos"
    assert settings.endpoint_url == "https://acct.r2.cloudflarestorage.com"
    assert settings.base_url == "https://cdn.example.com"


@pytest.mark.parametrize("missing", ["R2_SECRET_ACCESS_KEY", "R2_PUBLIC_URL"])
def test_missing_variable_is_named(r2_env, missing):
    r2_env.delenv(missing)
    with pytest.raises(ConfigurationError, match=missing):
        load_storage_settings()


def test_empty_variable_is_rejected(r2_env):
    r2_env.setenv("R2_BUCKET_NAME", "")
    with pytest.raises(ConfigurationError, match="R2_BUCKET_NAME"):
        load_storage_settings()


@pytest.mark.parametrize(
    "endpoint,expected",
    [
        ("minio.local:9000", "https://minio.local:9000"),
        ("http://localhost:9000", "http://localhost:9000"),
    ],
)
def test_explicit_endpoint(storage_settings, endpoint, expected):
    settings = storage_settings.model_copy(update={"endpoint": endpoint})
    assert settings.endpoint_url == expected


def test_manifest_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    settings = ManifestSettings()
    assert settings.max_photos == 500
    assert settings.cache_max_age == 300
    assert settings.photo_cache_max_age == 31536000


def test_logging_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_COLORED", "false")
    settings = LoggingSettings()
    assert settings.level == "DEBUG"
    assert settings.colored is False


def test_logging_settings_reject_unknown_level(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    with pytest.raises(ValidationError):
        LoggingSettings()
