"""Tests for environment configuration."""

import os

import pytest

from projectsync.config import ConfigError, load_settings, parse_bool
from projectsync.sync.fetcher import PROJECTS_ZIP_URL


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate settings from the developer's environment and .env file."""
    monkeypatch.chdir(tmp_path)
    for name in [
        "ZIP_URL",
        "BASE_PATH",
        "APP_URL",
        "FALLBACK_PATH",
        "USE_FALLBACK",
        "TIMEOUT",
        "LOG_LEVEL",
        "DEBUG",
        "LOG_FILE",
    ]:
        monkeypatch.delenv(f"PROJECTSYNC_{name}", raising=False)


def test_defaults():
    settings = load_settings()
    assert settings.zip_url == PROJECTS_ZIP_URL
    assert settings.base_path == "/projects"
    assert settings.use_fallback is True
    assert settings.log_level == "INFO"


def test_environment_values(monkeypatch):
    monkeypatch.setenv("PROJECTSYNC_ZIP_URL", "https://mirror.example.org/projects.zip")
    monkeypatch.setenv("PROJECTSYNC_USE_FALLBACK", "no")
    monkeypatch.setenv("PROJECTSYNC_TIMEOUT", "5")
    monkeypatch.setenv("PROJECTSYNC_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.zip_url == "https://mirror.example.org/projects.zip"
    assert settings.use_fallback is False
    assert settings.timeout == 5.0
    assert settings.log_level == "DEBUG"


def test_dotenv_file_is_read(tmp_path):
    (tmp_path / ".env").write_text("PROJECTSYNC_BASE_PATH=/course\n")
    try:
        assert load_settings().base_path == "/course"
    finally:
        os.environ.pop("PROJECTSYNC_BASE_PATH", None)


def test_overrides_win(monkeypatch):
    monkeypatch.setenv("PROJECTSYNC_BASE_PATH", "/env")
    assert load_settings(base_path="/cli").base_path == "/cli"
    assert load_settings(base_path=None).base_path == "/env"


@pytest.mark.parametrize("name, value", [("PROJECTSYNC_TIMEOUT", "soon"), ("PROJECTSYNC_LOG_LEVEL", "LOUD")])
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError):
        load_settings()


def test_fetcher_and_options():
    settings = load_settings(app_url="https://ide.example.org/web-ide/cpu", base_path="/p/")
    assert settings.fetcher().fallback_location == "https://ide.example.org/web-ide/projects.zip"
    options = settings.options(skip_existing=False)
    assert options.base_path == "/p"
    assert options.skip_existing is False

    local = load_settings(fallback_path="/srv/projects.zip")
    assert local.fetcher().fallback_location == "/srv/projects.zip"


def test_parse_bool():
    assert parse_bool("True") and parse_bool("1") and parse_bool("yes")
    assert not parse_bool("off")
