"""Tests for environment settings."""

import pytest

from flag_deps.config import get_settings
from flag_deps.exceptions import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("FLAG_DEPS_OUTPUT_DIR", "FLAG_DEPS_TOP_N",
                 "FLAG_DEPS_REPORT_FORMAT", "FLAG_DEPS_IMAGE_DPI"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = get_settings()
    assert settings.output_dir == "output"
    assert settings.top_n == 5
    assert settings.report_format == "html"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("FLAG_DEPS_TOP_N", "3")
    monkeypatch.setenv("FLAG_DEPS_REPORT_FORMAT", "Markdown")
    settings = get_settings()
    assert settings.top_n == 3
    assert settings.report_format == "markdown"


def test_invalid_integer(monkeypatch):
    monkeypatch.setenv("FLAG_DEPS_TOP_N", "many")
    with pytest.raises(ConfigError):
        get_settings()


def test_invalid_format(monkeypatch):
    monkeypatch.setenv("FLAG_DEPS_REPORT_FORMAT", "pdf")
    with pytest.raises(ConfigError):
        get_settings()
