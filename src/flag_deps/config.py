"""Runtime settings read from the environment (and an optional .env file)."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .exceptions import ConfigError

REPORT_FORMATS = ("html", "markdown")


@dataclass
class Settings:
    output_dir: str = "output"
    top_n: int = 5
    report_format: str = "html"
    image_dpi: int = 150


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}", cause=e) from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def get_settings() -> Settings:
    """Load settings, letting FLAG_DEPS_* environment variables override defaults."""
    load_dotenv()

    report_format = os.getenv("FLAG_DEPS_REPORT_FORMAT", "html").lower()
    if report_format not in REPORT_FORMATS:
        raise ConfigError(
            f"FLAG_DEPS_REPORT_FORMAT must be one of {', '.join(REPORT_FORMATS)}, "
            f"got {report_format!r}"
        )

    return Settings(
        output_dir=os.getenv("FLAG_DEPS_OUTPUT_DIR", "output"),
        top_n=_int_env("FLAG_DEPS_TOP_N", 5),
        report_format=report_format,
        image_dpi=_int_env("FLAG_DEPS_IMAGE_DPI", 150),
    )
