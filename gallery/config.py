"""Configuration management for the gallery generator.

Loads settings from:
1. .env file (if present)
2. Environment variables
3. Explicit overrides (CLI options)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from dotenv import find_dotenv, load_dotenv

from gallery.releases import DEFAULT_RELEASE_LIMIT, RELEASE_SOURCES


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


# Setting name -> environment variable
REQUIRED_ENV = {
    "extensions_dir": "EXTENSIONS_DIR",
    "gallery_config": "GALLERY_CONFIG",
    "output_path": "EXTENSIONS_JSON",
    "repo": "GITHUB_REPOSITORY",
}

OPTIONAL_ENV = {
    "release_source": "RELEASE_SOURCE",
    "release_limit": "RELEASE_LIMIT",
    "log_level": "LOG_LEVEL",
}


@dataclass
class GallerySettings:
    """Settings for one generation run."""

    extensions_dir: Path
    gallery_config: Path
    output_path: Path
    repo: str  # "owner/repo"
    release_source: str = "list"  # "list" (gh release list) | "api" (gh api)
    release_limit: int = DEFAULT_RELEASE_LIMIT
    log_level: str = "INFO"


def load_env_file() -> None:
    """Load a .env file from the working directory or its parents.

    Variables already set in the process environment are kept.
    """
    load_dotenv(find_dotenv(usecwd=True))


def load_settings(
    env: Mapping[str, str] | None = None,
    **overrides: Any,
) -> GallerySettings:
    """Load settings from the environment.

    Args:
        env: Mapping to read variables from (default: os.environ after
            loading .env).
        **overrides: Setting values that win over the environment. None
            values are ignored.

    Returns:
        GallerySettings.

    Raises:
        ConfigError: If required settings are missing or a value is invalid.
    """
    if env is None:
        load_env_file()
        env = os.environ

    values: dict[str, Any] = {}
    for key, var in {**REQUIRED_ENV, **OPTIONAL_ENV}.items():
        value = env.get(var)
        if value:
            values[key] = value

    for key, value in overrides.items():
        if value is not None:
            values[key] = value

    missing = [var for key, var in REQUIRED_ENV.items() if not values.get(key)]
    if missing:
        raise ConfigError(
            "\n".join(f"{var} environment variable is required" for var in missing)
        )

    source = values.get("release_source", "list")
    if source not in RELEASE_SOURCES:
        raise ConfigError(
            f"Invalid RELEASE_SOURCE: {source}. Use: {', '.join(RELEASE_SOURCES)}"
        )

    limit = _int_or_none(values.get("release_limit", DEFAULT_RELEASE_LIMIT))
    if limit is None or limit < 1:
        raise ConfigError(
            f"Invalid RELEASE_LIMIT: {values.get('release_limit')}. Use a positive integer."
        )

    return GallerySettings(
        extensions_dir=Path(values["extensions_dir"]),
        gallery_config=Path(values["gallery_config"]),
        output_path=Path(values["output_path"]),
        repo=str(values["repo"]),
        release_source=source,
        release_limit=limit,
        log_level=str(values.get("log_level", "INFO")).upper(),
    )


def _int_or_none(value: Any) -> int | None:
    """Convert value to int, or return None."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
