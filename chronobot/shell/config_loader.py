"""Configuration Loader - Imperative Shell.

This module handles loading configuration from environment variables
or a YAML file. All I/O is contained here.

Models (Config, TwitterCredentials) are defined in chronobot/core/config.py
to avoid information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from chronobot.core.config import (
    Config,
    TwitterCredentials,
    DEFAULT_FEED_BASE_URL,
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_TIMEZONE,
    parse_mode,
)


logger = logging.getLogger(__name__)


# Environment variable -> config key
ENV_KEYS = {
    "CENTER_LAT": "center_latitude",
    "CENTER_LON": "center_longitude",
    "MAX_RADIUS_KM": "max_radius_km",
    "DEPARTMENTS_TO_CHECK": "departments",
    "CHECK_INTERVAL_SEC": "check_interval_seconds",
    "MIN_DOSES": "min_doses",
    "TIMEZONE": "timezone",
    "ENV": "mode",
    "VACCINE_TYPES": "vaccine_types",
    "MAX_HOURS_AHEAD": "max_hours_ahead",
    "FEED_BASE_URL": "feed_base_url",
}

# Environment variable -> Twitter credential key
TWITTER_ENV_KEYS = {
    "APP_KEY": "api_key",
    "APP_SECRET": "api_secret",
    "ACCESS_TOKEN": "access_token",
    "ACCESS_SECRET": "access_token_secret",
}


class ConfigError(Exception):
    """Raised when the configuration cannot be used at all."""


def _resolve_value(value: Any) -> Any:
    """Resolve a ${VAR} placeholder from the environment.

    Non-string values and plain strings are returned unchanged; unset
    variables leave the placeholder in place.
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


def _parse_float(data: dict[str, Any], key: str) -> float | None:
    """Parse an optional float, warning on invalid values."""
    value = data.get(key)
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid value for %s: %r, ignoring", key, value)
        return None


def _parse_int(data: dict[str, Any], key: str, default: int) -> int:
    """Parse a positive int; missing, non-positive or invalid values fall back to default."""
    value = data.get(key)
    if value is None or value == "":
        return default
    try:
        parsed = int(float(value))
    except (TypeError, ValueError, OverflowError):
        logger.warning("Invalid value for %s: %r, using %d", key, value, default)
        return default
    return parsed if parsed > 0 else default


def _parse_list(value: Any) -> tuple[str, ...]:
    """Parse a comma-separated string or a list into a tuple of strings."""
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(v) for v in value]
    return tuple(item.strip() for item in items if item.strip())


def _parse_timezone(value: Any) -> str:
    """Return a usable IANA timezone name, falling back to the default."""
    if not value:
        return DEFAULT_TIMEZONE
    try:
        ZoneInfo(str(value))
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using %s", value, DEFAULT_TIMEZONE)
        return DEFAULT_TIMEZONE
    return str(value)


def _parse_credentials(data: dict[str, Any] | None) -> TwitterCredentials | None:
    """Parse Twitter credentials; None unless all four are present."""
    if not data:
        return None

    resolved = {key: _resolve_value(value) for key, value in data.items()}
    try:
        credentials = TwitterCredentials(
            api_key=resolved["api_key"],
            api_secret=resolved["api_secret"],
            access_token=resolved["access_token"],
            access_token_secret=resolved["access_token_secret"],
        )
    except KeyError as e:
        logger.warning("Twitter credentials missing key: %s", e)
        return None

    if not all(vars(credentials).values()):
        logger.warning("Twitter credentials contain empty values")
        return None

    return credentials


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary (YAML keys)

    Returns:
        Parsed Config object

    Raises:
        ConfigError: If no department is configured
    """
    data = {key: _resolve_value(value) for key, value in data.items()}

    departments = _parse_list(data.get("departments"))
    if not departments:
        raise ConfigError("please set the DEPARTMENTS_TO_CHECK env variable")

    return Config(
        center_latitude=_parse_float(data, "center_latitude"),
        center_longitude=_parse_float(data, "center_longitude"),
        max_radius_km=_parse_float(data, "max_radius_km"),
        departments=departments,
        check_interval_seconds=_parse_int(data, "check_interval_seconds", DEFAULT_INTERVAL_SECONDS),
        min_doses=_parse_int(data, "min_doses", 0),
        timezone=_parse_timezone(data.get("timezone")),
        mode=parse_mode(data.get("mode")),
        twitter_credentials=_parse_credentials(data.get("twitter")),
        vaccine_types=_parse_list(data.get("vaccine_types")),
        max_hours_ahead=_parse_float(data, "max_hours_ahead"),
        feed_base_url=data.get("feed_base_url") or DEFAULT_FEED_BASE_URL,
    )


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Environment variables:
        CENTER_LAT, CENTER_LON: Search center
        MAX_RADIUS_KM: Search radius in kilometers
        DEPARTMENTS_TO_CHECK: Comma-separated department codes (required)
        CHECK_INTERVAL_SEC: Seconds between sweeps (default: 60)
        MIN_DOSES: Minimum doses worth announcing (default: 0)
        TIMEZONE: IANA timezone (default: Europe/Paris)
        ENV: TEST to print announcements, PROD to tweet them
        APP_KEY, APP_SECRET, ACCESS_TOKEN, ACCESS_SECRET: Twitter credentials
        VACCINE_TYPES: Comma-separated vaccine filter
        MAX_HOURS_AHEAD: Only announce appointments within this many hours
        FEED_BASE_URL: Appointment feed base URL

    Returns:
        Config object from environment

    Raises:
        ConfigError: If DEPARTMENTS_TO_CHECK is not set
    """
    data: dict[str, Any] = {
        key: os.environ[env_name]
        for env_name, key in ENV_KEYS.items()
        if env_name in os.environ
    }

    twitter = {
        key: os.environ[env_name]
        for env_name, key in TWITTER_ENV_KEYS.items()
        if env_name in os.environ
    }
    if twitter:
        data["twitter"] = twitter

    return load_config_from_dict(data)


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file, or the environment.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var; without it the
                    environment variables are used.

    Returns:
        Parsed Config object

    Raises:
        ConfigError: If the file is missing or no department is configured
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH")

    if not config_path:
        return load_config_from_env()

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ConfigError(f"Config file is empty or not a mapping: {path}")

    config = load_config_from_dict(data)

    logger.info(
        "Loaded config: %d departments, mode %s",
        len(config.departments),
        config.mode,
    )

    return config
