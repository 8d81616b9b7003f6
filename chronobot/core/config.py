"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


# Run modes
MODE_SIMULATE = "simulate"
MODE_PUBLISH = "publish"
MODE_NONE = "none"

# Accepted spellings of each mode (ENV=TEST / ENV=PROD historically)
MODE_ALIASES = {
    "test": MODE_SIMULATE,
    "simulate": MODE_SIMULATE,
    "prod": MODE_PUBLISH,
    "publish": MODE_PUBLISH,
}

DEFAULT_FEED_BASE_URL = "https://vitemadose.gitlab.io/vitemadose"
DEFAULT_TIMEZONE = "Europe/Paris"
DEFAULT_INTERVAL_SECONDS = 60


def parse_mode(value: str | None) -> str:
    """Map a mode flag to a run mode.

    Pure function. Unknown or missing values disable publishing.
    """
    if not value:
        return MODE_NONE
    return MODE_ALIASES.get(value.strip().lower(), MODE_NONE)


@dataclass(frozen=True)
class TwitterCredentials:
    """Twitter API credentials for OAuth 1.0a authentication.

    Attributes:
        api_key: Twitter API Key (Consumer Key)
        api_secret: Twitter API Secret (Consumer Secret)
        access_token: User's Access Token
        access_token_secret: User's Access Token Secret
    """
    api_key: str
    api_secret: str
    access_token: str
    access_token_secret: str


@dataclass(frozen=True)
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        center_latitude: Search center latitude (None if not configured)
        center_longitude: Search center longitude (None if not configured)
        max_radius_km: Search radius around the center (None if not configured)
        departments: Department codes to poll
        check_interval_seconds: Seconds between two sweeps
        min_doses: Minimum number of chronodoses worth announcing
        timezone: IANA timezone for the announced dates
        mode: One of MODE_SIMULATE, MODE_PUBLISH, MODE_NONE
        twitter_credentials: Credentials used in publish mode
        vaccine_types: Only announce centers offering one of these (empty = all)
        max_hours_ahead: Only announce appointments within this horizon
        feed_base_url: Base URL of the appointment feed
    """
    center_latitude: float | None = None
    center_longitude: float | None = None
    max_radius_km: float | None = None
    departments: tuple[str, ...] = ()
    check_interval_seconds: int = DEFAULT_INTERVAL_SECONDS
    min_doses: int = 0
    timezone: str = DEFAULT_TIMEZONE
    mode: str = MODE_NONE
    twitter_credentials: TwitterCredentials | None = None
    vaccine_types: tuple[str, ...] = ()
    max_hours_ahead: float | None = None
    feed_base_url: str = DEFAULT_FEED_BASE_URL

    @property
    def has_search_area(self) -> bool:
        """True if center and radius are all configured."""
        return (
            self.center_latitude is not None
            and self.center_longitude is not None
            and self.max_radius_km is not None
        )

    @property
    def tz(self) -> ZoneInfo:
        """Timezone object for the configured timezone name."""
        return ZoneInfo(self.timezone)


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_coordinates(lat: float, lon: float, field_name: str) -> list[ValidationError]:
    """Validate latitude/longitude coordinates.

    Pure function.

    Args:
        lat: Latitude value
        lon: Longitude value
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not -90 <= lat <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {lat} out of range [-90, 90]",
            severity="warning",
        ))

    if not -180 <= lon <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {lon} out of range [-180, 180]",
            severity="warning",
        ))

    return errors


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function. Only a missing department list is a critical error;
    everything else degrades to a warning so the loop can still start.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    if not config.departments:
        errors.append(ValidationError(
            field="departments",
            message="No departments configured",
        ))

    if not config.has_search_area:
        errors.append(ValidationError(
            field="center",
            message="Search center or radius not set; no center will match",
            severity="warning",
        ))
    else:
        errors.extend(validate_coordinates(
            config.center_latitude,
            config.center_longitude,
            "center",
        ))
        if config.max_radius_km < 0:
            errors.append(ValidationError(
                field="max_radius_km",
                message=f"Radius must not be negative, got {config.max_radius_km}",
                severity="warning",
            ))

    try:
        ZoneInfo(config.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        errors.append(ValidationError(
            field="timezone",
            message=f"Unknown timezone {config.timezone!r}",
            severity="warning",
        ))

    if config.mode == MODE_PUBLISH and config.twitter_credentials is None:
        errors.append(ValidationError(
            field="twitter_credentials",
            message="Publish mode without Twitter credentials; posts will fail",
            severity="warning",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
