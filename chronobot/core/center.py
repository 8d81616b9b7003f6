"""Appointment center data models and parsing - Pure functions.

This module handles parsing ViteMaDose area documents into typed
AppointmentCenter objects. All functions are pure with no side effects.
"""

from dataclasses import dataclass
from typing import Any


# Schedule label used by the feed for last-minute slots
CHRONODOSE = "chronodose"


@dataclass(frozen=True)
class ScheduleEntry:
    """A time-window bucket of available appointments.

    Attributes:
        name: Category label (e.g., "chronodose", "1_days")
        start: Window start (ISO-8601 string, as published)
        end: Window end (ISO-8601 string, as published)
        total: Number of available slots in the window
    """
    name: str
    start: str
    end: str
    total: int


@dataclass(frozen=True)
class AppointmentCenter:
    """Immutable vaccination center data model.

    Attributes:
        name: Center name
        url: Booking page URL (canonical identifier)
        latitude: Center latitude
        longitude: Center longitude
        city: City name
        address: Postal address
        schedules: Appointment schedule buckets, in feed order
        next_appointment: Next appointment timestamp (ISO-8601), if known
        vaccine_types: Vaccine labels offered by the center
    """
    name: str
    url: str
    latitude: float
    longitude: float
    city: str
    address: str
    schedules: tuple[ScheduleEntry, ...] = ()
    next_appointment: str | None = None
    vaccine_types: tuple[str, ...] = ()

    @property
    def coordinates(self) -> tuple[float, float]:
        """Return (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


def format_department_code(code: str | int) -> str:
    """Format an area code the way the feed names its documents.

    Pure function. Numeric codes below 10 are zero-padded to two digits;
    non-numeric codes (e.g., Corsica's "2A") are returned unchanged.

    Args:
        code: Department code

    Returns:
        Code as used in the feed file name
    """
    text = str(code).strip()
    if text.isdigit():
        return f"{int(text):02d}"
    return text


def parse_schedule_entry(data: dict[str, Any]) -> ScheduleEntry:
    """Parse a single appointment schedule bucket."""
    return ScheduleEntry(
        name=str(data["name"]),
        start=str(data.get("from", "")),
        end=str(data.get("to", "")),
        total=int(data.get("total") or 0),
    )


def parse_center(data: dict[str, Any]) -> AppointmentCenter | None:
    """Parse a single center record into an AppointmentCenter.

    Pure function: takes raw dict, returns typed center or None if the
    record is missing required fields.

    Args:
        data: Center record from the feed's "centres_disponibles" list

    Returns:
        AppointmentCenter or None if parsing fails
    """
    try:
        location = data["location"]
        metadata = data.get("metadata") or {}

        vaccine_types = data.get("vaccine_type") or ()
        if isinstance(vaccine_types, str):
            vaccine_types = (vaccine_types,)

        return AppointmentCenter(
            name=str(data["nom"]),
            url=str(data["url"]),
            latitude=float(location["latitude"]),
            longitude=float(location["longitude"]),
            city=str(location.get("city") or ""),
            address=str(metadata.get("address") or ""),
            schedules=tuple(
                parse_schedule_entry(s)
                for s in data.get("appointment_schedules") or []
            ),
            next_appointment=data.get("prochain_rdv"),
            vaccine_types=tuple(str(v) for v in vaccine_types),
        )
    except (KeyError, TypeError, ValueError, AttributeError):
        return None


def parse_centers(document: dict[str, Any]) -> list[AppointmentCenter]:
    """Parse a feed document into a list of centers.

    Pure function: invalid records are dropped, and a missing or
    non-list centres_disponibles yields no centers.

    Args:
        document: Full JSON document for one department

    Returns:
        List of valid AppointmentCenter objects, in feed order
    """
    records = document.get("centres_disponibles")
    if not isinstance(records, list):
        return []

    centers = []

    for record in records:
        center = parse_center(record)
        if center is not None:
            centers.append(center)

    return centers
