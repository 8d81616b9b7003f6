"""Chronodose slot extraction and message formatting - Pure functions.

This module turns an AppointmentCenter into at most one announcement
candidate. All functions are pure; the reference time is passed in.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo

from chronobot.core.center import CHRONODOSE, AppointmentCenter


@dataclass(frozen=True)
class SlotCandidate:
    """An announcement ready to be deduplicated and published.

    Attributes:
        identity: Deduplication key (center, next appointment, doses)
        message: Fully composed announcement text
        latitude: Center latitude (map marker)
        longitude: Center longitude (map marker)
        doses: Number of chronodoses available
    """
    identity: str
    message: str
    latitude: float
    longitude: float
    doses: int

    @property
    def coordinates(self) -> tuple[float, float]:
        """Return (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


def count_chronodoses(center: AppointmentCenter) -> int:
    """Sum available slots over the center's chronodose buckets."""
    return sum(s.total for s in center.schedules if s.name == CHRONODOSE)


def has_chronodoses(center: AppointmentCenter) -> bool:
    """Check whether any chronodose bucket has at least one slot."""
    return any(s.name == CHRONODOSE and s.total > 0 for s in center.schedules)


def compute_slot_id(center: AppointmentCenter, doses: int) -> str:
    """Build the deduplication key for a center's current availability.

    Pure function. A change in the next appointment time or the dose
    count yields a different key.
    """
    return f"{center.url} - {center.next_appointment} - {doses}"


def parse_timestamp(value: str, tz: tzinfo) -> datetime:
    """Parse an ISO-8601 timestamp from the feed.

    Naive timestamps are interpreted in the given timezone.

    Raises:
        ValueError: If the value is not ISO-8601
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def format_relative_date(appointment: datetime, now: datetime, tz: tzinfo) -> str:
    """Render an appointment time relative to now.

    Pure function. Both datetimes are compared as calendar days in tz.

    Examples:
        "aujourd'hui à 9:05", "demain à 14:30", "le 24/05/2021 à 8:00"
    """
    local = appointment.astimezone(tz)
    today = now.astimezone(tz).date()
    time_label = f"{local.hour}:{local.minute:02d}"

    if local.date() == today:
        return f"aujourd'hui à {time_label}"
    if local.date() == today + timedelta(days=1):
        return f"demain à {time_label}"
    return f"le {local:%d/%m/%Y} à {time_label}"


def format_message(center: AppointmentCenter, doses: int, date_label: str) -> str:
    """Compose the announcement text for a center.

    Pure function.

    Args:
        center: The center with available chronodoses
        doses: Number of available doses
        date_label: Relative date of the next appointment

    Returns:
        Multi-line announcement
    """
    if doses == 1:
        intro = f"{doses} dose est disponible {date_label}"
    else:
        intro = f"{doses} doses sont disponibles {date_label}"

    venue = f"à {center.name}"
    if center.vaccine_types:
        venue += f" ({', '.join(center.vaccine_types)})"

    lines = [intro, venue, center.url]
    if center.address:
        lines.append(center.address)

    return "\n".join(lines)


def extract_candidate(
    center: AppointmentCenter,
    min_doses: int,
    tz: tzinfo,
    now: datetime,
) -> SlotCandidate | None:
    """Turn a center into an announcement candidate.

    Pure function.

    Args:
        center: Center to evaluate
        min_doses: Minimum number of chronodoses worth announcing
        tz: Timezone used for the relative date
        now: Reference time

    Returns:
        SlotCandidate, or None if there is nothing to announce
    """
    doses = count_chronodoses(center)
    if doses <= 0 or doses < min_doses:
        return None

    if not center.next_appointment:
        return None

    try:
        appointment = parse_timestamp(center.next_appointment, tz)
    except ValueError:
        return None

    message = format_message(center, doses, format_relative_date(appointment, now, tz))

    return SlotCandidate(
        identity=compute_slot_id(center, doses),
        message=message,
        latitude=center.latitude,
        longitude=center.longitude,
        doses=doses,
    )


def matches_vaccine_types(center: AppointmentCenter, wanted: tuple[str, ...]) -> bool:
    """Check whether a center offers one of the wanted vaccines.

    An empty wanted list matches every center.
    """
    if not wanted:
        return True
    return any(v in wanted for v in center.vaccine_types)


def is_within_horizon(
    center: AppointmentCenter,
    now: datetime,
    max_hours: float | None,
    tz: tzinfo,
) -> bool:
    """Check whether the next appointment is at most max_hours away.

    A None limit matches every center. Centers without a parseable next
    appointment never match a limit.
    """
    if max_hours is None:
        return True
    if not center.next_appointment:
        return False
    try:
        appointment = parse_timestamp(center.next_appointment, tz)
    except ValueError:
        return False
    return appointment - now <= timedelta(hours=max_hours)
