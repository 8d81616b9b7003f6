"""Functional Core - Pure functions with no side effects.

This module contains the business logic:
- Feed document parsing
- Geo/distance calculations
- Chronodose extraction and message formatting
- Deduplication registry

Everything here except the registry is deterministic and has no I/O.
"""

from chronobot.core.center import AppointmentCenter, ScheduleEntry, parse_centers
from chronobot.core.geo import calculate_distance, is_within_radius
from chronobot.core.slots import SlotCandidate, extract_candidate, has_chronodoses
from chronobot.core.dedup import DedupRegistry

__all__ = [
    # Center
    "AppointmentCenter",
    "ScheduleEntry",
    "parse_centers",
    # Geo
    "calculate_distance",
    "is_within_radius",
    # Slots
    "SlotCandidate",
    "extract_candidate",
    "has_chronodoses",
    # Dedup
    "DedupRegistry",
]
