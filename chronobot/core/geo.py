"""Geographic calculations - Pure functions.

This module provides the distance test used to keep only appointment
centers close to the configured search center.
All functions are pure with no side effects.
"""

import math


# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0


def calculate_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Great-circle distance in km between two (lat, lon) points.

    Used to compare each vaccination center against the search center.
    Coordinates are not range-checked.
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    half_dphi = math.radians(lat2 - lat1) / 2
    half_dlambda = math.radians(lon2 - lon1) / 2

    h = math.sin(half_dphi) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(half_dlambda) ** 2
    # Floating point can push h slightly above 1 for antipodal points
    h = min(max(h, 0.0), 1.0)

    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def is_within_radius(
    latitude: float,
    longitude: float,
    center_lat: float,
    center_lon: float,
    radius_km: float,
) -> bool:
    """Check if a point is within a radius of a center point.

    Pure function.

    Args:
        latitude: Latitude of the point to check
        longitude: Longitude of the point to check
        center_lat: Center point latitude
        center_lon: Center point longitude
        radius_km: Radius in kilometers

    Returns:
        True if the point is within radius (inclusive)
    """
    distance = calculate_distance(center_lat, center_lon, latitude, longitude)
    return distance <= radius_km
