"""Static map configuration - Pure functions.

This module provides pure functions for generating static map parameters.
The actual image generation (I/O) is handled by the shell layer.
"""

from dataclasses import dataclass


DEFAULT_WIDTH = 600
DEFAULT_HEIGHT = 400

# City-level view, enough to locate the center within its town
DEFAULT_ZOOM = 11

MARKER_COLOR = "#2563eb"
MARKER_RADIUS = 10


@dataclass(frozen=True)
class MapConfig:
    """Immutable configuration for a static map image.

    Attributes:
        latitude: Center latitude
        longitude: Center longitude
        zoom: Zoom level (1-18)
        width: Image width in pixels
        height: Image height in pixels
        marker_color: Hex color for the center marker
        marker_radius: Radius of the marker circle in pixels
    """
    latitude: float
    longitude: float
    zoom: int
    width: int
    height: int
    marker_color: str
    marker_radius: int


def create_map_config(
    latitude: float,
    longitude: float,
    zoom: int = DEFAULT_ZOOM,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
) -> MapConfig:
    """Create map configuration for a vaccination center.

    Pure function. Zoom is clamped to the tile server's 1-18 range.

    Args:
        latitude: Center latitude
        longitude: Center longitude
        zoom: Zoom level (default: 11)
        width: Image width in pixels (default: 600)
        height: Image height in pixels (default: 400)

    Returns:
        MapConfig with all parameters set
    """
    return MapConfig(
        latitude=latitude,
        longitude=longitude,
        zoom=min(max(zoom, 1), 18),
        width=width,
        height=height,
        marker_color=MARKER_COLOR,
        marker_radius=MARKER_RADIUS,
    )
