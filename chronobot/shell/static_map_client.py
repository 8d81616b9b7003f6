"""Static Map Client - Imperative Shell.

This module renders the map image attached to each announcement using
OpenStreetMap tiles. Map parameters come from the core module.
"""

import io
import logging
from dataclasses import dataclass

from staticmap import StaticMap, CircleMarker

from chronobot.core.static_map import MapConfig


logger = logging.getLogger(__name__)


DEFAULT_TILE_URL = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"

# Seconds allowed for each tile download
DEFAULT_TILE_TIMEOUT = 10


@dataclass
class MapImageResult:
    """Result of map image generation.

    Attributes:
        success: Whether the image was generated successfully
        image_bytes: PNG image data if successful
        error: Error message if failed
    """
    success: bool
    image_bytes: bytes | None = None
    error: str | None = None


class StaticMapClient:
    """Client for generating static map images.

    This is part of the imperative shell - it handles I/O (fetching map tiles
    and rendering images).
    """

    def __init__(
        self,
        tile_url: str | None = None,
        tile_timeout: int = DEFAULT_TILE_TIMEOUT,
    ) -> None:
        """Initialize static map client.

        Args:
            tile_url: Custom tile URL template. Defaults to OpenStreetMap.
            tile_timeout: Per-tile request timeout in seconds
        """
        self.tile_url = tile_url or DEFAULT_TILE_URL
        self.tile_timeout = tile_timeout

    def generate_map(self, config: MapConfig) -> MapImageResult:
        """Render a map centered on a vaccination center.

        This method performs I/O (fetches map tiles from tile server).

        Args:
            config: Map configuration from core module

        Returns:
            MapImageResult with image bytes or error
        """
        logger.info(
            "Generating static map for (%.4f, %.4f) at zoom %d",
            config.latitude,
            config.longitude,
            config.zoom,
        )

        try:
            static_map = StaticMap(
                config.width,
                config.height,
                url_template=self.tile_url,
                tile_request_timeout=self.tile_timeout,
            )

            # White ring first so it renders behind the colored marker
            coordinate = (config.longitude, config.latitude)  # (lon, lat) order for staticmap
            static_map.add_marker(CircleMarker(coordinate, "white", config.marker_radius + 3))
            static_map.add_marker(CircleMarker(coordinate, config.marker_color, config.marker_radius))

            image = static_map.render(zoom=config.zoom)

            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
            image_bytes = buffer.getvalue()

            logger.info("Generated map image: %d bytes", len(image_bytes))

            return MapImageResult(success=True, image_bytes=image_bytes)

        except Exception as e:
            # staticmap surfaces tile download and rendering errors as assorted types
            logger.error("Failed to generate map: %s", str(e))
            return MapImageResult(success=False, error=str(e))
