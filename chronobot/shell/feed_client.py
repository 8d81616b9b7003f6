"""ViteMaDose Feed Client - Imperative Shell.

This module handles HTTP communication with the appointment feed.
All I/O is contained here; business logic is in the core module.
"""

import logging
from typing import Any

import requests

from chronobot.core.center import format_department_code
from chronobot.core.config import DEFAULT_FEED_BASE_URL


logger = logging.getLogger(__name__)


# Default timeout for feed requests (seconds)
DEFAULT_TIMEOUT = 30


class FeedClient:
    """Client for fetching one department's appointment centers.

    This is part of the imperative shell - it handles HTTP I/O.
    The underlying requests.Session is shared by the poll threads.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_FEED_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize feed client.

        Args:
            base_url: Feed base URL (without trailing slash)
            timeout: Request timeout in seconds
            session: HTTP session (created if not provided)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def department_url(self, department: str | int) -> str:
        """Build the document URL for a department."""
        return f"{self.base_url}/{format_department_code(department)}.json"

    def fetch_department(self, department: str | int) -> dict[str, Any]:
        """Fetch the raw document for one department.

        This method performs HTTP I/O.

        Args:
            department: Department code

        Returns:
            Parsed JSON document

        Raises:
            requests.RequestException: If the request fails
            ValueError: If the body is not a JSON object or its center list
                is not a list
        """
        url = self.department_url(department)

        logger.info("Fetching department %s", department)

        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()

        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected document type for department {department}")

        centers = data.get("centres_disponibles") or []
        if not isinstance(centers, list):
            raise ValueError(f"Unexpected centres_disponibles type for department {department}")

        logger.info(
            "Fetched department %s: %d centers",
            department,
            len(centers),
        )

        return data
