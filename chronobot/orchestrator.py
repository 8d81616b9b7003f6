"""Orchestrator - Wires Functional Core and Imperative Shell.

This module coordinates the flow of data between the pure functional
core and the I/O-performing shell components: fetch a department,
keep nearby centers with chronodoses, deduplicate, publish.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime

import requests

from chronobot.core.center import AppointmentCenter, parse_centers
from chronobot.core.config import Config
from chronobot.core.dedup import DedupRegistry
from chronobot.core.geo import is_within_radius
from chronobot.core.slots import (
    SlotCandidate,
    extract_candidate,
    has_chronodoses,
    is_within_horizon,
    matches_vaccine_types,
)
from chronobot.shell.feed_client import FeedClient
from chronobot.shell.publisher import Publisher, build_publisher


logger = logging.getLogger(__name__)


# Upper bound on concurrent center evaluations within one department
MAX_CENTER_WORKERS = 16


@dataclass
class CenterOutcome:
    """What happened to one center during a poll.

    Attributes:
        candidate: Announcement built for the center, if any
        is_new: True if this poll claimed the candidate's identity
        published: True if the publisher reported success
        error: Publisher error message if publishing failed
    """
    candidate: SlotCandidate | None = None
    is_new: bool = False
    published: bool = False
    error: str | None = None


@dataclass
class PollResult:
    """Result of polling one department.

    Attributes:
        department: Department code that was polled
        centers_fetched: Centers parsed from the feed document
        centers_nearby: Centers within radius with chronodoses
        candidates: Centers that produced an announcement
        new_candidates: Announcements not seen before
        published: Announcements published successfully
        failed: Announcements whose publication failed
        error: Fetch error, if the department could not be polled
    """
    department: str
    centers_fetched: int = 0
    centers_nearby: int = 0
    candidates: int = 0
    new_candidates: int = 0
    published: int = 0
    failed: int = 0
    error: str | None = None

    @property
    def success(self) -> bool:
        """Returns True if the department was fetched."""
        return self.error is None

    @property
    def summary(self) -> str:
        """Human-readable summary of the poll."""
        if self.error:
            return f"Department {self.department}: failed ({self.error})"
        return (
            f"Department {self.department}: "
            f"{self.centers_fetched} centers, "
            f"{self.centers_nearby} nearby with chronodoses, "
            f"{self.new_candidates} new, "
            f"{self.published} published, "
            f"{self.failed} failed"
        )


@dataclass
class SweepResult:
    """Result of one sweep over all configured departments."""
    polls: list[PollResult] = field(default_factory=list)

    @property
    def published(self) -> int:
        return sum(p.published for p in self.polls)

    @property
    def failed_departments(self) -> list[str]:
        return [p.department for p in self.polls if not p.success]

    @property
    def summary(self) -> str:
        """Human-readable summary of the sweep."""
        return (
            f"Polled {len(self.polls)} departments, "
            f"{sum(p.new_candidates for p in self.polls)} new slots, "
            f"{self.published} published, "
            f"{len(self.failed_departments)} departments failed"
        )


class Orchestrator:
    """Coordinates chronodose monitoring and announcements.

    This class wires together:
    - Feed client (fetches department documents)
    - Core functions (parsing, distance, extraction)
    - Dedup registry (shared by every poll, including overlapping sweeps)
    - Publisher (stdout or Twitter, depending on run mode)
    """

    def __init__(
        self,
        config: Config,
        registry: DedupRegistry | None = None,
        feed_client: FeedClient | None = None,
        publisher: Publisher | None = None,
    ) -> None:
        """Initialize orchestrator with configuration.

        Args:
            config: Application configuration
            registry: Dedup registry (created if not provided)
            feed_client: Feed client (created if not provided)
            publisher: Publisher (created from the run mode if not provided)
        """
        self.config = config
        self.registry = registry if registry is not None else DedupRegistry()
        self.feed_client = feed_client or FeedClient(config.feed_base_url)
        self.publisher = publisher or build_publisher(config)

    def _is_nearby(self, center: AppointmentCenter) -> bool:
        """Check if a center is inside the configured search area."""
        if not self.config.has_search_area:
            return False
        return is_within_radius(
            center.latitude,
            center.longitude,
            self.config.center_latitude,
            self.config.center_longitude,
            self.config.max_radius_km,
        )

    def _is_eligible(self, center: AppointmentCenter, now: datetime) -> bool:
        """Apply every filter that runs before slot extraction."""
        return (
            self._is_nearby(center)
            and has_chronodoses(center)
            and matches_vaccine_types(center, self.config.vaccine_types)
            and is_within_horizon(center, now, self.config.max_hours_ahead, self.config.tz)
        )

    def _process_center(self, center: AppointmentCenter, now: datetime) -> CenterOutcome:
        """Extract, deduplicate and publish one center's announcement.

        The identity is claimed before publishing, so a failed publication
        is not retried on the next sweep.
        """
        candidate = extract_candidate(
            center,
            min_doses=self.config.min_doses,
            tz=self.config.tz,
            now=now,
        )
        if candidate is None:
            return CenterOutcome()

        if not self.registry.claim(candidate.identity):
            logger.debug("Already announced: %s", candidate.identity)
            return CenterOutcome(candidate=candidate)

        logger.info("New chronodose slot: %s", candidate.identity)
        result = self.publisher.publish(candidate)

        if result.success:
            logger.info("Published %s (%s)", candidate.identity, result.post_id or "no post id")
        else:
            logger.error("Failed to publish %s: %s", candidate.identity, result.error)

        return CenterOutcome(
            candidate=candidate,
            is_new=True,
            published=result.success,
            error=result.error,
        )

    def poll_area(self, department: str) -> PollResult:
        """Poll one department and announce its new chronodoses.

        Never raises: fetch failures and per-center failures are logged
        and reflected in the result.

        Args:
            department: Department code

        Returns:
            PollResult with details of what happened
        """
        result = PollResult(department=department)

        try:
            document = self.feed_client.fetch_department(department)
        except (requests.RequestException, ValueError) as e:
            logger.error("Failed to fetch department %s: %s", department, e)
            result.error = str(e)
            return result

        centers = parse_centers(document)
        result.centers_fetched = len(centers)

        now = datetime.now(self.config.tz)
        nearby = [c for c in centers if self._is_eligible(c, now)]
        result.centers_nearby = len(nearby)

        if not nearby:
            logger.info("%s", result.summary)
            return result

        workers = min(len(nearby), MAX_CENTER_WORKERS)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self._process_center, center, now): center
                for center in nearby
            }

        for future, center in futures.items():
            try:
                outcome = future.result()
            except Exception:
                logger.exception("Failed to process center %s", center.url)
                result.failed += 1
                continue

            if outcome.candidate is not None:
                result.candidates += 1
            if outcome.is_new:
                result.new_candidates += 1
                if outcome.published:
                    result.published += 1
                else:
                    result.failed += 1

        logger.info("%s", result.summary)
        return result

    def sweep(self) -> SweepResult:
        """Poll every configured department concurrently.

        Returns:
            SweepResult with one PollResult per department
        """
        departments = self.config.departments
        sweep = SweepResult()

        if not departments:
            return sweep

        with ThreadPoolExecutor(max_workers=len(departments)) as executor:
            futures = [
                (department, executor.submit(self.poll_area, department))
                for department in departments
            ]

        for department, future in futures:
            try:
                sweep.polls.append(future.result())
            except Exception as e:
                logger.exception("Unexpected error polling department %s", department)
                sweep.polls.append(PollResult(department=department, error=str(e)))

        logger.info(
            "Sweep complete: %s (%d slots known)",
            sweep.summary,
            len(self.registry),
        )
        return sweep
