"""Publishers - Imperative Shell.

A publisher receives a composed announcement and makes it visible:
printed to a stream in simulate mode, tweeted with a map in publish mode,
or dropped when no mode is selected.
"""

import logging
import sys
import threading
from dataclasses import dataclass
from typing import Protocol, TextIO

from chronobot.core.config import Config, TwitterCredentials, MODE_PUBLISH, MODE_SIMULATE
from chronobot.core.slots import SlotCandidate
from chronobot.core.static_map import create_map_config
from chronobot.shell.static_map_client import StaticMapClient
from chronobot.shell.twitter_client import TwitterClient


logger = logging.getLogger(__name__)


@dataclass
class PublishResult:
    """Outcome of publishing one announcement.

    Attributes:
        success: Whether the announcement went out
        post_id: Identifier of the created post, if any
        error: Error message if failed
    """
    success: bool
    post_id: str | None = None
    error: str | None = None


class Publisher(Protocol):
    """Anything able to publish a SlotCandidate."""

    def publish(self, candidate: SlotCandidate) -> PublishResult:
        ...


class ConsolePublisher:
    """Writes announcements to a text stream (dry run)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout
        self._lock = threading.Lock()

    def publish(self, candidate: SlotCandidate) -> PublishResult:
        # One write per message so concurrent polls never interleave lines
        with self._lock:
            self.stream.write(candidate.message + "\n\n")
            self.stream.flush()
        return PublishResult(success=True)


class NullPublisher:
    """Drops announcements. Used when no run mode is selected."""

    def publish(self, candidate: SlotCandidate) -> PublishResult:
        logger.debug("No run mode selected, not publishing %s", candidate.identity)
        return PublishResult(success=True)


class TwitterPublisher:
    """Tweets announcements with a map of the center attached."""

    def __init__(
        self,
        twitter_client: TwitterClient,
        static_map_client: StaticMapClient | None = None,
    ) -> None:
        self.twitter_client = twitter_client
        self.static_map_client = static_map_client or StaticMapClient()

    def _upload_map(self, candidate: SlotCandidate) -> list[str] | None:
        """Render and upload the map; None if either step fails."""
        map_config = create_map_config(candidate.latitude, candidate.longitude)
        map_result = self.static_map_client.generate_map(map_config)

        if not (map_result.success and map_result.image_bytes):
            logger.warning(
                "Failed to generate map image: %s (continuing without image)",
                map_result.error,
            )
            return None

        upload_result = self.twitter_client.upload_media(map_result.image_bytes)
        if not (upload_result.success and upload_result.media_id):
            logger.warning(
                "Failed to upload map image: %s (continuing without image)",
                upload_result.error,
            )
            return None

        return [upload_result.media_id]

    def publish(self, candidate: SlotCandidate) -> PublishResult:
        media_ids = self._upload_map(candidate)
        response = self.twitter_client.send_tweet(candidate.message, media_ids=media_ids)
        return PublishResult(
            success=response.success,
            post_id=response.tweet_id,
            error=response.error,
        )


def build_publisher(config: Config, stream: TextIO | None = None) -> Publisher:
    """Create the publisher matching the configured run mode.

    Args:
        config: Application configuration
        stream: Output stream for simulate mode (default: stdout)

    Returns:
        Publisher instance
    """
    if config.mode == MODE_SIMULATE:
        return ConsolePublisher(stream)

    if config.mode == MODE_PUBLISH:
        credentials = config.twitter_credentials
        if credentials is None:
            # Posts will be rejected by the API and logged as failures
            logger.error("Publish mode selected but Twitter credentials are missing")
            credentials = TwitterCredentials("", "", "", "")
        return TwitterPublisher(TwitterClient(credentials))

    return NullPublisher()
