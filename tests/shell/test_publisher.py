"""Tests for publishers.

Shell clients are mocked; no network calls.
"""

import io
from unittest.mock import Mock

import pytest

from chronobot.core.config import Config, TwitterCredentials, MODE_NONE, MODE_PUBLISH, MODE_SIMULATE
from chronobot.core.slots import SlotCandidate
from chronobot.shell.publisher import (
    ConsolePublisher,
    NullPublisher,
    TwitterPublisher,
    build_publisher,
)
from chronobot.shell.static_map_client import MapImageResult
from chronobot.shell.twitter_client import MediaUploadResponse, TwitterResponse


@pytest.fixture
def candidate():
    return SlotCandidate(
        identity="https://c - 2021-05-20T14:30:00+02:00 - 2",
        message="2 doses sont disponibles aujourd'hui à 14:30\nà Centre\nhttps://c\nParis",
        latitude=48.8566,
        longitude=2.3522,
        doses=2,
    )


@pytest.fixture
def twitter_client():
    client = Mock()
    client.upload_media.return_value = MediaUploadResponse(success=True, status_code=200, media_id="m1")
    client.send_tweet.return_value = TwitterResponse(success=True, status_code=201, tweet_id="t1")
    return client


@pytest.fixture
def static_map_client():
    client = Mock()
    client.generate_map.return_value = MapImageResult(success=True, image_bytes=b"PNG")
    return client


class TestConsolePublisher:
    """Tests for ConsolePublisher."""

    def test_writes_message_to_stream(self, candidate):
        stream = io.StringIO()

        result = ConsolePublisher(stream).publish(candidate)

        assert result.success is True
        assert candidate.message in stream.getvalue()


class TestNullPublisher:
    """Tests for NullPublisher."""

    def test_reports_success_without_output(self, candidate, capsys):
        result = NullPublisher().publish(candidate)

        assert result.success is True
        assert capsys.readouterr().out == ""


class TestTwitterPublisher:
    """Tests for TwitterPublisher."""

    def test_posts_with_map(self, candidate, twitter_client, static_map_client):
        publisher = TwitterPublisher(twitter_client, static_map_client)

        result = publisher.publish(candidate)

        assert result.success is True
        assert result.post_id == "t1"
        map_config = static_map_client.generate_map.call_args.args[0]
        assert (map_config.latitude, map_config.longitude) == (48.8566, 2.3522)
        twitter_client.upload_media.assert_called_once_with(b"PNG")
        twitter_client.send_tweet.assert_called_once_with(candidate.message, media_ids=["m1"])

    def test_posts_without_image_when_map_fails(self, candidate, twitter_client, static_map_client):
        static_map_client.generate_map.return_value = MapImageResult(success=False, error="tiles")

        result = TwitterPublisher(twitter_client, static_map_client).publish(candidate)

        assert result.success is True
        twitter_client.upload_media.assert_not_called()
        twitter_client.send_tweet.assert_called_once_with(candidate.message, media_ids=None)

    def test_posts_without_image_when_upload_fails(self, candidate, twitter_client, static_map_client):
        twitter_client.upload_media.return_value = MediaUploadResponse(
            success=False, status_code=500, error="boom",
        )

        TwitterPublisher(twitter_client, static_map_client).publish(candidate)

        twitter_client.send_tweet.assert_called_once_with(candidate.message, media_ids=None)

    def test_tweet_failure_is_reported(self, candidate, twitter_client, static_map_client):
        twitter_client.send_tweet.return_value = TwitterResponse(
            success=False, status_code=429, error="Rate limit exceeded",
        )

        result = TwitterPublisher(twitter_client, static_map_client).publish(candidate)

        assert result.success is False
        assert result.error == "Rate limit exceeded"


class TestBuildPublisher:
    """Tests for build_publisher() function."""

    def test_simulate_mode(self):
        stream = io.StringIO()
        publisher = build_publisher(Config(mode=MODE_SIMULATE), stream)
        assert isinstance(publisher, ConsolePublisher)
        assert publisher.stream is stream

    def test_publish_mode(self):
        config = Config(mode=MODE_PUBLISH, twitter_credentials=TwitterCredentials("k", "s", "t", "ts"))
        publisher = build_publisher(config)
        assert isinstance(publisher, TwitterPublisher)
        assert publisher.twitter_client.credentials.api_key == "k"

    def test_publish_mode_without_credentials_still_builds(self):
        """Missing credentials surface as failed posts, not a crash."""
        publisher = build_publisher(Config(mode=MODE_PUBLISH))
        assert isinstance(publisher, TwitterPublisher)

    def test_no_mode(self):
        assert isinstance(build_publisher(Config(mode=MODE_NONE)), NullPublisher)
