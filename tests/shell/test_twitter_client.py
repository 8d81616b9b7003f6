"""Tests for Twitter/X API client.

Uses the `responses` library to mock HTTP requests.
"""

import base64
import json
from urllib.parse import parse_qs

import requests
import responses

from chronobot.core.config import TwitterCredentials
from chronobot.shell.twitter_client import (
    TwitterClient,
    TWITTER_API_URL,
    TWITTER_MEDIA_UPLOAD_URL,
)


# Test credentials
TEST_CREDS = TwitterCredentials(
    api_key="test_api_key",
    api_secret="test_api_secret",
    access_token="test_access_token",
    access_token_secret="test_access_token_secret",
)


class TestTwitterClientSendTweet:
    """Tests for TwitterClient.send_tweet()."""

    @responses.activate
    def test_successful_tweet_returns_success(self):
        """Successful tweet returns TwitterResponse with success=True."""
        responses.add(
            responses.POST,
            TWITTER_API_URL,
            json={"data": {"id": "1234567890"}},
            status=201,
        )

        result = TwitterClient(TEST_CREDS).send_tweet("3 doses sont disponibles")

        assert result.success is True
        assert result.status_code == 201
        assert result.tweet_id == "1234567890"
        assert result.error is None

    @responses.activate
    def test_sends_text_and_media_ids(self):
        """Media IDs are attached to the tweet payload."""
        responses.add(responses.POST, TWITTER_API_URL, json={"data": {"id": "1"}}, status=201)

        TwitterClient(TEST_CREDS).send_tweet("hello", media_ids=["42"])

        body = json.loads(responses.calls[0].request.body)
        assert body == {"text": "hello", "media": {"media_ids": ["42"]}}

    @responses.activate
    def test_signs_request_with_oauth1(self):
        responses.add(responses.POST, TWITTER_API_URL, json={"data": {"id": "1"}}, status=201)

        TwitterClient(TEST_CREDS).send_tweet("hello")

        auth_header = responses.calls[0].request.headers["Authorization"]
        assert auth_header.startswith("OAuth ")
        assert "test_api_key" in auth_header

    @responses.activate
    def test_rate_limit_returns_failure(self):
        responses.add(responses.POST, TWITTER_API_URL, json={}, status=429)

        result = TwitterClient(TEST_CREDS).send_tweet("hello")

        assert result.success is False
        assert result.status_code == 429
        assert result.error == "Rate limit exceeded"

    @responses.activate
    def test_auth_failure_returns_failure(self):
        responses.add(responses.POST, TWITTER_API_URL, json={}, status=401)

        result = TwitterClient(TEST_CREDS).send_tweet("hello")

        assert result.success is False
        assert "Authentication failed" in result.error

    @responses.activate
    def test_forbidden_includes_detail(self):
        responses.add(
            responses.POST,
            TWITTER_API_URL,
            json={"detail": "duplicate content"},
            status=403,
        )

        result = TwitterClient(TEST_CREDS).send_tweet("hello")

        assert result.error == "Forbidden: duplicate content"

    @responses.activate
    def test_connection_error_returns_failure(self):
        responses.add(
            responses.POST,
            TWITTER_API_URL,
            body=requests.ConnectionError("network down"),
        )

        result = TwitterClient(TEST_CREDS).send_tweet("hello")

        assert result.success is False
        assert result.status_code == 0
        assert "network down" in result.error

    @responses.activate
    def test_timeout_returns_failure(self):
        responses.add(responses.POST, TWITTER_API_URL, body=requests.Timeout())

        result = TwitterClient(TEST_CREDS).send_tweet("hello")

        assert result.success is False
        assert result.error == "Request timed out"


class TestTwitterClientUploadMedia:
    """Tests for TwitterClient.upload_media()."""

    @responses.activate
    def test_successful_upload_returns_media_id(self):
        responses.add(
            responses.POST,
            TWITTER_MEDIA_UPLOAD_URL,
            json={"media_id_string": "987654321"},
            status=200,
        )

        result = TwitterClient(TEST_CREDS).upload_media(b"PNG_DATA")

        assert result.success is True
        assert result.media_id == "987654321"

    @responses.activate
    def test_sends_base64_image(self):
        responses.add(
            responses.POST,
            TWITTER_MEDIA_UPLOAD_URL,
            json={"media_id_string": "1"},
            status=200,
        )

        TwitterClient(TEST_CREDS).upload_media(b"PNG_DATA")

        body = responses.calls[0].request.body
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        form = parse_qs(body)
        assert form["media_data"] == [base64.b64encode(b"PNG_DATA").decode("utf-8")]

    @responses.activate
    def test_too_large_returns_failure(self):
        responses.add(responses.POST, TWITTER_MEDIA_UPLOAD_URL, body="", status=413)

        result = TwitterClient(TEST_CREDS).upload_media(b"PNG_DATA")

        assert result.success is False
        assert "too large" in result.error

    @responses.activate
    def test_server_error_returns_failure(self):
        responses.add(responses.POST, TWITTER_MEDIA_UPLOAD_URL, body="oops", status=500)

        result = TwitterClient(TEST_CREDS).upload_media(b"PNG_DATA")

        assert result.success is False
        assert result.status_code == 500
        assert result.error == "oops"
