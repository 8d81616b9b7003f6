"""Twitter/X API Client - Imperative Shell.

This module posts chronodose announcements to Twitter/X.
All I/O is contained here; message formatting is in the core module.
"""

import base64
import logging
from dataclasses import dataclass

import requests
from requests_oauthlib import OAuth1

from chronobot.core.config import TwitterCredentials


logger = logging.getLogger(__name__)


# Default timeout for API requests (seconds)
DEFAULT_TIMEOUT = 10

# Twitter API v2 endpoint for posting tweets
TWITTER_API_URL = "https://api.twitter.com/2/tweets"

# Twitter API v1.1 endpoint for media upload
TWITTER_MEDIA_UPLOAD_URL = "https://upload.twitter.com/1.1/media/upload.json"

# Maximum tweet length in characters
MAX_TWEET_LENGTH = 280


@dataclass
class TwitterResponse:
    """Response from Twitter API.

    Attributes:
        success: Whether the tweet was posted successfully
        status_code: HTTP status code
        tweet_id: ID of the created tweet if successful
        error: Error message if failed
    """
    success: bool
    status_code: int
    tweet_id: str | None = None
    error: str | None = None


@dataclass
class MediaUploadResponse:
    """Response from Twitter media upload API.

    Attributes:
        success: Whether the upload was successful
        status_code: HTTP status code
        media_id: Media ID string if successful (use this in tweets)
        error: Error message if failed
    """
    success: bool
    status_code: int
    media_id: str | None = None
    error: str | None = None


def _describe_failure(response: requests.Response) -> str:
    """Turn a non-2xx Twitter response into an error message."""
    if response.status_code == 401:
        return "Authentication failed - check API credentials"
    if response.status_code == 429:
        return "Rate limit exceeded"
    if response.status_code == 413:
        return "Media file too large (max 5MB for images)"
    if response.status_code == 403:
        try:
            detail = response.json().get("detail", response.text)
        except ValueError:
            detail = response.text
        return f"Forbidden: {detail}"
    return response.text


class TwitterClient:
    """Client for posting tweets via Twitter API v2.

    This is part of the imperative shell - it handles HTTP I/O.
    Uses OAuth 1.0a User Context for posting on behalf of the bot account.
    """

    def __init__(
        self,
        credentials: TwitterCredentials,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize Twitter client.

        Args:
            credentials: Twitter API credentials
            timeout: Request timeout in seconds
        """
        self.credentials = credentials
        self.timeout = timeout

    def _get_oauth(self) -> OAuth1:
        """Create OAuth1 authentication object."""
        return OAuth1(
            self.credentials.api_key,
            client_secret=self.credentials.api_secret,
            resource_owner_key=self.credentials.access_token,
            resource_owner_secret=self.credentials.access_token_secret,
        )

    def send_tweet(
        self,
        text: str,
        media_ids: list[str] | None = None,
    ) -> TwitterResponse:
        """Post a tweet to Twitter/X.

        This method performs HTTP I/O.

        Args:
            text: Tweet text
            media_ids: Optional list of media IDs to attach

        Returns:
            TwitterResponse indicating success or failure
        """
        logger.info("Posting tweet to Twitter/X")

        if len(text) > MAX_TWEET_LENGTH:
            logger.warning("Tweet exceeds %d characters, API may reject it", MAX_TWEET_LENGTH)

        payload: dict = {"text": text}
        if media_ids:
            payload["media"] = {"media_ids": media_ids}

        try:
            response = requests.post(
                TWITTER_API_URL,
                json=payload,
                auth=self._get_oauth(),
                timeout=self.timeout,
            )
        except requests.Timeout:
            logger.error("Twitter API request timed out")
            return TwitterResponse(success=False, status_code=0, error="Request timed out")
        except requests.RequestException as e:
            logger.error("Twitter API request failed: %s", str(e))
            return TwitterResponse(success=False, status_code=0, error=str(e))

        if response.status_code in (200, 201):
            tweet_id = response.json().get("data", {}).get("id")
            logger.info("Tweet posted successfully: %s", tweet_id)
            return TwitterResponse(
                success=True,
                status_code=response.status_code,
                tweet_id=tweet_id,
            )

        error = _describe_failure(response)
        logger.error("Twitter API returned %d: %s", response.status_code, error)
        return TwitterResponse(
            success=False,
            status_code=response.status_code,
            error=error,
        )

    def upload_media(
        self,
        image_bytes: bytes,
    ) -> MediaUploadResponse:
        """Upload an image to Twitter for use in tweets.

        Uses Twitter API v1.1 media upload endpoint.
        This method performs HTTP I/O.

        Args:
            image_bytes: Raw image data (PNG, JPEG, GIF, or WEBP)

        Returns:
            MediaUploadResponse with media_id or error
        """
        logger.info("Uploading media to Twitter (%d bytes)", len(image_bytes))

        media_data = base64.b64encode(image_bytes).decode("utf-8")

        try:
            response = requests.post(
                TWITTER_MEDIA_UPLOAD_URL,
                data={"media_data": media_data},
                auth=self._get_oauth(),
                timeout=self.timeout * 3,  # Longer timeout for uploads
            )
        except requests.Timeout:
            logger.error("Twitter media upload timed out")
            return MediaUploadResponse(success=False, status_code=0, error="Request timed out")
        except requests.RequestException as e:
            logger.error("Twitter media upload failed: %s", str(e))
            return MediaUploadResponse(success=False, status_code=0, error=str(e))

        if response.status_code in (200, 201):
            media_id = response.json().get("media_id_string")
            logger.info("Media uploaded successfully: %s", media_id)
            return MediaUploadResponse(
                success=True,
                status_code=response.status_code,
                media_id=media_id,
            )

        error = _describe_failure(response)
        logger.warning("Twitter media upload returned %d: %s", response.status_code, error)
        return MediaUploadResponse(
            success=False,
            status_code=response.status_code,
            error=error,
        )
