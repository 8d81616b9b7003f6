"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- ViteMaDose feed client (HTTP)
- Twitter/X client (HTTP)
- Static map rendering (tile server)
- Publishers (stdout / Twitter)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from chronobot.shell.feed_client import FeedClient
from chronobot.shell.twitter_client import TwitterClient
from chronobot.shell.static_map_client import StaticMapClient
from chronobot.shell.publisher import build_publisher
from chronobot.shell.config_loader import load_config, ConfigError

__all__ = [
    "FeedClient",
    "TwitterClient",
    "StaticMapClient",
    "build_publisher",
    "load_config",
    "ConfigError",
]
