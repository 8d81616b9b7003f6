#!/usr/bin/env python3
"""Preview or post a test chronodose announcement.

⚠️  WARNING: with --publish this posts to the REAL Twitter account!

This script builds a synthetic center with available chronodoses and runs
it through the production extraction and publishing code. A [TEST] marker
is prepended to the message.

Usage:
    # Print the announcement (default, no network)
    python scripts/send_test_post.py

    # Render the map only and save it next to the script
    python scripts/send_test_post.py --save-map map.png

    # Post to Twitter (requires APP_KEY/APP_SECRET/ACCESS_TOKEN/ACCESS_SECRET)
    python scripts/send_test_post.py --publish

Environment:
    TIMEZONE: Timezone used for the relative date (default: Europe/Paris)
"""

import argparse
import dataclasses
import logging
import os
import sys
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from chronobot.core.center import AppointmentCenter, ScheduleEntry, CHRONODOSE
from chronobot.core.config import DEFAULT_TIMEZONE, MODE_PUBLISH, MODE_SIMULATE
from chronobot.core.slots import extract_candidate
from chronobot.core.static_map import create_map_config
from chronobot.shell.config_loader import ConfigError, load_config_from_dict, TWITTER_ENV_KEYS
from chronobot.shell.publisher import build_publisher
from chronobot.shell.static_map_client import StaticMapClient

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def create_test_center(
    doses: int = 3,
    latitude: float = 48.8566,
    longitude: float = 2.3522,
) -> AppointmentCenter:
    """Create a synthetic center with chronodoses one hour from now."""
    next_appointment = datetime.now(timezone.utc) + timedelta(hours=1)
    return AppointmentCenter(
        name="Centre de vaccination de test",
        url="https://vitemadose.covidtracker.fr/",
        latitude=latitude,
        longitude=longitude,
        city="Paris",
        address="1 Place de l'Hôtel de Ville, 75004 Paris",
        schedules=(
            ScheduleEntry(name=CHRONODOSE, start="", end="", total=doses),
        ),
        next_appointment=next_appointment.isoformat(),
        vaccine_types=("Pfizer-BioNTech",),
    )


def main():
    parser = argparse.ArgumentParser(
        description="Preview or post a test chronodose announcement",
        epilog="⚠️  WARNING: --publish posts publicly! Preview first.",
    )
    parser.add_argument("--doses", type=int, default=3, help="Number of doses (default: 3)")
    parser.add_argument("--latitude", type=float, default=48.8566, help="Center latitude")
    parser.add_argument("--longitude", type=float, default=2.3522, help="Center longitude")
    parser.add_argument("--save-map", metavar="PATH", help="Render the map image to PATH")
    parser.add_argument(
        "--publish",
        action="store_true",
        help="Post to Twitter (POSTS PUBLICLY - requires explicit opt-in)",
    )
    args = parser.parse_args()

    load_dotenv()

    tz_name = os.environ.get("TIMEZONE", DEFAULT_TIMEZONE)
    tz = ZoneInfo(tz_name)

    center = create_test_center(args.doses, args.latitude, args.longitude)
    candidate = extract_candidate(center, min_doses=0, tz=tz, now=datetime.now(tz))
    if candidate is None:
        logger.error("No announcement for %d doses", args.doses)
        return 1

    candidate = dataclasses.replace(candidate, message="[TEST] " + candidate.message)

    if args.save_map:
        result = StaticMapClient().generate_map(create_map_config(center.latitude, center.longitude))
        if not result.success:
            logger.error("Failed to render map: %s", result.error)
            return 1
        with open(args.save_map, "wb") as f:
            f.write(result.image_bytes)
        logger.info("Map saved to %s", args.save_map)

    data = {
        "departments": "test",
        "timezone": tz_name,
        "mode": MODE_PUBLISH if args.publish else MODE_SIMULATE,
        "twitter": {
            key: os.environ.get(env_name, "")
            for env_name, key in TWITTER_ENV_KEYS.items()
        },
    }
    try:
        config = load_config_from_dict(data)
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    if args.publish:
        logger.warning("⚠️  Posting to PUBLIC Twitter account!")

    result = build_publisher(config).publish(candidate)
    if not result.success:
        logger.error("✗ Failed to publish: %s", result.error)
        return 1

    if args.publish:
        logger.info("✓ Tweet posted successfully! ID: %s", result.post_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
