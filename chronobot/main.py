"""Process Entry Point.

Loads configuration, wires the orchestrator and hands it to the
scheduler. A missing department list stops the process before the
first sweep.

Usage:
    python main.py            # sweep now, then every CHECK_INTERVAL_SEC
    python main.py --once     # single sweep, then exit
"""

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from chronobot.core.config import validate_config
from chronobot.core.dedup import DedupRegistry
from chronobot.orchestrator import Orchestrator
from chronobot.scheduler import run
from chronobot.shell.config_loader import ConfigError, load_config


logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure process-wide logging from LOG_LEVEL."""
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    """Run the chronodose bot.

    Args:
        argv: Command line arguments (default: sys.argv)

    Returns:
        Process exit status
    """
    parser = argparse.ArgumentParser(description="Announce nearby chronodoses")
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single sweep and exit",
    )
    parser.add_argument(
        "--config",
        help="YAML config file (default: CONFIG_PATH or environment variables)",
    )
    args = parser.parse_args(argv)

    load_dotenv()
    configure_logging()

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    validation = validate_config(config)
    for warning in validation.warnings:
        logger.warning("Config %s: %s", warning.field, warning.message)
    if not validation.valid:
        for error in validation.critical_errors:
            logger.error("Config %s: %s", error.field, error.message)
        return 1

    logger.info(
        "Watching %s within %s km of (%s, %s), mode %s",
        ", ".join(config.departments),
        config.max_radius_km,
        config.center_latitude,
        config.center_longitude,
        config.mode,
    )

    orchestrator = Orchestrator(config, registry=DedupRegistry())

    if args.once:
        result = orchestrator.sweep()
        logger.info("Completed: %s", result.summary)
        return 0

    run(orchestrator, config.check_interval_seconds)
    return 0


if __name__ == "__main__":
    sys.exit(main())
