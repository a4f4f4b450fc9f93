"""Command-line entry point: move a SleepIQ bed to a preset and wait for it."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from aiohttp import ClientSession

from .api import SleepIQClient
from .const import DEFAULT_CONFIG_PATH, EXIT_FAILURE, EXIT_SUCCESS, PROGRAM_NAME
from .config import load_configuration
from .coordinator import BedPositionCoordinator
from .exceptions import BedPositionError, ConfigError
from .models import Configuration, MovementResult, PositionRequest
from .validators import validate_position_request

_LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(op)s] %(message)s"


class OperationFilter(logging.Filter):
    """Tag each record with the operation that emitted it.

    Records logged with ``extra={"op": ...}`` keep their tag; others are
    tagged with the short name of the emitting module.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "op"):
            record.op = record.name.rsplit(".", 1)[-1]
        return True


def setup_logging(debug: bool = False) -> None:
    """Send log records to stderr with their operation tag."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(OperationFilter())
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, handlers=[handler])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Move one side of a SleepIQ bed to a preset position and wait until it stops moving.",
    )
    parser.add_argument(
        "--bed-name",
        default="",
        help="name of the target bed (Account Settings -> My Sleep Number Beds -> X/Y Bed Online -> <Bed Name>)",
    )
    parser.add_argument(
        "--side",
        default="",
        help="which side of the bed to be altered (Left or Right)",
    )
    parser.add_argument(
        "--position",
        default=None,
        help="which position to target based on 1=Favorite, 2=Read, 3=WatchTV, 4=Flat, 5=ZeroG, 6=Snore",
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help="path to configuration file",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="enable debug logging",
    )
    return parser


async def async_run(config: Configuration, request: PositionRequest) -> MovementResult:
    """Run one command-and-poll cycle against the SleepIQ service."""
    async with ClientSession() as session:
        coordinator = BedPositionCoordinator(SleepIQClient(session), config)
        return await coordinator.async_run(request)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the tool and return the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(args.debug)

    try:
        config = load_configuration(args.config)
    except ConfigError as err:
        _LOGGER.critical(
            "failed to load configuration at %s: %s", args.config, err, extra={"op": "main"}
        )
        return EXIT_FAILURE

    try:
        request = validate_position_request(args.bed_name, args.side, args.position)
        result = asyncio.run(async_run(config, request))
    except BedPositionError as err:
        _LOGGER.critical("%s", err, extra={"op": "main"})
        return EXIT_FAILURE

    return EXIT_SUCCESS if result.settled else EXIT_FAILURE
