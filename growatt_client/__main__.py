"""List the plants of a Growatt account.

Credentials come from the command line or from the GROWATT_* environment
variables (a ``.env`` file is honoured).
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from datetime import timedelta
import logging
import sys

from .api import Growatt
from .config import GrowattConfig
from .const import ALTERNATE_URL
from .exceptions import GrowattError
from .models import Plant, PlantData

_LOGGER = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="growatt_client", description="List the plants of a Growatt account."
    )
    parser.add_argument("--username", help="overrides GROWATT_USERNAME")
    parser.add_argument("--password", help="overrides GROWATT_PASSWORD")
    parser.add_argument(
        "--alternate-url",
        action="store_true",
        help=f"use {ALTERNATE_URL} instead of the configured server",
    )
    parser.add_argument(
        "--session-duration",
        type=int,
        metavar="MINUTES",
        help="overrides GROWATT_SESSION_DURATION",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def _print_plant(plant: Plant, details: PlantData | None) -> None:
    print(f"Plant ID: {plant.plant_id}")
    print(f"Plant Name: {plant.plant_name}")
    if plant.plant_address:
        print(f"Address: {plant.plant_address}")
    if plant.plant_watts is not None:
        print(f"Power (W): {plant.plant_watts}")
    if details is not None:
        if details.capacity is not None:
            print(f"Capacity: {details.capacity}")
        if details.today_energy is not None:
            print(f"Today's Energy: {details.today_energy}")
        if details.total_energy is not None:
            print(f"Total Energy: {details.total_energy}")
    print("-------------------")


def main(argv: list[str] | None = None) -> int:
    """Run the command line tool and return its exit status."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = GrowattConfig.from_env()
    except GrowattError as err:
        print(f"Invalid configuration: {err}", file=sys.stderr)
        return 2
    if args.username:
        config = replace(config, username=args.username)
    if args.password:
        config = replace(config, password=args.password)
    if args.session_duration is not None:
        if args.session_duration < 1:
            print("Session duration must be at least 1 minute", file=sys.stderr)
            return 2
        config = replace(
            config, session_duration=timedelta(minutes=args.session_duration)
        )
    if not config.has_credentials:
        print(
            "Missing credentials: set GROWATT_USERNAME and GROWATT_PASSWORD "
            "or pass --username and --password",
            file=sys.stderr,
        )
        return 2

    client = Growatt(config)
    if args.alternate_url:
        client.with_alternate_url()

    with client:
        try:
            if not client.login(config.username, config.password):
                print("Login failed! Check your credentials.", file=sys.stderr)
                return 1
            plants = client.get_plants()
            print(f"Found {len(plants)} plants:")
            for plant in plants:
                try:
                    details = client.get_plant(plant.plant_id)
                except GrowattError as err:
                    _LOGGER.warning(
                        "Could not get details of plant %s: %s", plant.plant_id, err
                    )
                    details = None
                _print_plant(plant, details)
        except GrowattError as err:
            print(f"Error: {err}", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
