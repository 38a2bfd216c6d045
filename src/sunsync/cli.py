"""Command-line entry point with the report, chart and run subcommands."""

import argparse
import logging
import sys
from collections.abc import Sequence
from datetime import date, datetime, time
from pathlib import Path
from typing import TextIO

import httpx
from dotenv import load_dotenv
from pytz import utc

from sunsync.commands import TimeSyncCommand, parse_clock
from sunsync.config import CONFIG_PATH, Configuration, load_config, save_config
from sunsync.interpolate import classify
from sunsync.location import GeocodingError, resolve_location
from sunsync.models import GeographicCoordinate, RiseAndSet
from sunsync.moon import lunar_cycle_day, moon_phase, phase_name
from sunsync.renderers.static import save_day_chart
from sunsync.synchronizer import TimeSynchronizer, apply_debug_mode

logger = logging.getLogger(__name__)

QUIT_COMMANDS = ("quit", "exit", "stop")


class ConsoleWorld:
    """A stand-in world that logs every time it is set."""

    def __init__(self, name: str = "world") -> None:
        self.name = name
        self.ticks: int | None = None

    def set_time(self, ticks: int) -> None:
        self.ticks = ticks
        logger.info("%s time set to %d", self.name, ticks)


def _parse_date(text: str) -> date:
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {text!r}, expected YYYY-MM-DD") from None


def _parse_time(text: str) -> time:
    parsed = parse_clock(text)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"invalid time {text!r}, expected HH:MM or HH:MM:SS")
    return parsed


def _coordinate(args: argparse.Namespace, config: Configuration) -> GeographicCoordinate:
    if args.location is None:
        return config.coordinate
    return resolve_location(args.location, config.regions, geocode=args.geocode)


def _report(args: argparse.Namespace, config: Configuration, out: TextIO) -> int:
    coordinate = _coordinate(args, config)
    now = datetime.now(utc)
    on_date = args.date or now.date()
    time_of_day = now.time() if args.time is None else args.time
    when = utc.localize(datetime.combine(on_date, time_of_day))

    config.coordinate = coordinate
    synchronizer = TimeSynchronizer(config, ConsoleWorld(), clock=lambda: when)
    _, today, _ = synchronizer.solar_days(when)

    print(f"Location:   {coordinate}", file=out)
    print(f"Instant:    {when:%Y-%m-%d %H:%M:%S} UTC", file=out)
    if isinstance(today, RiseAndSet):
        print(f"Sunrise:    {today.rise_utc:%H:%M:%S} UTC", file=out)
        print(f"Sunset:     {today.set_utc:%H:%M:%S} UTC", file=out)
        print(f"Period:     {classify(today, when)}", file=out)
    else:
        print(f"Sun:        {type(today).__name__} on {today.day}", file=out)

    phase = moon_phase(when)
    print(f"Moon phase: {phase:.3f} ({phase_name(phase).replace('_', ' ')})", file=out)
    print(f"Lunar day:  {lunar_cycle_day(phase)}", file=out)
    print(f"Game time:  {synchronizer.game_time(when)}", file=out)
    return 0


def _chart(args: argparse.Namespace, config: Configuration, out: TextIO) -> int:
    coordinate = _coordinate(args, config)
    on_date = args.date or datetime.now(utc).date()
    path = save_day_chart(coordinate, on_date, args.output)
    print(f"Saved chart to {path}", file=out)
    return 0


def _run(args: argparse.Namespace, config: Configuration, out: TextIO, lines: TextIO) -> int:
    synchronizer = TimeSynchronizer(config, ConsoleWorld())
    command = TimeSyncCommand(synchronizer)
    synchronizer.start()
    try:
        for raw in lines:
            line = raw.strip()
            if not line:
                continue
            if line in QUIT_COMMANDS:
                break
            notice = command.blocked_command_notice(line)
            if notice is not None:
                print(notice, file=out)
                continue
            words = line.split()
            if words[0].lstrip("/") == "timesync":
                print(command.execute(words[1:]), file=out)
            else:
                print(f"Unknown command: {words[0]}", file=out)
    finally:
        synchronizer.stop()
        save_config(config, args.config)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sunsync",
        description="Sunrise, sunset and moon phase synchronized game time.",
    )
    parser.add_argument("--config", type=Path, default=CONFIG_PATH, help=f"Config file (default: {CONFIG_PATH})")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("report", "Print today's solar events, moon phase and game time"),
        ("chart", "Save a PNG chart of one day's game time"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--location", default=None, help="Location text (default: config value)")
        p.add_argument("--geocode", action="store_true", help="Look up place names with Nominatim")
        p.add_argument("--date", type=_parse_date, default=None, help="UTC date YYYY-MM-DD (default: today)")
        if name == "report":
            p.add_argument("--time", type=_parse_time, default=None, help="UTC time HH:MM[:SS] (default: now)")
        else:
            p.add_argument("--output", type=Path, default=None, help="PNG path (default: results/...)")

    sub.add_parser("run", help="Run the synchronizer and read /timesync commands from stdin")
    return parser


def main(argv: Sequence[str] | None = None, out: TextIO | None = None) -> int:
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    out = out or sys.stdout
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    if args.debug:
        config.debug_mode = True
    apply_debug_mode(config.debug_mode)

    try:
        if args.command == "report":
            return _report(args, config, out)
        if args.command == "chart":
            return _chart(args, config, out)
        return _run(args, config, out, sys.stdin)
    except GeocodingError as e:
        logger.error("%s", e)
        return 1
    except httpx.HTTPError as e:
        logger.error("Geocoder request failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
