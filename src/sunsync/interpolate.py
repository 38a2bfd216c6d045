"""Map the current instant onto the game's cyclic day by interpolating between solar events."""

from datetime import datetime
from typing import Literal

from pytz import utc

from sunsync.models import (
    DegenerateDay,
    GameTimeScale,
    NeverRises,
    NeverSets,
    RiseAndSet,
    SolarDay,
)


def _as_utc(when: datetime) -> datetime:
    if when.tzinfo is None:
        return utc.localize(when)
    return when.astimezone(utc)


def _degenerate(day: NeverRises | NeverSets, scale: GameTimeScale) -> DegenerateDay:
    if isinstance(day, NeverRises):
        return DegenerateDay(cause=day, game_time=scale.midnight)
    return DegenerateDay(cause=day, game_time=scale.midday)


def classify(today: RiseAndSet, now: datetime) -> Literal["day", "night"]:
    """Whether ``now`` lies between today's sunrise and sunset (inclusive)."""
    now = _as_utc(now)
    if now < today.rise_utc or now > today.set_utc:
        return "night"
    return "day"


def interpolate_game_time(
    yesterday: SolarDay,
    today: SolarDay,
    tomorrow: SolarDay,
    now: datetime,
    scale: GameTimeScale,
) -> float | DegenerateDay:
    """Linear interpolation of ``now`` between the last and next solar event.

    Before today's sunrise the interval is yesterday's sunset → today's
    sunrise; after today's sunset it is today's sunset → tomorrow's sunrise;
    otherwise it is today's sunrise → sunset. The elapsed fraction is scaled
    onto the day or night segment of ``scale``.

    Args:
        yesterday, today, tomorrow: Solar days around ``now``.
        now: Current instant. Naive datetimes are read as UTC.
        scale: Game clock segments and fallbacks.

    Returns:
        The game time, or a DegenerateDay when today (or the neighbouring day
        the interval needs) has no sunrise or no sunset.
    """
    if not isinstance(today, RiseAndSet):
        return _degenerate(today, scale)

    now = _as_utc(now)
    if now < today.rise_utc:
        if not isinstance(yesterday, RiseAndSet):
            return _degenerate(yesterday, scale)
        is_daytime = False
        last_event, next_event = yesterday.set_utc, today.rise_utc
    elif now > today.set_utc:
        if not isinstance(tomorrow, RiseAndSet):
            return _degenerate(tomorrow, scale)
        is_daytime = False
        last_event, next_event = today.set_utc, tomorrow.rise_utc
    else:
        is_daytime = True
        last_event, next_event = today.rise_utc, today.set_utc

    interval_seconds = (next_event - last_event).total_seconds()
    elapsed_seconds = (now - last_event).total_seconds()
    # Rise and set can round to the same second right at the polar limit.
    fraction = elapsed_seconds / interval_seconds if interval_seconds > 0 else 0.0

    if is_daytime:
        return scale.day_length * fraction + scale.day_start
    return scale.night_length * fraction + scale.night_start
