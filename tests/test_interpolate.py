"""Tests for the day/night interpolation into game time."""

from datetime import date, datetime, timedelta

import pytest
from pytz import timezone, utc

from sunsync.interpolate import classify, interpolate_game_time
from sunsync.models import DegenerateDay, GameTimeScale, GeographicCoordinate, NeverRises, NeverSets, RiseAndSet
from sunsync.sun import sunrise_and_sunset_times

SCALE = GameTimeScale.minecraft()


def _at(day: int, hour: int, minute: int = 0) -> datetime:
    return utc.localize(datetime(2023, 3, day, hour, minute))


YESTERDAY = RiseAndSet(_at(19, 6), _at(19, 18))
TODAY = RiseAndSet(_at(20, 6), _at(20, 18))
TOMORROW = RiseAndSet(_at(21, 6), _at(21, 18))


@pytest.mark.parametrize(
    "now, expected",
    [
        (_at(20, 6), 23000),
        (_at(20, 12), 30000),
        (_at(20, 18), 37000),
        (_at(20, 0), 42000),
        (_at(20, 21), 39500),
        (_at(20, 3), 44500),
    ],
)
def test_interpolation(now, expected):
    assert interpolate_game_time(YESTERDAY, TODAY, TOMORROW, now, SCALE) == pytest.approx(expected)


def test_naive_now_is_utc():
    naive = datetime(2023, 3, 20, 12, 0)
    assert interpolate_game_time(YESTERDAY, TODAY, TOMORROW, naive, SCALE) == pytest.approx(30000)


def test_aware_now_in_other_zone():
    madrid = timezone("Europe/Madrid").localize(datetime(2023, 3, 20, 13, 0))
    assert interpolate_game_time(YESTERDAY, TODAY, TOMORROW, madrid, SCALE) == pytest.approx(30000)


def test_game_time_is_monotonic_during_the_day():
    values = [
        interpolate_game_time(YESTERDAY, TODAY, TOMORROW, _at(20, hour), SCALE)
        for hour in range(6, 19)
    ]
    assert values == sorted(values)
    assert all(SCALE.day_start <= v <= SCALE.night_start for v in values)


def test_today_never_rises():
    cause = NeverRises(date(2023, 3, 20))
    result = interpolate_game_time(YESTERDAY, cause, TOMORROW, _at(20, 12), SCALE)
    assert result == DegenerateDay(cause=cause, game_time=SCALE.midnight)


def test_today_never_sets():
    cause = NeverSets(date(2023, 3, 20))
    result = interpolate_game_time(YESTERDAY, cause, TOMORROW, _at(20, 12), SCALE)
    assert result == DegenerateDay(cause=cause, game_time=SCALE.midday)


def test_degenerate_yesterday_before_sunrise():
    cause = NeverRises(date(2023, 3, 19))
    result = interpolate_game_time(cause, TODAY, TOMORROW, _at(20, 2), SCALE)
    assert isinstance(result, DegenerateDay)
    assert result.cause == cause


def test_degenerate_tomorrow_after_sunset():
    cause = NeverSets(date(2023, 3, 21))
    result = interpolate_game_time(YESTERDAY, TODAY, cause, _at(20, 22), SCALE)
    assert result == DegenerateDay(cause=cause, game_time=SCALE.midday)


def test_degenerate_neighbour_not_needed_during_the_day():
    result = interpolate_game_time(
        NeverRises(date(2023, 3, 19)), TODAY, NeverSets(date(2023, 3, 21)), _at(20, 12), SCALE
    )
    assert result == pytest.approx(30000)


def test_zero_length_day():
    instant = _at(20, 12)
    today = RiseAndSet(instant, instant)
    assert interpolate_game_time(YESTERDAY, today, TOMORROW, instant, SCALE) == SCALE.day_start


def test_classify():
    assert classify(TODAY, _at(20, 5, 59)) == "night"
    assert classify(TODAY, _at(20, 6)) == "day"
    assert classify(TODAY, _at(20, 18)) == "day"
    assert classify(TODAY, _at(20, 18, 1)) == "night"


def test_far_east_sunset_before_sunrise_reads_as_night():
    # Known limitation: Tokyo's UTC sunset comes before its UTC sunrise, so
    # local noon falls outside [rise, set] and is treated as night.
    tokyo = GeographicCoordinate(35.68, 139.69)
    on_date = date(2023, 6, 21)
    yesterday, today, tomorrow = (
        sunrise_and_sunset_times(tokyo, on_date + timedelta(days=offset)) for offset in (-1, 0, 1)
    )
    assert today.set_utc < today.rise_utc

    local_noon = utc.localize(datetime(2023, 6, 21, 3, 0))
    assert classify(today, local_noon) == "night"
    game_time = interpolate_game_time(yesterday, today, tomorrow, local_noon, SCALE)
    assert SCALE.night_start <= game_time < SCALE.night_start + SCALE.night_length
    assert game_time == pytest.approx(SCALE.midnight, abs=200)
