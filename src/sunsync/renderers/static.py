"""Matplotlib static PNG renderer for one UTC day of game time."""

from datetime import date, datetime, timedelta
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402
from pytz import utc  # noqa: E402

from sunsync.interpolate import interpolate_game_time  # noqa: E402
from sunsync.models import DegenerateDay, GameTimeScale, GeographicCoordinate, RiseAndSet  # noqa: E402
from sunsync.sun import sunrise_and_sunset_times  # noqa: E402


def game_time_curve(
    coordinate: GeographicCoordinate,
    on_date: date,
    scale: GameTimeScale | None = None,
    step_minutes: int = 5,
) -> tuple[np.ndarray, np.ndarray]:
    """Sample the game time over one UTC day.

    Returns:
        (hours, ticks): hours since 00:00 UTC and the game time at each
        sample. Degenerate days contribute their fallback value.
    """
    scale = scale or GameTimeScale.minecraft()
    yesterday = sunrise_and_sunset_times(coordinate, on_date - timedelta(days=1))
    today = sunrise_and_sunset_times(coordinate, on_date)
    tomorrow = sunrise_and_sunset_times(coordinate, on_date + timedelta(days=1))

    start = utc.localize(datetime.combine(on_date, datetime.min.time()))
    minutes = np.arange(0, 24 * 60, step_minutes)
    ticks = np.empty(len(minutes))
    for i, minute in enumerate(minutes):
        result = interpolate_game_time(
            yesterday, today, tomorrow, start + timedelta(minutes=int(minute)), scale
        )
        ticks[i] = result.game_time if isinstance(result, DegenerateDay) else result
    return minutes / 60.0, ticks


def render_day_chart(
    coordinate: GeographicCoordinate,
    on_date: date,
    scale: GameTimeScale | None = None,
    chart_size: int = 8,
) -> Figure:
    """Render the game time over one UTC day, with sunrise and sunset marked.

    Args:
        coordinate: Observer location.
        on_date: UTC calendar day.
        scale: Game clock segments. Defaults to the Minecraft clock.
        chart_size: Output image width in inches.

    Returns:
        matplotlib Figure object.
    """
    scale = scale or GameTimeScale.minecraft()
    hours, ticks = game_time_curve(coordinate, on_date, scale)

    fig, ax = plt.subplots(figsize=(chart_size, chart_size * 0.5))
    is_day = (ticks >= scale.day_start) & (ticks < scale.night_start)
    ax.scatter(hours[is_day], ticks[is_day], s=4, color="#f5b700", label="day")
    ax.scatter(hours[~is_day], ticks[~is_day], s=4, color="#3b4cc0", label="night")

    today = sunrise_and_sunset_times(coordinate, on_date)
    if isinstance(today, RiseAndSet):
        for label, when in (("sunrise", today.rise_utc), ("sunset", today.set_utc)):
            hour = when.hour + when.minute / 60.0 + when.second / 3600.0
            ax.axvline(hour, color="grey", linestyle="--", linewidth=0.8)
            ax.annotate(f"{label} {when:%H:%M}", (hour, scale.day_start), rotation=90, fontsize=8)
    else:
        ax.set_title(type(today).__name__, fontsize=9)

    ax.set_xlim(0, 24)
    ax.set_xticks(np.arange(0, 25, 3))
    ax.set_xlabel("UTC hour")
    ax.set_ylabel("game time (ticks)")
    fig.suptitle(f"{coordinate} · {on_date.isoformat()}")
    ax.legend(loc="upper left", fontsize=8)
    fig.tight_layout()
    return fig


def save_day_chart(
    coordinate: GeographicCoordinate,
    on_date: date,
    output_path: Path | None = None,
    scale: GameTimeScale | None = None,
) -> Path:
    """Save the day chart as a PNG file.

    Args:
        coordinate: Observer location.
        on_date: UTC calendar day.
        output_path: Destination path. Auto-generated under results/ if None.
        scale: Game clock segments. Defaults to the Minecraft clock.

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        filename = f"{coordinate}__{on_date:%Y_%m_%d}.png".replace(", ", "_")
        output_path = Path("results") / filename

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_day_chart(coordinate, on_date, scale)
    fig.savefig(output_path)
    plt.close(fig)
    return output_path
