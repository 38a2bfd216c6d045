"""Location parsing layer for coordinate text, region codes and place-name geocoding."""

import locale
import logging
import re
from pathlib import Path

import httpx

from sunsync.models import GeographicCoordinate, InvalidCoordinate

logger = logging.getLogger(__name__)

REGIONS_PATH = Path(__file__).parent / "resources" / "regions.csv"

AUTO = "auto"

_DECIMAL_DEGREES = re.compile(
    r"(?P<latitude>-?\d+(?:\.\d+)?)(?:\s*,\s*|\s+)(?P<longitude>-?\d+(?:\.\d+)?)"
)
_SEXAGESIMAL_DEGREES = re.compile(
    r"(?P<lat_deg>\d+)°(?: *(?P<lat_min>\d+)')?(?: *(?P<lat_sec>\d+(?:\.\d+)?)\")? *(?P<lat_dir>[NS])"
    r"(?:\s*,\s*|\s+)"
    r"(?P<lon_deg>\d+)°(?: *(?P<lon_min>\d+)')?(?: *(?P<lon_sec>\d+(?:\.\d+)?)\")? *(?P<lon_dir>[EW])"
)
_REGION_LINE = re.compile(
    r"(?P<region>\w+),Point\((?P<longitude>-?\d+(?:\.\d+)?) (?P<latitude>-?\d+(?:\.\d+)?)\)"
)
_REGION_CODE = re.compile(r"[A-Za-z]{2}")


class GeocodingError(Exception):
    """Geocoder call failure."""


def load_regions(path: Path | None = None) -> dict[str, GeographicCoordinate]:
    """Parse the region table and return region code → coordinate.

    File format: one ``CODE,Point(longitude latitude)`` entry per line. The
    header line and blank lines are skipped; other lines that cannot be parsed
    are logged and skipped.
    """
    path = path or REGIONS_PATH
    regions: dict[str, GeographicCoordinate] = {}
    with path.open(encoding="utf-8") as f:
        for lineno, raw in enumerate(f, start=1):
            line = raw.strip()
            if not line or line.startswith("region,"):
                continue
            match = _REGION_LINE.search(line)
            if match is None:
                logger.warning("Skipping malformed line %d in %s: %r", lineno, path.name, line)
                continue
            region = match.group("region")
            try:
                regions[region] = GeographicCoordinate.from_decimal_degrees(
                    float(match.group("latitude")), float(match.group("longitude"))
                )
            except InvalidCoordinate:
                logger.warning(
                    'Parse error when processing geographic coordinates for "%s" region', region
                )
    logger.info("Loaded %d regions from %s", len(regions), path.name)
    return regions


def detect_region() -> str | None:
    """Country code of the host locale ("en_US" → "US"), if any."""
    lang, _ = locale.getlocale()
    if not lang or "_" not in lang:
        return None
    return lang.split("_", 1)[1][:2].upper()


def _parse_decimal(text: str) -> GeographicCoordinate | None:
    match = _DECIMAL_DEGREES.fullmatch(text)
    if match is None:
        return None
    return GeographicCoordinate.from_decimal_degrees(
        float(match.group("latitude")), float(match.group("longitude"))
    )


def _parse_sexagesimal(text: str) -> GeographicCoordinate | None:
    match = _SEXAGESIMAL_DEGREES.fullmatch(text)
    if match is None:
        return None

    def components(prefix: str, negative: str) -> tuple[float, float, float]:
        degrees = float(match.group(f"{prefix}_deg"))
        minutes = float(match.group(f"{prefix}_min") or 0.0)
        seconds = float(match.group(f"{prefix}_sec") or 0.0)
        if match.group(f"{prefix}_dir") == negative:
            return -degrees, -minutes, -seconds
        return degrees, minutes, seconds

    return GeographicCoordinate.from_sexagesimal(
        *components("lat", "S"), *components("lon", "W")
    )


def parse_location(
    text: str, regions: dict[str, GeographicCoordinate] | None = None
) -> GeographicCoordinate | None:
    """Parse a location option into a coordinate.

    Accepted forms:
        - ``auto``: the region of the host locale, or (0°, 0°) if unknown.
        - Decimal degrees: ``"40.4168, -3.7038"`` or ``"40.4168 -3.7038"``.
        - Sexagesimal degrees: ``40°25'0.5" N, 3°42'13" W``.
        - A two-letter region code from the region table: ``"ES"``.

    Returns:
        The coordinate, or None when the text is not a valid location
        (unparseable or outside the latitude/longitude range).
    """
    text = text.strip()
    regions = regions or {}

    if text == AUTO:
        region = detect_region()
        return regions.get(region, GeographicCoordinate.default()) if region else GeographicCoordinate.default()

    try:
        coordinate = _parse_decimal(text) or _parse_sexagesimal(text)
    except InvalidCoordinate as e:
        logger.debug("Rejected location %r: %s", text, e)
        return None
    if coordinate is not None:
        return coordinate

    if _REGION_CODE.fullmatch(text):
        return regions.get(text.upper())
    return None


def is_valid_location(text: str, regions: dict[str, GeographicCoordinate] | None = None) -> bool:
    return parse_location(text, regions) is not None


def geocode_place(name: str) -> GeographicCoordinate:
    """Nominatim (OpenStreetMap) geocoder for free-text place names.

    Raises:
        GeocodingError: When the place cannot be found.
        httpx.HTTPError: On transport or HTTP status errors.
    """
    params = {"q": name, "format": "json", "limit": 1}
    headers = {"User-Agent": "SunSync/1.0 (real-world daylight for game servers)"}
    resp = httpx.get(
        "https://nominatim.openstreetmap.org/search",
        params=params,
        headers=headers,
        timeout=10,
    )
    resp.raise_for_status()
    results = resp.json()
    if not results:
        raise GeocodingError(f"Place not found: {name}")
    r = results[0]
    try:
        return GeographicCoordinate.from_decimal_degrees(float(r["lat"]), float(r["lon"]))
    except InvalidCoordinate as e:
        raise GeocodingError(f"Geocoder returned an invalid coordinate for {name}: {e}") from e


def resolve_location(
    text: str,
    regions: dict[str, GeographicCoordinate] | None = None,
    geocode: bool = False,
) -> GeographicCoordinate:
    """Like parse_location, falling back to the geocoder when ``geocode`` is set.

    Raises:
        GeocodingError: When the text is not a location and cannot be geocoded.
    """
    coordinate = parse_location(text, regions)
    if coordinate is not None:
        return coordinate
    if not geocode:
        raise GeocodingError(f"Invalid location: {text}")
    logger.info("Geocoding %r", text)
    return geocode_place(text)
