"""Regex extraction of the snow report page's forecast and conditions."""

import logging
import re

from snowtrack.models.forecast import (
    VALLEY_BOTTOM,
    DayLabel,
    ForecastTuple,
    FreezingLevel,
    SnowReport,
)

logger = logging.getLogger(__name__)

_LABELS = "|".join(label.value for label in DayLabel)
_DAY_HEADING_RE = re.compile(rf"<h([1-6])[^>]*>\s*({_LABELS})\s*</h\1>", re.IGNORECASE)
_ANY_HEADING_RE = re.compile(r"<h[1-6][^>]*>", re.IGNORECASE)
# The page repeats the forecast for the valley below the alpine one.
_VALLEY_SECTION_RE = re.compile(r"<h[1-6][^>]*>[^<]*\bvalley\b[^<]*</h[1-6]>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")

_SNOW_RE = re.compile(r"Snow:\s*(\d+)\s*cm", re.IGNORECASE)
_FREEZING_RE = re.compile(r"Freezing\s+level:\s*(\d+)\s*metres?", re.IGNORECASE)
_FREEZING_VALLEY_RE = re.compile(r"Freezing\s+level\s+at\s+valley\s+bottom", re.IGNORECASE)
_DESCRIPTION_RE = re.compile(r"^\s*([A-Z][^.:]*\.)")

_SNOW_TOTAL_PATTERNS = {
    "new_snow": r"NEW\s+SNOW",
    "last_hour": r"LAST\s+HOUR",
    "twenty_four_hour": r"24\s+HOURS",
    "forty_eight_hour": r"48\s+HOURS",
    "seven_day": r"7\s+DAYS",
    "base_depth": r"BASE\s+DEPTH",
    "season_total": r"SEASON\s+TOTAL",
}
_ALPINE_TEMP_RE = re.compile(r"Alpine\s+temperature:\s+Low\s+(-?\d+)\s*°C", re.IGNORECASE)
_CONDITION_RE = re.compile(
    r"\b(Mainly\s+cloudy|Partly\s+cloudy|Cloudy|Clear|Sunny|Snowing|Snow|Overcast|Flurries)\b",
    re.IGNORECASE,
)
_WIND_RE = re.compile(r"Ridge\s+wind\s+(\w+):\s+(\d+)\s+km/h", re.IGNORECASE)


def extract_forecast(html: str) -> list[ForecastTuple]:
    """Forecast slots of the alpine section, in document order.

    Day labels may repeat when the page lists more than a week ahead; each
    heading yields its own tuple.
    """
    valley = _VALLEY_SECTION_RE.search(html)
    if valley:
        html = html[: valley.start()]

    forecast: list[ForecastTuple] = []
    for match in _DAY_HEADING_RE.finditer(html):
        label = DayLabel.parse(match.group(2))
        assert label is not None
        next_heading = _ANY_HEADING_RE.search(html, match.end())
        section = html[match.end() : next_heading.start() if next_heading else len(html)]
        forecast.append(_parse_section(label, section))

    logger.debug("Extracted %d forecast slots", len(forecast))
    return forecast


def _parse_section(label: DayLabel, section_html: str) -> ForecastTuple:
    text = _strip_tags(section_html)

    snow = _SNOW_RE.search(text)
    freezing_level: FreezingLevel = None
    freezing = _FREEZING_RE.search(text)
    if freezing:
        freezing_level = int(freezing.group(1))
    elif _FREEZING_VALLEY_RE.search(text):
        freezing_level = VALLEY_BOTTOM

    description = _DESCRIPTION_RE.match(text)
    return ForecastTuple(
        day_label=label.value,
        amount=int(snow.group(1)) if snow else 0,
        freezing_level=freezing_level,
        description=" ".join(description.group(1).split()) if description else None,
    )


def parse_snow_report(html: str) -> SnowReport:
    """Current snow totals and alpine weather from the report page."""
    text = _strip_tags(html)

    totals = {}
    for field_name, heading in _SNOW_TOTAL_PATTERNS.items():
        match = re.search(rf"{heading}[\s\S]{{0,100}}?(\d+)\s*CM", text, re.IGNORECASE)
        totals[field_name] = int(match.group(1)) if match else 0

    temp = _ALPINE_TEMP_RE.search(text)
    condition = _CONDITION_RE.search(text)
    wind = _WIND_RE.search(text)

    return SnowReport(
        **totals,
        alpine_temp=int(temp.group(1)) if temp else None,
        condition=" ".join(condition.group(1).lower().split()) if condition else None,
        wind_speed=int(wind.group(2)) if wind else None,
        wind_direction=wind.group(1).capitalize() if wind else None,
    )


def _strip_tags(html: str) -> str:
    return re.sub(r"\s+", " ", _TAG_RE.sub(" ", html))
