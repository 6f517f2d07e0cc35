"""Snow forecast data models: scraped tuples, resolved slots and stored history."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, TypeAlias

from snowtrack.models.common import IsoDate, IsoTimestamp

VALLEY_BOTTOM = "valley bottom"

# An elevation in metres, the valley bottom sentinel, or unknown.
FreezingLevel: TypeAlias = int | str | None


class DayLabel(StrEnum):
    TODAY = "Today"
    TONIGHT = "Tonight"
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @classmethod
    def parse(cls, text: str | None) -> "DayLabel | None":
        if not text:
            return None
        wanted = text.strip().lower()
        for label in cls:
            if label.value.lower() == wanted:
                return label
        return None

    @property
    def weekday(self) -> int | None:
        """Python weekday number (Monday=0), or None for Today/Tonight."""
        if self in (DayLabel.TODAY, DayLabel.TONIGHT):
            return None
        return WEEKDAY_LABELS.index(self)


WEEKDAY_LABELS: tuple[DayLabel, ...] = (
    DayLabel.MONDAY,
    DayLabel.TUESDAY,
    DayLabel.WEDNESDAY,
    DayLabel.THURSDAY,
    DayLabel.FRIDAY,
    DayLabel.SATURDAY,
    DayLabel.SUNDAY,
)


@dataclass(frozen=True)
class ForecastTuple:
    day_label: str
    amount: int  # cm
    freezing_level: FreezingLevel = None
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "day": self.day_label,
            "amount": self.amount,
            "freezingLevel": self.freezing_level,
            "description": self.description,
        }


@dataclass(frozen=True)
class LocalDate:
    """A calendar day as seen on the resort's wall clock."""

    year: int
    month: int
    day: int
    weekday: int  # Monday=0


@dataclass(frozen=True)
class ResolvedSlot:
    calendar_date: IsoDate
    storage_key: str
    day_label: DayLabel
    occurrence_index: int = 0


@dataclass(frozen=True)
class HistoryEntry:
    first_seen: IsoTimestamp
    amount: int
    freezing_level: FreezingLevel = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "firstSeen": self.first_seen,
            "amount": self.amount,
            "freezingLevel": self.freezing_level,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "HistoryEntry":
        return cls(
            first_seen=raw.get("firstSeen", ""),
            amount=int(raw.get("amount", 0)),
            freezing_level=raw.get("freezingLevel"),
        )


@dataclass
class ForecastRecord:
    date: IsoDate
    key: str
    day_name_at_creation: str
    history: list[HistoryEntry] = field(default_factory=list)

    @property
    def last_entry(self) -> HistoryEntry | None:
        return self.history[-1] if self.history else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "key": self.key,
            "dayNameAtCreation": self.day_name_at_creation,
            "history": [e.to_dict() for e in self.history],
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ForecastRecord":
        """Build a record from its stored shape.

        Legacy records may lack ``key``/``dayNameAtCreation`` or carry a null
        history; both are tolerated.
        """
        history = raw.get("history") or []
        date = raw.get("date", "")
        return cls(
            date=date,
            key=raw.get("key") or date,
            day_name_at_creation=raw.get("dayNameAtCreation") or raw.get("dayName") or "",
            history=[HistoryEntry.from_dict(e) for e in history],
        )


@dataclass(frozen=True)
class TrackedForecast:
    forecast: ForecastTuple
    actual_date: IsoDate | None = None
    history: tuple[HistoryEntry, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        data = self.forecast.to_dict()
        if self.actual_date is not None:
            data["actualDate"] = self.actual_date
        if self.history is not None:
            data["history"] = [e.to_dict() for e in self.history]
        return data


@dataclass(frozen=True)
class SnowReport:
    """Current conditions block of the snow report page."""

    new_snow: int = 0
    last_hour: int = 0
    twenty_four_hour: int = 0
    forty_eight_hour: int = 0
    seven_day: int = 0
    base_depth: int = 0
    season_total: int = 0
    alpine_temp: int | None = None
    condition: str | None = None
    wind_speed: int | None = None
    wind_direction: str | None = None

    def snow_dict(self) -> dict[str, int]:
        return {
            "newSnow": self.new_snow,
            "lastHour": self.last_hour,
            "twentyFourHour": self.twenty_four_hour,
            "fortyEightHour": self.forty_eight_hour,
            "sevenDay": self.seven_day,
            "baseDepth": self.base_depth,
            "seasonTotal": self.season_total,
        }

    def weather_dict(self) -> dict[str, Any]:
        weather: dict[str, Any] = {}
        if self.alpine_temp is not None:
            weather["alpineTemp"] = self.alpine_temp
        if self.condition is not None:
            weather["condition"] = self.condition
        if self.wind_speed is not None:
            weather["windSpeed"] = self.wind_speed
            weather["windDirection"] = self.wind_direction
        return weather
