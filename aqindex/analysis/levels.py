from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import numbers

from aqindex.core.errors import AqiRangeError


class SeverityLevel(Enum):
    """Human-readable interpretation of an AQI value.

    Members are declared from least to most severe. No ordering operators
    are defined; compare AQI numbers when an order is needed.
    """

    GOOD = "Good"
    MODERATE = "Moderate"
    UNHEALTHY_SENSITIVE = "Unhealthy for Sensitive Groups"
    UNHEALTHY = "Unhealthy"
    VERY_UNHEALTHY = "Very Unhealthy"
    HAZARDOUS = "Hazardous"

    @classmethod
    def from_key(cls, key: str) -> SeverityLevel:
        return cls[key.strip().upper()]

    @classmethod
    def from_aqi(cls, value) -> SeverityLevel:
        return level_from_aqi(value)


@dataclass(frozen=True)
class AirQualityResult:
    aqi: int
    level: SeverityLevel


AQI_BANDS: tuple[tuple[int, int, SeverityLevel], ...] = (
    (0, 50, SeverityLevel.GOOD),
    (51, 100, SeverityLevel.MODERATE),
    (101, 150, SeverityLevel.UNHEALTHY_SENSITIVE),
    (151, 200, SeverityLevel.UNHEALTHY),
    (201, 300, SeverityLevel.VERY_UNHEALTHY),
    (301, 500, SeverityLevel.HAZARDOUS),
)

INTEGER_WIDTHS: dict[str, tuple[int, int]] = {
    "u16": (0, 2**16 - 1),
    "i16": (-(2**15), 2**15 - 1),
    "u32": (0, 2**32 - 1),
    "i32": (-(2**31), 2**31 - 1),
    "u64": (0, 2**64 - 1),
    "i64": (-(2**63), 2**63 - 1),
}


def level_from_aqi(value) -> SeverityLevel:
    """Classify an integer AQI into its band.

    Accepts any integral value (``int`` or numpy integer scalars). Raises
    :class:`AqiRangeError` outside 0-500.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeError(f"AQI must be an integer, got {type(value).__name__}")
    number = int(value)
    for low, high, level in AQI_BANDS:
        if low <= number <= high:
            return level
    raise AqiRangeError()


def _level_from_width(value, width: str) -> SeverityLevel:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeError(f"{width} value must be an integer, got {type(value).__name__}")
    low, high = INTEGER_WIDTHS[width]
    if not low <= int(value) <= high:
        raise OverflowError(f"{value} does not fit in {width}")
    return level_from_aqi(value)


def level_from_u16(value) -> SeverityLevel:
    return _level_from_width(value, "u16")


def level_from_i16(value) -> SeverityLevel:
    return _level_from_width(value, "i16")


def level_from_u32(value) -> SeverityLevel:
    return _level_from_width(value, "u32")


def level_from_i32(value) -> SeverityLevel:
    return _level_from_width(value, "i32")


def level_from_u64(value) -> SeverityLevel:
    return _level_from_width(value, "u64")


def level_from_i64(value) -> SeverityLevel:
    return _level_from_width(value, "i64")
