from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Literal, Mapping
import logging
import math

import yaml

from aqindex.analysis.levels import AirQualityResult, SeverityLevel
from aqindex.core.config import DEFAULT_CONFIG
from aqindex.core.errors import StandardPackError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Breakpoint:
    concentration_low: float
    concentration_high: float
    aqi_low: int
    aqi_high: int
    level: SeverityLevel

    def contains(self, concentration: float) -> bool:
        return self.concentration_low <= concentration <= self.concentration_high


BreakpointTable = tuple[Breakpoint, ...]


@dataclass(frozen=True)
class StandardPack:
    name: str
    breakpoints: Mapping[str, BreakpointTable]

    def table(self, key: str) -> BreakpointTable:
        try:
            return self.breakpoints[key]
        except KeyError:
            raise KeyError(f"No breakpoint table {key!r} in {self.name}") from None


def _parse_row(table: str, row) -> Breakpoint:
    if not isinstance(row, (list, tuple)) or len(row) != 5:
        raise StandardPackError(f"{table}: breakpoint rows need 5 fields, got {row!r}")
    conc_low, conc_high, aqi_low, aqi_high, level_key = row
    try:
        level = SeverityLevel.from_key(str(level_key))
    except KeyError:
        raise StandardPackError(f"{table}: unknown level {level_key!r}") from None
    return Breakpoint(float(conc_low), float(conc_high), int(aqi_low), int(aqi_high), level)


def _validate_table(table: str, rows: BreakpointTable) -> None:
    if not rows:
        raise StandardPackError(f"{table}: table is empty")
    previous = None
    for bp in rows:
        if bp.concentration_low > bp.concentration_high:
            raise StandardPackError(f"{table}: inverted concentration range {bp}")
        if bp.aqi_low > bp.aqi_high:
            raise StandardPackError(f"{table}: inverted AQI range {bp}")
        if not (0 <= bp.aqi_low and bp.aqi_high <= 500):
            raise StandardPackError(f"{table}: AQI range outside 0-500 {bp}")
        if previous is not None and bp.concentration_low <= previous.concentration_high:
            raise StandardPackError(
                f"{table}: ranges must be ordered and disjoint "
                f"({previous.concentration_high} >= {bp.concentration_low})"
            )
        previous = bp


def load_standard_pack(path: Path) -> StandardPack:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict) or "breakpoints" not in data:
        raise StandardPackError(f"{path}: missing breakpoints section")
    tables: dict[str, BreakpointTable] = {}
    for key, rows in data["breakpoints"].items():
        table = tuple(_parse_row(key, row) for row in rows or [])
        _validate_table(key, table)
        tables[key] = table
    logger.debug("Loaded standard pack %s with %d tables", path.name, len(tables))
    return StandardPack(
        name=data.get("name", path.stem),
        breakpoints=MappingProxyType(tables),
    )


@lru_cache(maxsize=None)
def default_pack() -> StandardPack:
    return load_standard_pack(DEFAULT_CONFIG.standard_pack)


def find_breakpoint(table: BreakpointTable, concentration: float) -> Breakpoint | None:
    for bp in table:
        if bp.contains(concentration):
            return bp
    return None


def truncate(value: float, places: int) -> float:
    """Drop digits past ``places`` decimals without rounding.

    ``truncate(12.349999999, 1) == 12.3``. Floating-point error in
    ``value * 10**places`` is not compensated, so 0.57 truncated to two
    places gives 0.56.
    """
    if not math.isfinite(value):
        raise ValueError(f"Cannot truncate non-finite value {value!r}")
    factor = float(10**places)
    scaled = value * factor
    if not math.isfinite(scaled):
        raise ValueError(f"{value!r} overflows at {places} decimal places")
    return math.trunc(scaled) / factor


def truncate_whole(value: float) -> float:
    if not math.isfinite(value):
        raise ValueError(f"Cannot truncate non-finite value {value!r}")
    return float(math.trunc(value))


def round_half_up_native(value: float) -> int:
    return int(Decimal(value).to_integral_value(rounding=ROUND_HALF_UP))


def round_half_up_manual(value: float) -> int:
    # int() only drops the fraction; ties go away from zero
    whole = int(value)
    frac = value - whole
    if frac >= 0.5:
        whole += 1
    elif frac <= -0.5:
        whole -= 1
    return whole


def round_aqi(value: float, mode: Literal["native", "manual"] | None = None) -> int:
    if (mode or DEFAULT_CONFIG.rounding) == "manual":
        return round_half_up_manual(value)
    return round_half_up_native(value)


def raw_index(bp: Breakpoint, concentration: float) -> float:
    span = bp.concentration_high - bp.concentration_low
    if span == 0:
        return float(bp.aqi_low)
    return (bp.aqi_high - bp.aqi_low) / span * (concentration - bp.concentration_low) + bp.aqi_low


def interpolate(
    bp: Breakpoint,
    concentration: float,
    rounding: Literal["native", "manual"] | None = None,
) -> AirQualityResult:
    return AirQualityResult(aqi=round_aqi(raw_index(bp, concentration), rounding), level=bp.level)


def calc_aqi(
    table: BreakpointTable,
    concentration: float,
    rounding: Literal["native", "manual"] | None = None,
) -> AirQualityResult | None:
    bp = find_breakpoint(table, concentration)
    if bp is None:
        return None
    return interpolate(bp, concentration, rounding)
