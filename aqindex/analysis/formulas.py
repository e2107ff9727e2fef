from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterable, Literal
import logging
import math

from aqindex.analysis.aqi import calc_aqi, default_pack, truncate, truncate_whole
from aqindex.analysis.levels import AirQualityResult

logger = logging.getLogger(__name__)

TABLES = default_pack().breakpoints


def _epa_correction(concentration, humidity):
    return 0.52 * concentration - 0.085 * humidity + 5.71


def _epa_domain(concentration, humidity):
    return (humidity >= 0.0) & (humidity <= 1.0)


def _lrapa_correction(concentration, humidity):
    return 0.5 * concentration - 0.66


def _lrapa_domain(concentration, humidity):
    return concentration <= 65.0


def _aqandu_correction(concentration, humidity):
    return 0.778 * concentration + 2.65


@dataclass(frozen=True)
class Formula:
    """How one entry point turns a reading into a table lookup.

    The correction and domain callables only use arithmetic and ``&`` so the
    same definitions serve plain floats and numpy arrays.
    """

    name: str
    table: str
    places: int | None
    correction: Callable | None = None
    domain: Callable | None = None
    uses_humidity: bool = False


FORMULAS = MappingProxyType(
    {
        f.name: f
        for f in (
            Formula("ozone8", "ozone8", 3),
            Formula("ozone1", "ozone1", 3),
            Formula("pm2_5", "pm2_5", 1),
            Formula("pm2_5_epa", "pm2_5", 1, _epa_correction, _epa_domain, uses_humidity=True),
            Formula("pm2_5_lrapa", "pm2_5", 1, _lrapa_correction, _lrapa_domain),
            Formula("pm2_5_aqandu", "pm2_5", 1, _aqandu_correction),
            # PM10 breakpoints are whole ug/m3
            Formula("pm10", "pm10", None),
            Formula("co", "co", 1),
            Formula("so2_1", "so2_1", 0),
            Formula("so2_24", "so2_24", 0),
            Formula("no2", "no2", 0),
        )
    }
)


def evaluate(
    name: str,
    concentration: float,
    humidity: float | None = None,
    rounding: Literal["native", "manual"] | None = None,
) -> AirQualityResult | None:
    """Run a registered formula on one reading.

    Returns ``None`` when the reading (after correction and truncation) or
    the humidity is outside the formula's domain.
    """
    formula = FORMULAS[name]
    if not math.isfinite(concentration):
        logger.debug("%s: non-finite concentration %r", name, concentration)
        return None
    if formula.uses_humidity:
        if humidity is None:
            raise TypeError(f"{name} requires a humidity value")
        if not _accepted(formula, concentration, humidity):
            logger.debug("%s: humidity %r outside 0.0-1.0", name, humidity)
            return None
    elif formula.domain is not None and not _accepted(formula, concentration, humidity):
        logger.debug("%s: concentration %r outside correction domain", name, concentration)
        return None

    value = concentration
    if formula.correction is not None:
        value = formula.correction(concentration, humidity)
    # negative readings are a domain miss, never clamped to zero
    if not value >= 0.0:
        logger.debug("%s: corrected concentration %r is negative", name, value)
        return None
    try:
        if formula.places is None:
            value = truncate_whole(value)
        else:
            value = truncate(value, formula.places)
    except ValueError:
        logger.debug("%s: concentration %r overflows truncation", name, value)
        return None

    result = calc_aqi(TABLES[formula.table], value, rounding)
    if result is None:
        logger.debug("%s: %r is outside the %s breakpoints", name, value, formula.table)
    return result


def _accepted(formula: Formula, concentration: float, humidity: float | None) -> bool:
    return bool(formula.domain(concentration, humidity))


def ozone8(concentration: float) -> AirQualityResult | None:
    """Ozone AQI from an 8-hour average in ppm.

    Defined for 0.000-0.200 ppm. Above that, use :func:`ozone1` with a
    1-hour reading.
    """
    return evaluate("ozone8", concentration)


def ozone1(concentration: float) -> AirQualityResult | None:
    """Ozone AQI from a 1-hour average in ppm.

    Defined for 0.125-0.604 ppm; lower readings belong to :func:`ozone8`.
    """
    return evaluate("ozone1", concentration)


def pm2_5(concentration: float) -> AirQualityResult | None:
    """PM2.5 AQI from a 24-hour average in ug/m3 (0.0-500.4)."""
    return evaluate("pm2_5", concentration)


def pm2_5_epa(concentration: float, humidity: float) -> AirQualityResult | None:
    """PM2.5 AQI after the US EPA PurpleAir correction.

    The corrected value is ``0.52 * c - 0.085 * rh + 5.71`` where ``rh`` is
    relative humidity as a fraction. Humidity outside 0.0-1.0 gives ``None``.
    """
    return evaluate("pm2_5_epa", concentration, humidity)


def pm2_5_lrapa(concentration: float) -> AirQualityResult | None:
    """PM2.5 AQI after the LRAPA correction ``0.5 * c - 0.66``.

    The correction only holds for raw readings up to 65.0 ug/m3.
    """
    return evaluate("pm2_5_lrapa", concentration)


def pm2_5_aqandu(concentration: float) -> AirQualityResult | None:
    """PM2.5 AQI after the AQandU correction ``0.778 * c + 2.65``."""
    return evaluate("pm2_5_aqandu", concentration)


def pm10(concentration: float) -> AirQualityResult | None:
    return evaluate("pm10", concentration)


def co(concentration: float) -> AirQualityResult | None:
    """Carbon monoxide AQI from an 8-hour average in ppm (0.0-50.4)."""
    return evaluate("co", concentration)


def so2_1(concentration: float) -> AirQualityResult | None:
    """Sulfur dioxide AQI from a 1-hour average in ppb.

    Only defined up to 185 ppb; higher readings need :func:`so2_24`.
    """
    return evaluate("so2_1", concentration)


def so2_24(concentration: float) -> AirQualityResult | None:
    return evaluate("so2_24", concentration)


def no2(concentration: float) -> AirQualityResult | None:
    """Nitrogen dioxide AQI from a 1-hour average in ppb (0-2049)."""
    return evaluate("no2", concentration)


def overall_aqi(results: Iterable[AirQualityResult | None]) -> AirQualityResult | None:
    """Highest sub-index among the results that are not ``None``."""
    best = None
    for result in results:
        if result is None:
            continue
        if best is None or result.aqi > best.aqi:
            best = result
    return best
