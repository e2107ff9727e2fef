from __future__ import annotations

from typing import Any, Literal
import logging

import numpy as np
import pandas as pd

from aqindex.analysis.formulas import FORMULAS, TABLES
from aqindex.analysis.levels import AQI_BANDS
from aqindex.data.aliases import POLLUTANT_ORDER, match_columns

logger = logging.getLogger(__name__)

PM25_CORRECTIONS = {
    None: "pm2_5",
    "epa": "pm2_5_epa",
    "lrapa": "pm2_5_lrapa",
    "aqandu": "pm2_5_aqandu",
}

AVERAGING_WINDOWS = {
    "rolling_1h": "1h",
    "rolling_8h": "8h",
    "rolling_24h": "24h",
}


def _round_half_up(values: np.ndarray) -> np.ndarray:
    whole = np.trunc(values)
    frac = values - whole
    return whole + (frac >= 0.5) - (frac <= -0.5)


def _truncate_values(values: np.ndarray, places: int | None) -> np.ndarray:
    if places is None:
        return np.trunc(values)
    factor = float(10**places)
    return np.trunc(values * factor) / factor


def compute_formula(
    name: str,
    concentration: pd.Series,
    humidity: pd.Series | None = None,
) -> pd.DataFrame:
    """Vectorized counterpart of the scalar formula functions.

    Returns ``aqi`` (float, NaN where the formula does not apply) and
    ``level`` (:class:`SeverityLevel` or ``None``) aligned to the input index.
    """
    formula = FORMULAS[name]
    values = concentration.to_numpy(dtype=float)
    hum = None
    with np.errstate(invalid="ignore", over="ignore"):
        valid = np.isfinite(values)
        if formula.uses_humidity:
            if humidity is None:
                raise TypeError(f"{name} requires a humidity series")
            hum = humidity.reindex(concentration.index).to_numpy(dtype=float)
        if formula.domain is not None:
            valid &= np.asarray(formula.domain(values, hum), dtype=bool)

        corrected = formula.correction(values, hum) if formula.correction else values
        valid &= corrected >= 0.0
        truncated = _truncate_values(corrected, formula.places)
        truncated = np.where(valid, truncated, np.nan)

    aqi = np.full(len(values), np.nan)
    levels = np.full(len(values), None, dtype=object)
    for bp in TABLES[formula.table]:
        mask = (truncated >= bp.concentration_low) & (truncated <= bp.concentration_high)
        if not mask.any():
            continue
        span = bp.concentration_high - bp.concentration_low
        if span == 0:
            raw = np.full(int(mask.sum()), float(bp.aqi_low))
        else:
            slope = (bp.aqi_high - bp.aqi_low) / span
            raw = slope * (truncated[mask] - bp.concentration_low) + bp.aqi_low
        aqi[mask] = _round_half_up(raw)
        levels[mask] = bp.level

    missed = int(np.isnan(aqi).sum())
    if missed:
        logger.debug("%s: %d of %d readings outside the formula domain", name, missed, len(aqi))
    return pd.DataFrame({"aqi": aqi, "level": levels}, index=concentration.index)


def apply_averaging(series: pd.Series, mode: str) -> pd.Series:
    if mode == "instant":
        return series
    if not isinstance(series.index, pd.DatetimeIndex):
        raise ValueError("Averaging requires DatetimeIndex")
    if mode in AVERAGING_WINDOWS:
        return series.rolling(AVERAGING_WINDOWS[mode], min_periods=1).mean()
    if mode == "daily":
        return series.resample("D").mean()
    raise ValueError(f"Unknown averaging mode {mode!r}")


def compute_aqi(
    frame: pd.DataFrame,
    pm2_5_correction: Literal["epa", "lrapa", "aqandu"] | None = None,
) -> pd.DataFrame:
    """Sub-index per recognized pollutant column plus the overall AQI.

    Column names are matched through :mod:`aqindex.data.aliases`. The EPA
    PM2.5 correction reads humidity (fraction 0.0-1.0) from the ``RH`` /
    ``humidity`` column.
    """
    if pm2_5_correction not in PM25_CORRECTIONS:
        raise ValueError(f"Unknown PM2.5 correction {pm2_5_correction!r}")
    columns = match_columns(frame.columns)
    humidity = frame[columns["humidity"]] if "humidity" in columns else None

    data: dict[str, pd.Series] = {}
    for pollutant in POLLUTANT_ORDER:
        if pollutant not in columns:
            continue
        name = pollutant
        if pollutant == "pm2_5":
            name = PM25_CORRECTIONS[pm2_5_correction]
            if FORMULAS[name].uses_humidity and humidity is None:
                raise ValueError("EPA PM2.5 correction needs a humidity column")
        result = compute_formula(name, frame[columns[pollutant]], humidity)
        data[f"aqi_{pollutant}"] = result["aqi"]

    df = pd.DataFrame(data, index=frame.index)
    if not df.empty:
        df["aqi_overall"] = df.max(axis=1, skipna=True)
        df["aqi_level"] = classify_aqi(df["aqi_overall"])
    return df


def classify_aqi(aqi_series: pd.Series) -> pd.Series:
    empty = np.full(len(aqi_series), None, dtype=object)
    out = pd.Series(empty, index=aqi_series.index, dtype=object)
    for low, high, level in AQI_BANDS:
        mask = (aqi_series >= low) & (aqi_series <= high)
        out.loc[mask] = level
    return out


def aqi_summary(aqi_series: pd.Series) -> dict[str, Any]:
    summary: dict[str, Any] = {}
    summary["max"] = float(aqi_series.max()) if not aqi_series.empty else None
    summary["mean"] = float(aqi_series.mean()) if not aqi_series.empty else None

    if isinstance(aqi_series.index, pd.DatetimeIndex):
        deltas = aqi_series.index.to_series().diff().dt.total_seconds().fillna(0)
        for low, high, level in AQI_BANDS:
            mask = (aqi_series >= low) & (aqi_series <= high)
            summary[f"time_{level.name.lower()}"] = float(deltas[mask].sum())
    return summary
