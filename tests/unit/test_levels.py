import numpy as np
import pytest

from aqindex.analysis.levels import (
    AirQualityResult,
    SeverityLevel,
    level_from_aqi,
    level_from_i16,
    level_from_i32,
    level_from_i64,
    level_from_u16,
    level_from_u32,
    level_from_u64,
)
from aqindex.core.errors import AqiRangeError

WIDTH_CONVERTERS = [
    level_from_u16,
    level_from_i16,
    level_from_u32,
    level_from_i32,
    level_from_u64,
    level_from_i64,
]


@pytest.mark.parametrize(
    "value,level",
    [
        (0, SeverityLevel.GOOD),
        (50, SeverityLevel.GOOD),
        (51, SeverityLevel.MODERATE),
        (100, SeverityLevel.MODERATE),
        (101, SeverityLevel.UNHEALTHY_SENSITIVE),
        (150, SeverityLevel.UNHEALTHY_SENSITIVE),
        (151, SeverityLevel.UNHEALTHY),
        (200, SeverityLevel.UNHEALTHY),
        (201, SeverityLevel.VERY_UNHEALTHY),
        (300, SeverityLevel.VERY_UNHEALTHY),
        (301, SeverityLevel.HAZARDOUS),
        (500, SeverityLevel.HAZARDOUS),
    ],
)
def test_level_bands(value, level):
    assert level_from_aqi(value) is level
    for convert in WIDTH_CONVERTERS:
        assert convert(value) is level


@pytest.mark.parametrize("convert", WIDTH_CONVERTERS)
def test_above_scale_is_range_error(convert):
    with pytest.raises(AqiRangeError, match="out of range for AQI"):
        convert(501)


@pytest.mark.parametrize("convert", [level_from_i16, level_from_i32, level_from_i64])
def test_negative_signed_is_range_error(convert):
    with pytest.raises(AqiRangeError):
        convert(-1)


@pytest.mark.parametrize("convert", [level_from_u16, level_from_u32, level_from_u64])
def test_negative_unsigned_does_not_fit(convert):
    with pytest.raises(OverflowError):
        convert(-1)


def test_width_overflow():
    with pytest.raises(OverflowError):
        level_from_i16(2**15)
    with pytest.raises(OverflowError):
        level_from_u64(2**64)
    with pytest.raises(AqiRangeError):
        level_from_u64(2**64 - 1)


def test_range_error_is_value_error():
    with pytest.raises(ValueError):
        level_from_aqi(10_000)


def test_numpy_integers():
    assert level_from_aqi(np.int64(75)) is SeverityLevel.MODERATE
    assert level_from_u16(np.uint16(151)) is SeverityLevel.UNHEALTHY
    assert level_from_i16(np.int16(0)) is SeverityLevel.GOOD


@pytest.mark.parametrize("value", [True, 50.0, "50", None])
def test_non_integers_rejected(value):
    with pytest.raises(TypeError):
        level_from_aqi(value)


def test_from_aqi_and_from_key():
    assert SeverityLevel.from_aqi(250) is SeverityLevel.VERY_UNHEALTHY
    assert SeverityLevel.from_key("unhealthy_sensitive") is SeverityLevel.UNHEALTHY_SENSITIVE
    assert SeverityLevel.UNHEALTHY_SENSITIVE.value == "Unhealthy for Sensitive Groups"


def test_levels_declared_in_severity_order():
    assert [level.name for level in SeverityLevel] == [
        "GOOD",
        "MODERATE",
        "UNHEALTHY_SENSITIVE",
        "UNHEALTHY",
        "VERY_UNHEALTHY",
        "HAZARDOUS",
    ]


def test_result_is_immutable():
    result = AirQualityResult(42, SeverityLevel.GOOD)
    with pytest.raises(AttributeError):
        result.aqi = 43
