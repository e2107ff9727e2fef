ALIAS_MAP = {
    "ozone8": ["O3", "O3_8H", "ozone", "ozone8", "ozone_8h"],
    "ozone1": ["O3_1H", "ozone1", "ozone_1h"],
    "pm2_5": ["PM2.5", "PM2_5", "PM25", "pm2_5"],
    "pm10": ["PM10", "PM10.0", "pm10"],
    "co": ["CO", "co", "co_8h"],
    "so2_1": ["SO2", "SO2_1H", "so2", "so2_1"],
    "so2_24": ["SO2_24H", "so2_24"],
    "no2": ["NO2", "NO2_1H", "no2"],
    "humidity": ["RH", "rh", "humidity"],
}

POLLUTANT_ORDER = [
    "ozone8",
    "ozone1",
    "pm2_5",
    "pm10",
    "co",
    "so2_1",
    "so2_24",
    "no2",
]


ALIAS_LOOKUP = {
    alias.lower(): canon for canon, aliases in ALIAS_MAP.items() for alias in aliases
}


def match_columns(columns) -> dict[str, str]:
    """Map each recognized pollutant (and humidity) to the first column naming it."""
    matched: dict[str, str] = {}
    for column in columns:
        canon = ALIAS_LOOKUP.get(str(column).strip().lower())
        if canon is not None:
            matched.setdefault(canon, column)
    return matched
