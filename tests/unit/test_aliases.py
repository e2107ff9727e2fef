from aqindex.data.aliases import match_columns


def test_match_columns_is_case_and_space_insensitive():
    matched = match_columns([" pm2.5 ", "Temp", "o3_1h", "RH"])
    assert matched == {"pm2_5": " pm2.5 ", "ozone1": "o3_1h", "humidity": "RH"}


def test_match_columns_first_column_wins():
    assert match_columns(["PM10", "pm10.0"]) == {"pm10": "PM10"}


def test_match_columns_ignores_unknown():
    assert match_columns(["voc", 3]) == {}
