import math

import pytest

from cn105.protocol import (
    CONNECT,
    FAN,
    FAN_MAP,
    MODE,
    MODE_MAP,
    ROOM_TEMP,
    ROOM_TEMP_MAP,
    TEMP_MAP,
    VANE_MAP,
    WIDEVANE,
    WIDEVANE_MAP,
    HeatpumpSettings,
    HeatpumpStatus,
    WantedSettings,
)
from cn105.util import (
    celsius_to_fahrenheit,
    fahrenheit_to_celsius,
    format_settings,
    format_status,
    has_changed,
    is_wanted_setting_applied,
    lookup_index,
    lookup_value,
    packet_hex,
)


def test_lookup_index_is_case_insensitive():
    assert lookup_index(MODE_MAP, "cool") == MODE_MAP.index("COOL")
    assert lookup_index(FAN_MAP, "Quiet") == FAN_MAP.index("QUIET")


def test_lookup_index_unicode_entries():
    assert lookup_index(VANE_MAP, "SWING") == VANE_MAP.index("SWING")
    assert lookup_index(WIDEVANE_MAP, "|") == WIDEVANE_MAP.index("|")


def test_lookup_index_missing_string():
    assert lookup_index(MODE_MAP, "TURBO", "mode") is None


def test_lookup_index_numbers_truncate():
    assert lookup_index(TEMP_MAP, 22) == TEMP_MAP.index(22)
    assert lookup_index(TEMP_MAP, 22.7) == TEMP_MAP.index(22)


def test_lookup_index_missing_number():
    assert lookup_index(TEMP_MAP, 40) is None


def test_lookup_value_known_bytes_round_trip():
    table = dict(zip(MODE, MODE_MAP))
    for byte in MODE:
        value = lookup_value(table, byte, "mode")
        assert MODE[lookup_index(MODE_MAP, value)] == byte


def test_lookup_value_unknown_falls_back_to_first():
    table = dict(zip(FAN, FAN_MAP))
    assert lookup_value(table, 0x7F, "fan") == FAN_MAP[0]


def test_lookup_value_unknown_uses_default():
    table = dict(zip(WIDEVANE, WIDEVANE_MAP))
    assert lookup_value(table, 0x0F, "wideVane", "fallback") == "fallback"


def test_lookup_value_numeric_map():
    table = dict(zip(ROOM_TEMP, ROOM_TEMP_MAP))
    assert lookup_value(table, ROOM_TEMP[5]) == ROOM_TEMP_MAP[5]
    assert lookup_value(table, 0xEE) == ROOM_TEMP_MAP[0]


def test_lookup_value_empty_map():
    with pytest.raises(ValueError):
        lookup_value({}, 1)


@pytest.mark.parametrize(
    "before, now, expected",
    [
        (None, "ON", True),
        ("ON", "ON", False),
        ("ON", "OFF", True),
        ("ON", None, False),
        (None, None, False),
    ],
)
def test_has_changed(before, now, expected):
    assert has_changed(before, now, "power") is expected


def test_has_changed_check_not_null_still_false():
    assert has_changed("ON", None, "power", True) is False


@pytest.mark.parametrize(
    "wanted, current, expected",
    [(None, "ON", True), ("ON", "ON", True), ("ON", "OFF", False)],
)
def test_is_wanted_setting_applied(wanted, current, expected):
    assert is_wanted_setting_applied(wanted, current, "power") is expected


def test_packet_hex_round_trip():
    text = packet_hex(CONNECT)
    assert bytes.fromhex(text) == CONNECT
    assert len(text) == 3 * len(CONNECT)
    assert text == text.upper()
    assert text.endswith(" ")


def test_packet_hex_empty():
    assert packet_hex(b"") == ""


def test_format_settings_plain():
    settings = HeatpumpSettings(
        power="ON", mode="COOL", temperature=22.5, fan="AUTO", vane=None, wide_vane="|"
    )
    assert format_settings("current", settings) == (
        "[current]-> [power: ON, target °C: 22.5, mode: COOL, fan: AUTO, vane: -, wvane: |]"
    )


def test_format_settings_unnamed_and_wanted_flags():
    wanted = WantedSettings(power="OFF")
    wanted.mark_changed(10)
    text = format_settings(None, wanted)
    assert text.startswith("[unnamed]-> [power: OFF")
    assert text.endswith("hasChanged ? -> YES, hasBeenSent ? ->  NO]")


def test_format_status():
    status = HeatpumpStatus(room_temperature=21.5, operating=True, compressor_frequency=30)
    assert format_status("received", status) == (
        "[received]-> [room C°: 21.5, operating: YES, compressor freq: 30.0 Hz]"
    )


def test_format_status_not_operating():
    status = HeatpumpStatus(room_temperature=math.nan)
    assert "operating: NO ," in format_status("current", status)


def test_fahrenheit_to_celsius_value():
    assert fahrenheit_to_celsius(72) == 22.0


def test_celsius_to_fahrenheit_value():
    assert celsius_to_fahrenheit(22.0) == 72


def test_fahrenheit_to_celsius_is_half_degree():
    for temp_f in range(50, 95):
        celsius = fahrenheit_to_celsius(temp_f)
        assert (celsius * 2) == int(celsius * 2)


def test_conversion_round_trip_stays_close():
    for half_degrees in range(20, 63):
        celsius = half_degrees / 2
        back = fahrenheit_to_celsius(celsius_to_fahrenheit(celsius))
        assert abs(back - celsius) <= 0.5