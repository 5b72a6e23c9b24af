import math

import pytest

from cn105.decode import (
    SettingsReading,
    StandbyReading,
    decode_room_temperature,
    decode_settings,
    decode_standby,
    decode_status,
)
from cn105.protocol import ROOM_TEMP_MAP, TEMP_MAP, HeatpumpStatus

SETTINGS = bytes.fromhex("FC 62 01 30 10 02 00 00 01 08 0A 00 07 00 00 03 AA 00 00 00 00 94")[5:21]
ROOM = bytes.fromhex("FC 62 01 30 10 03 00 00 0E 00 94 B0 B0 FE 42 00 01 0A 64 00 00 A9")[5:21]
STATUS_IDLE = bytes.fromhex("FC 62 01 30 10 06 00 00 1A 01 00 00 00 00 00 00 00 00 00 00 00 3C")[5:21]
STATUS_POWER = bytes.fromhex("FC 62 01 30 10 06 00 00 00 01 00 08 05 50 00 00 42 00 00 00 00 B7")[5:21]
STANDBY = bytes.fromhex("FC 62 01 30 10 09 00 00 00 02 02 00 00 00 00 00 00 00 00 00 00 50")[5:21]


@pytest.fixture
def current():
    return HeatpumpStatus(
        room_temperature=19.5,
        outside_air_temperature=5.0,
        operating=True,
        compressor_frequency=30.0,
        input_power=500.0,
        kwh=12.5,
        runtime_hours=7.0,
    )


def _with(data, **changes):
    out = bytearray(data)
    for key, value in changes.items():
        out[int(key[1:])] = value
    return bytes(out)


def test_decode_settings_example():
    reading = decode_settings(SETTINGS)
    assert isinstance(reading, SettingsReading)
    s = reading.settings
    assert s.power == "ON"
    assert s.mode == "AUTO"
    assert s.isee is False
    assert s.fan == "AUTO"
    assert s.vane == "SWING"
    assert s.wide_vane == "|"
    assert s.connected is True
    assert reading.wide_vane_adj is False
    assert reading.temp_mode is True
    # Both temperature encodings in the sample agree.
    assert s.temperature == float(TEMP_MAP[0x0A])


def test_decode_settings_legacy_temperature():
    reading = decode_settings(_with(SETTINGS, d11=0x00))
    assert reading.temp_mode is False
    assert reading.settings.temperature == float(TEMP_MAP[0x0A])


def test_decode_settings_isee_flag_shifts_mode():
    reading = decode_settings(_with(SETTINGS, d4=0x0B))
    assert reading.settings.isee is True
    assert reading.settings.mode == "COOL"


def test_decode_settings_wide_vane_adjustment():
    reading = decode_settings(_with(SETTINGS, d10=0x83))
    assert reading.wide_vane_adj is True
    assert reading.settings.wide_vane == "|"


def test_decode_settings_unknown_byte_falls_back_to_first_entry():
    reading = decode_settings(_with(SETTINGS, d3=0x05))
    assert reading.settings.power == "OFF"


def test_decode_settings_rejects_short_payload():
    with pytest.raises(ValueError):
        decode_settings(SETTINGS[:8])


def test_decode_room_temperature_example(current):
    status = decode_room_temperature(ROOM, current)
    assert status.outside_air_temperature == 10.0
    assert status.room_temperature == 24.0
    assert status.runtime_hours * 60 == pytest.approx(0x010A64)
    assert status.operating is current.operating
    assert status.compressor_frequency == current.compressor_frequency
    assert status.input_power == current.input_power
    assert status.kwh == current.kwh


def test_decode_room_temperature_fallbacks(current):
    status = decode_room_temperature(_with(ROOM, d5=0x01, d6=0x00), current)
    assert math.isnan(status.outside_air_temperature)
    assert status.room_temperature == float(ROOM_TEMP_MAP[0x0E])


def test_decode_room_temperature_runtime_grows_with_minutes(current):
    short = decode_room_temperature(_with(ROOM, d11=0, d12=0, d13=0), current)
    longer = decode_room_temperature(_with(ROOM, d11=0, d12=1, d13=0), current)
    assert short.runtime_hours == 0.0
    assert longer.runtime_hours > short.runtime_hours


def test_decode_status_idle_example(current):
    status = decode_status(STATUS_IDLE, current)
    assert status.compressor_frequency == 0x1A
    assert status.operating is True
    assert status.input_power == 0
    assert status.kwh == 0
    assert status.room_temperature == current.room_temperature
    assert status.outside_air_temperature == current.outside_air_temperature
    assert status.runtime_hours == current.runtime_hours


def test_decode_status_power_example(current):
    status = decode_status(STATUS_POWER, current)
    assert status.compressor_frequency == 0
    assert status.operating is True
    assert status.input_power == 0x08
    assert status.kwh == 136.0


def test_decode_status_not_operating(current):
    status = decode_status(_with(STATUS_IDLE, d4=0x00), current)
    assert status.operating is False


def test_decode_status_rejects_short_payload(current):
    with pytest.raises(ValueError):
        decode_status(STATUS_IDLE[:5], current)


def test_decode_standby_example():
    reading = decode_standby(STANDBY)
    assert reading == StandbyReading(stage="GENTLE", sub_mode="NORMAL", auto_sub_mode="AUTO_HEAT")


def test_decode_standby_unknown_stage_falls_back():
    reading = decode_standby(_with(STANDBY, d4=0x09, d3=0x08))
    assert reading.stage == "IDLE"
    assert reading.sub_mode == "STANDBY"


def test_decode_standby_rejects_short_payload():
    with pytest.raises(ValueError):
        decode_standby(STANDBY[:4])