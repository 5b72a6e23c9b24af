import math

import pytest

from cn105 import protocol
from cn105.protocol import (
    HeatpumpSettings,
    HeatpumpStatus,
    HeatpumpTimers,
    WantedSettings,
)


def _settings(**kwargs):
    base = dict(power="ON", mode="HEAT", temperature=21.0, fan="AUTO", vane="AUTO", wide_vane="|")
    base.update(kwargs)
    return HeatpumpSettings(**base)


def test_reset_clears_controllable_settings():
    s = _settings(stage="LOW")
    s.reset()
    assert (s.power, s.mode, s.fan, s.vane, s.wide_vane) == (None,) * 5
    assert s.temperature == -1.0
    assert s.stage == "LOW"


def test_settings_equality_ignores_isee_and_connection():
    assert _settings(isee=True, connected=True) == _settings(isee=False)


@pytest.mark.parametrize(
    "change",
    [{"power": "OFF"}, {"mode": "COOL"}, {"temperature": 22.5}, {"fan": "QUIET"}, {"vane": "SWING"}, {"wide_vane": "SWING"}],
)
def test_settings_inequality_on_each_field(change):
    assert _settings() != _settings(**change)


def test_settings_not_equal_to_other_types():
    assert (_settings() == "ON") is False


def test_wanted_settings_start_unset():
    w = WantedSettings()
    assert w.temperature == protocol.UNSET_TEMPERATURE
    assert not w.has_changed and not w.has_been_sent


def test_wanted_mark_changed_and_reset():
    w = WantedSettings(power="ON", has_been_sent=True)
    w.mark_changed(1234)
    assert (w.has_changed, w.has_been_sent, w.last_change) == (True, False, 1234)
    w.reset()
    assert (w.has_changed, w.has_been_sent, w.power) == (False, False, None)
    assert w.last_change == 1234


def test_wanted_compares_with_plain_settings():
    w = WantedSettings(power="ON", mode="HEAT", temperature=21.0, fan="AUTO", vane="AUTO", wide_vane="|")
    assert w == _settings()


def test_status_equal_when_both_room_temperatures_nan():
    a = HeatpumpStatus(room_temperature=math.nan, outside_air_temperature=math.nan)
    b = HeatpumpStatus(room_temperature=math.nan, outside_air_temperature=math.nan)
    assert a == b


def test_status_nan_differs_from_number():
    assert HeatpumpStatus(room_temperature=math.nan) != HeatpumpStatus(room_temperature=20.0)


def test_status_ignores_timers():
    a = HeatpumpStatus(timers=HeatpumpTimers(mode="ON", on_minutes_set=30))
    assert a == HeatpumpStatus()


def test_status_nan_compressor_frequency_is_never_equal():
    a = HeatpumpStatus(compressor_frequency=math.nan)
    b = HeatpumpStatus(compressor_frequency=math.nan)
    assert a != b


def test_timers_equality():
    assert HeatpumpTimers() == HeatpumpTimers(mode="NONE")
    assert HeatpumpTimers(on_minutes_set=10) != HeatpumpTimers()


@pytest.mark.parametrize(
    "codes,values",
    [
        (protocol.POWER, protocol.POWER_MAP),
        (protocol.MODE, protocol.MODE_MAP),
        (protocol.TEMP, protocol.TEMP_MAP),
        (protocol.FAN, protocol.FAN_MAP),
        (protocol.VANE, protocol.VANE_MAP),
        (protocol.WIDEVANE, protocol.WIDEVANE_MAP),
        (protocol.ROOM_TEMP, protocol.ROOM_TEMP_MAP),
        (protocol.TIMER_MODE, protocol.TIMER_MODE_MAP),
        (protocol.STAGE, protocol.STAGE_MAP),
        (protocol.SUB_MODE, protocol.SUB_MODE_MAP),
        (protocol.AUTO_SUB_MODE, protocol.AUTO_SUB_MODE_MAP),
    ],
)
def test_maps_are_parallel_and_unique(codes, values):
    assert len(codes) == len(values)
    assert len(set(codes)) == len(codes)


def test_wire_constants():
    assert protocol.CONNECT == bytes([0xFC, 0x5A, 0x01, 0x30, 0x02, 0xCA, 0x01, 0xA8])
    assert protocol.INFOHEADER == protocol.HEADER[:5].replace(b"\x41", b"\x42")
    assert protocol.INFOMODE[protocol.RQST_PKT_STANDBY] == 0x09
    assert protocol.ROOM_TEMP_MAP[0] == 10 and protocol.ROOM_TEMP_MAP[-1] == 41