"""Decoding of the data payloads the heat pump sends back."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from .protocol import (
    AUTO_SUB_MODE,
    AUTO_SUB_MODE_MAP,
    FAN,
    FAN_MAP,
    MODE,
    MODE_MAP,
    POWER,
    POWER_MAP,
    ROOM_TEMP,
    ROOM_TEMP_MAP,
    STAGE,
    STAGE_MAP,
    SUB_MODE,
    SUB_MODE_MAP,
    TEMP,
    TEMP_MAP,
    VANE,
    VANE_MAP,
    WIDEVANE,
    WIDEVANE_MAP,
    HeatpumpSettings,
    HeatpumpStatus,
)
from .util import lookup_value

_log = logging.getLogger("Decoder")

_POWER = dict(zip(POWER, POWER_MAP))
_MODE = dict(zip(MODE, MODE_MAP))
_TEMP = dict(zip(TEMP, TEMP_MAP))
_FAN = dict(zip(FAN, FAN_MAP))
_VANE = dict(zip(VANE, VANE_MAP))
_WIDEVANE = dict(zip(WIDEVANE, WIDEVANE_MAP))
_ROOM_TEMP = dict(zip(ROOM_TEMP, ROOM_TEMP_MAP))
_STAGE = dict(zip(STAGE, STAGE_MAP))
_SUB_MODE = dict(zip(SUB_MODE, SUB_MODE_MAP))
_AUTO_SUB_MODE = dict(zip(AUTO_SUB_MODE, AUTO_SUB_MODE_MAP))

_ISEE_FLAG = 0x08


@dataclass
class SettingsReading:
    """A decoded settings payload.

    ``temp_mode`` is true when the temperature came in the half-degree
    encoding; ``wide_vane_adj`` tells whether the wide vane byte carries the
    adjustment flag.
    """

    settings: HeatpumpSettings
    temp_mode: bool
    wide_vane_adj: bool


@dataclass(frozen=True)
class StandbyReading:
    """A decoded power/standby payload."""

    stage: str
    sub_mode: str
    auto_sub_mode: str


def _require(data: Sequence[int], length: int, what: str) -> None:
    if len(data) < length:
        raise ValueError(f"{what} payload needs {length} bytes, got {len(data)}")


def _half_degrees(byte: int) -> float:
    return (byte - 128) / 2


def decode_settings(data: Sequence[int]) -> SettingsReading:
    """Decode a settings (0x02) payload."""
    _require(data, 12, "settings")
    isee = data[4] > _ISEE_FLAG
    settings = HeatpumpSettings(
        power=lookup_value(_POWER, data[3], "power reading"),
        mode=lookup_value(_MODE, data[4] - _ISEE_FLAG if isee else data[4], "mode reading"),
        fan=lookup_value(_FAN, data[6], "fan reading"),
        vane=lookup_value(_VANE, data[7], "vane reading"),
        wide_vane=lookup_value(_WIDEVANE, data[10] & 0x0F, "wideVane reading"),
        isee=isee,
        connected=True,
    )
    temp_mode = data[11] != 0x00
    if temp_mode:
        settings.temperature = _half_degrees(data[11])
    else:
        settings.temperature = float(lookup_value(_TEMP, data[5], "temperature reading"))
    wide_vane_adj = (data[10] & 0xF0) == 0x80
    _log.debug(
        "[Power : %s] [iSee : %s] [Mode : %s] [Temp °C: %f] [Fan: %s] [Vane: %s] [wideVane: %s (adj:%s)]",
        settings.power, settings.isee, settings.mode, settings.temperature,
        settings.fan, settings.vane, settings.wide_vane, wide_vane_adj,
    )
    return SettingsReading(settings, temp_mode, wide_vane_adj)


def decode_room_temperature(data: Sequence[int], current: HeatpumpStatus) -> HeatpumpStatus:
    """Decode a room temperature (0x03) payload; other fields come from ``current``."""
    _require(data, 14, "room temperature")
    outside = _half_degrees(data[5]) if data[5] > 1 else math.nan
    if data[6] != 0x00:
        room = _half_degrees(data[6])
    else:
        room = float(lookup_value(_ROOM_TEMP, data[3], "room temperature reading"))
    runtime_minutes = (data[11] << 16) | (data[12] << 8) | data[13]
    _log.debug("[Room °C: %f] [OAT °C: %f]", room, outside)
    return HeatpumpStatus(
        room_temperature=room,
        outside_air_temperature=outside,
        operating=current.operating,
        compressor_frequency=current.compressor_frequency,
        input_power=current.input_power,
        kwh=current.kwh,
        runtime_hours=runtime_minutes / 60,
    )


def decode_status(data: Sequence[int], current: HeatpumpStatus) -> HeatpumpStatus:
    """Decode a status (0x06) payload; temperatures and runtime come from ``current``."""
    _require(data, 9, "status")
    return HeatpumpStatus(
        room_temperature=current.room_temperature,
        outside_air_temperature=current.outside_air_temperature,
        operating=bool(data[4]),
        compressor_frequency=float(data[3]),
        input_power=float((data[5] << 8) | data[6]),
        kwh=((data[7] << 8) | data[8]) / 10,
        runtime_hours=current.runtime_hours,
    )


def decode_standby(data: Sequence[int]) -> StandbyReading:
    """Decode a power/standby (0x09) payload."""
    _require(data, 6, "standby")
    reading = StandbyReading(
        stage=lookup_value(_STAGE, data[4], "current stage for delivery"),
        sub_mode=lookup_value(_SUB_MODE, data[3], "submode"),
        auto_sub_mode=lookup_value(_AUTO_SUB_MODE, data[5], "auto mode sub mode"),
    )
    _log.debug(
        "[Stage : %s] [Sub Mode : %s] [Auto Mode Sub Mode : %s]",
        reading.stage, reading.sub_mode, reading.auto_sub_mode,
    )
    return reading