"""Table lookups, change detection and log formatting helpers."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from typing import TypeVar

from .protocol import (
    LOG_ACTION_EVT_TAG,
    LOG_SETTINGS_TAG,
    LOG_STATUS_TAG,
    TAG,
    HeatpumpSettings,
    HeatpumpStatus,
    WantedSettings,
)

_log = logging.getLogger(TAG)
_lookup_log = logging.getLogger("lookup")

V = TypeVar("V")


def lookup_index(
    values: Sequence[str] | Sequence[int],
    lookup_value: str | float,
    debug_info: str = "",
) -> int | None:
    """Index of ``lookup_value`` in ``values``, or ``None`` if absent.

    Strings compare case-insensitively; numbers are truncated to ``int``
    before comparison, as the table holds whole degrees.
    """
    if isinstance(lookup_value, str):
        wanted_text = lookup_value.lower()
        matches = (i for i, v in enumerate(values) if str(v).lower() == wanted_text)
    else:
        wanted_number = int(lookup_value)
        matches = (i for i, v in enumerate(values) if v == wanted_number)
    index = next(matches, None)
    if index is None:
        _lookup_log.warning("%s caution value %s not found", debug_info, lookup_value)
    return index


def lookup_value(
    byte_map: Mapping[int, V],
    byte_value: int,
    debug_info: str = "",
    default: V | None = None,
) -> V:
    """Value that ``byte_value`` maps to.

    Unknown bytes give ``default`` if one is given, otherwise the first
    value of the map.
    """
    if byte_value in byte_map:
        return byte_map[byte_value]
    if default is not None:
        return default
    if not byte_map:
        raise ValueError("cannot look up a value in an empty map")
    _lookup_log.warning(
        "%s caution: value %d not found, returning value at index 0", debug_info, byte_value
    )
    return next(iter(byte_map.values()))


def has_changed(
    before: str | None, now: str | None, field: str, check_not_null: bool = False
) -> bool:
    """True if ``now`` is set and differs from ``before`` (or ``before`` is unset)."""
    if now is None:
        if check_not_null:
            _log.error("CAUTION: expected value in has_changed() for %s, got None", field)
        else:
            _log.debug("No value in has_changed() for %s", field)
        return False
    return before is None or before != now


def is_wanted_setting_applied(wanted: str | None, current: str | None, field: str) -> bool:
    """True if nothing is wanted for ``field`` or the wanted value is current."""
    applied = wanted is None or wanted == current
    if not applied:
        _log.debug("Wanted %s is not set yet, want:%s, got: %s", field, wanted, current)
    return applied


def packet_hex(packet: bytes | bytearray | Sequence[int]) -> str:
    """Packet bytes as upper-case hex, each followed by a space."""
    return "".join(f"{b:02X} " for b in packet)


def _or_dash(value: str | None) -> str:
    return "-" if value is None else value


def _yes_no(flag: bool) -> str:
    return "YES" if flag else " NO"


def format_settings(name: str | None, settings: HeatpumpSettings) -> str:
    """One-line description of a settings record for the logs."""
    text = (
        f"[{name if name is not None else 'unnamed'}]-> ["
        f"power: {_or_dash(settings.power)}, "
        f"target °C: {settings.temperature:.1f}, "
        f"mode: {_or_dash(settings.mode)}, "
        f"fan: {_or_dash(settings.fan)}, "
        f"vane: {_or_dash(settings.vane)}, "
        f"wvane: {_or_dash(settings.wide_vane)}"
    )
    if isinstance(settings, WantedSettings):
        text += (
            f", hasChanged ? -> {_yes_no(settings.has_changed)}"
            f", hasBeenSent ? -> {_yes_no(settings.has_been_sent)}"
        )
        logger = logging.getLogger(LOG_ACTION_EVT_TAG)
    else:
        logger = logging.getLogger(LOG_SETTINGS_TAG)
    text += "]"
    logger.debug("%s", text)
    return text


def format_status(name: str, status: HeatpumpStatus) -> str:
    """One-line description of a status record for the logs."""
    text = (
        f"[{name}]-> [room C°: {status.room_temperature:.1f}, "
        f"operating: {'YES' if status.operating else 'NO '}, "
        f"compressor freq: {status.compressor_frequency:.1f} Hz]"
    )
    logging.getLogger(LOG_STATUS_TAG).info("%s", text)
    return text


def _round_half_away(x: float) -> float:
    return math.copysign(math.floor(abs(x) + 0.5), x)


def fahrenheit_to_celsius(temp_f: int) -> float:
    """Convert to Celsius, rounded to the nearest 0.5 degree."""
    temp = (temp_f - 32) / 1.8
    return _round_half_away(temp * 2) / 2


def celsius_to_fahrenheit(temp_c: float) -> int:
    """Convert to whole degrees Fahrenheit."""
    return int(temp_c * 1.8 + 32 + 0.5)