"""Sensors, selects, buttons and numbers that the climate component publishes to."""

from __future__ import annotations

import logging
import math
import uuid
from collections.abc import Callable, Iterable
from typing import Any

from .cycle import Clock, monotonic_ms

_log = logging.getLogger("uptime.connection.sensor")


class Sensor:
    """A numeric sensor: holds the last published state and notifies listeners."""

    unit_of_measurement: str | None = None
    device_class: str | None = None
    state_class: str | None = None
    accuracy_decimals: int | None = None

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.state: Any = self._initial_state()
        self.has_state = False
        self._callbacks: list[Callable[[Any], None]] = []

    def _initial_state(self) -> Any:
        return math.nan

    def _coerce(self, state: Any) -> Any:
        return float(state)

    def publish_state(self, state: Any) -> None:
        """Store ``state`` and pass it to every registered callback."""
        self.state = self._coerce(state)
        self.has_state = True
        for callback in self._callbacks:
            callback(self.state)

    def add_on_state_callback(self, callback: Callable[[Any], None]) -> None:
        self._callbacks.append(callback)


class TextSensor(Sensor):
    """A sensor whose state is text."""

    def _initial_state(self) -> str:
        return ""

    def _coerce(self, state: Any) -> str:
        return str(state)


class BinarySensor(Sensor):
    """A sensor whose state is on or off."""

    def _initial_state(self) -> bool:
        return False

    def _coerce(self, state: Any) -> bool:
        return bool(state)


class CompressorFrequencySensor(Sensor):
    unit_of_measurement = "Hz"
    device_class = "frequency"
    state_class = "measurement"
    accuracy_decimals = 1


class InputPowerSensor(Sensor):
    unit_of_measurement = "W"
    device_class = "power"
    state_class = "measurement"
    accuracy_decimals = 0


class KwhSensor(Sensor):
    unit_of_measurement = "kWh"
    device_class = "energy"
    state_class = "total_increasing"
    accuracy_decimals = 1


class RuntimeHoursSensor(Sensor):
    unit_of_measurement = "h"
    device_class = "duration"
    state_class = "total_increasing"
    accuracy_decimals = 2


class OutsideAirTemperatureSensor(Sensor):
    unit_of_measurement = "°C"
    device_class = "temperature"
    state_class = "measurement"
    accuracy_decimals = 1


class VaneOrientationSelect(TextSensor):
    """A select of vane positions; user choices go to a callback."""

    def __init__(self, name: str = "", options: Iterable[str] = ()) -> None:
        super().__init__(name)
        self.options: list[str] = list(options)
        self._callback: Callable[[str], None] | None = None

    def set_callback(self, callback: Callable[[str], None]) -> None:
        self._callback = callback

    def control(self, value: str) -> None:
        """Forward a user choice to the callback."""
        if self.options and value not in self.options:
            raise ValueError(f"{value!r} is not one of {self.options}")
        if self._callback is not None:
            self._callback(value)


class FunctionsButton:
    """A button whose press triggers a callback."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._callback: Callable[[], None] | None = None

    def set_callback(self, callback: Callable[[], None]) -> None:
        self._callback = callback

    def press(self) -> None:
        if self._callback is not None:
            self._callback()


class FunctionsNumber(Sensor):
    """A number input whose changes go to a callback."""

    def __init__(self, name: str = "") -> None:
        super().__init__(name)
        self._callback: Callable[[float], None] | None = None

    def set_callback(self, callback: Callable[[float], None]) -> None:
        self._callback = callback

    def control(self, value: float) -> None:
        if self._callback is not None:
            self._callback(float(value))


def _default_mac() -> str:
    return f"{uuid.getnode():012x}"


class UptimeConnectionSensor(Sensor):
    """Seconds since the heat pump connection was established; 0 while disconnected."""

    unit_of_measurement = "s"
    device_class = "duration"
    state_class = "total_increasing"
    accuracy_decimals = 0

    def __init__(self, name: str = "", clock: Clock = monotonic_ms, mac: str | None = None) -> None:
        super().__init__(name)
        self._clock = clock
        self._mac = mac if mac is not None else _default_mac()
        self.connected = False
        self.uptime_ms = 0
        self._last_ms = clock()

    def update(self) -> None:
        """Publish the connection uptime."""
        now = self._clock()
        if self.connected:
            self.uptime_ms += max(0, now - self._last_ms)
            self._last_ms = now
            self.publish_state(self.uptime_ms / 1000.0)
        else:
            self.uptime_ms = 0
            self._last_ms = now
            self.publish_state(0)

    def start(self) -> None:
        """The connection was established."""
        self.uptime_ms = 0
        self._last_ms = self._clock()
        self.connected = True
        self.update()

    def stop(self) -> None:
        """The connection was lost."""
        self.connected = False
        self.update()

    def unique_id(self) -> str:
        return f"{self._mac}-uptime-hp_connection"

    def dump_config(self) -> None:
        _log.info("Uptime Connection Sensor '%s'", self.name)