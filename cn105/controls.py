"""Climate modes, user commands and their mapping onto heat pump settings."""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from .cycle import Clock, monotonic_ms
from .entities import VaneOrientationSelect
from .protocol import (
    FAN_MAP,
    LOG_ACTION_EVT_TAG,
    LOG_SETTINGS_TAG,
    MAX_TEMPERATURE,
    MIN_TEMPERATURE,
    MODE_MAP,
    POWER_MAP,
    TAG,
    TEMP_MAP,
    TEMPERATURE_STEP,
    VANE_MAP,
    WIDEVANE_MAP,
    HeatpumpSettings,
    HeatpumpStatus,
    WantedSettings,
)
from .util import format_settings, has_changed, lookup_index

_log = logging.getLogger(TAG)
_control_log = logging.getLogger("control")
_action_log = logging.getLogger(LOG_ACTION_EVT_TAG)
_settings_log = logging.getLogger(LOG_SETTINGS_TAG)

_MIN_HALF_DEGREE_SETPOINT = 10
_MAX_HALF_DEGREE_SETPOINT = 31


class ClimateMode(Enum):
    OFF = 0
    HEAT_COOL = 1
    COOL = 2
    HEAT = 3
    FAN_ONLY = 4
    DRY = 5
    AUTO = 6


class ClimateAction(Enum):
    OFF = 0
    COOLING = 2
    HEATING = 3
    IDLE = 4
    DRYING = 5
    FAN = 6


class FanMode(Enum):
    ON = 0
    OFF = 1
    AUTO = 2
    LOW = 3
    MEDIUM = 4
    HIGH = 5
    MIDDLE = 6
    FOCUS = 7
    DIFFUSE = 8
    QUIET = 9


class SwingMode(Enum):
    OFF = 0
    BOTH = 1
    VERTICAL = 2
    HORIZONTAL = 3


@dataclass
class ClimateTraits:
    """What the climate entity supports."""

    supported_modes: set[ClimateMode] = field(default_factory=set)
    supported_fan_modes: set[FanMode] = field(default_factory=set)
    supported_swing_modes: set[SwingMode] = field(default_factory=set)
    supports_action: bool = True
    supports_current_temperature: bool = True
    supports_two_point_target_temperature: bool = False
    visual_min_temperature: float = MIN_TEMPERATURE
    visual_max_temperature: float = MAX_TEMPERATURE
    visual_temperature_step: float = TEMPERATURE_STEP

    def supports_mode(self, mode: ClimateMode) -> bool:
        return mode in self.supported_modes


@dataclass(frozen=True)
class ClimateCall:
    """A user request; fields left as ``None`` are not changed."""

    mode: ClimateMode | None = None
    target_temperature: float | None = None
    target_temperature_low: float | None = None
    target_temperature_high: float | None = None
    fan_mode: FanMode | None = None
    swing_mode: SwingMode | None = None


_MODE_SETTINGS = {
    ClimateMode.COOL: "COOL",
    ClimateMode.HEAT: "HEAT",
    ClimateMode.DRY: "DRY",
    ClimateMode.AUTO: "AUTO",
    ClimateMode.FAN_ONLY: "FAN",
}

_FAN_SPEEDS = {
    FanMode.QUIET: "QUIET",
    FanMode.DIFFUSE: "QUIET",
    FanMode.LOW: "1",
    FanMode.MEDIUM: "2",
    FanMode.MIDDLE: "3",
    FanMode.HIGH: "4",
}

# Swing mode -> (vane, wide vane)
_SWING_VANES = {
    SwingMode.OFF: ("AUTO", "|"),
    SwingMode.VERTICAL: ("SWING", "|"),
    SwingMode.HORIZONTAL: ("AUTO", "SWING"),
    SwingMode.BOTH: ("SWING", "SWING"),
}

_MODE_FROM_SETTING = {
    "HEAT": ClimateMode.HEAT,
    "DRY": ClimateMode.DRY,
    "COOL": ClimateMode.COOL,
    "FAN": ClimateMode.FAN_ONLY,
    "AUTO": ClimateMode.AUTO,
}

_FAN_FROM_SETTING = {
    "QUIET": FanMode.QUIET,
    "1": FanMode.LOW,
    "2": FanMode.MEDIUM,
    "3": FanMode.MIDDLE,
    "4": FanMode.HIGH,
}


def _round_half_away(x: float) -> float:
    return math.copysign(math.floor(abs(x) + 0.5), x)


def _swing_mode_for(vertical_swing: bool, horizontal_swing: bool) -> SwingMode:
    if vertical_swing:
        return SwingMode.BOTH if horizontal_swing else SwingMode.VERTICAL
    return SwingMode.HORIZONTAL if horizontal_swing else SwingMode.OFF


def _pick(table: tuple[str, ...], setting: str, what: str) -> str:
    index = lookup_index(table, setting, what)
    return table[0] if index is None else table[index]


class ClimateControls:
    """Climate entity state, translation of user requests into wanted settings,
    and of received settings into climate state."""

    def __init__(self, clock: Clock = monotonic_ms, traits: ClimateTraits | None = None) -> None:
        self._clock = clock
        self._traits = traits if traits is not None else ClimateTraits()
        self._state_callbacks: list[Callable[[ClimateControls], None]] = []

        self.mode = ClimateMode.OFF
        self.action = ClimateAction.OFF
        self.fan_mode: FanMode | None = None
        self.swing_mode = SwingMode.OFF
        self.current_temperature = math.nan
        self.target_temperature = math.nan
        self.target_temperature_low = math.nan
        self.target_temperature_high = math.nan

        self.wanted_settings = WantedSettings()
        self.wanted_settings.reset()
        self.current_settings = HeatpumpSettings()
        self.current_status = HeatpumpStatus(
            compressor_frequency=math.nan,
            input_power=math.nan,
            kwh=math.nan,
            runtime_hours=math.nan,
        )
        self.temp_mode = False
        self.wide_vane_adj = False

        self.vertical_vane_select: VaneOrientationSelect | None = None
        self.horizontal_vane_select: VaneOrientationSelect | None = None

        self.wanted_settings_lock = threading.Lock()

    # ---- user requests -------------------------------------------------

    def control(self, call: ClimateCall) -> None:
        """Apply a user request to the wanted settings."""
        with self.wanted_settings_lock:
            self._control(call)

    def _check_not_sent(self) -> None:
        if self.wanted_settings.has_been_sent:
            _control_log.error(
                "Lock failure: wanted settings should be locked while sending "
                "(has_been_sent is unexpectedly true)."
            )

    def _control(self, call: ClimateCall) -> None:
        _control_log.debug("control() called...")
        self._check_not_sent()
        updated = False

        if call.mode is not None:
            _control_log.debug("Mode change asked")
            self.mode = call.mode
            updated = True
            self.control_mode()

        for attr, label in (
            ("target_temperature", "setpoint"),
            ("target_temperature_low", "low setpoint"),
            ("target_temperature_high", "high setpoint"),
        ):
            value = getattr(call, attr)
            if value is not None:
                _control_log.info("Setting heatpump %s : %.1f", label, value)
                setattr(self, attr, float(value))
                updated = True
                self.control_temperature()

        if call.fan_mode is not None:
            _control_log.debug("Fan change asked")
            self.fan_mode = call.fan_mode
            updated = True
            self.control_fan()

        if call.swing_mode is not None:
            _control_log.debug("Swing change asked")
            self.swing_mode = call.swing_mode
            updated = True
            self.control_swing()

        if updated:
            _action_log.debug("control() -> User changed something...")
            self._check_not_sent()
            self.wanted_settings.mark_changed(self._clock())
            format_settings("control (wantedSettings)", self.wanted_settings)

    def control_mode(self) -> None:
        if self.mode is ClimateMode.OFF:
            _control_log.info("changing mode to OFF")
            self.set_power_setting("OFF")
            return
        setting = _MODE_SETTINGS.get(self.mode)
        if setting is None:
            _control_log.warning("unsupported mode")
            return
        _control_log.info("changing mode to %s", self.mode.name)
        self.set_mode_setting(setting)
        self.set_power_setting("ON")

    def control_temperature(self) -> None:
        setting = self.target_temperature
        if math.isnan(setting):
            _control_log.warning("no target temperature to apply")
            return
        if not self.temp_mode:
            found = lookup_index(TEMP_MAP, int(setting + 0.5)) is not None
            self.wanted_settings.temperature = setting if found else float(TEMP_MAP[0])
        else:
            setting = _round_half_away(setting * 2) / 2
            self.wanted_settings.temperature = float(
                min(max(setting, _MIN_HALF_DEGREE_SETPOINT), _MAX_HALF_DEGREE_SETPOINT)
            )

    def control_fan(self) -> None:
        if self.fan_mode is FanMode.OFF:
            self.set_power_setting("OFF")
            return
        self.set_fan_speed(_FAN_SPEEDS.get(self.fan_mode, "AUTO"))

    def control_swing(self) -> None:
        vanes = _SWING_VANES.get(self.swing_mode)
        if vanes is None:
            _log.warning("control - received unsupported swing mode request.")
            return
        vane, wide_vane = vanes
        self.set_vane_setting(vane)
        self.set_wide_vane_setting(wide_vane)

    # ---- action ----------------------------------------------------------

    def set_action_if_operating_to(self, action: ClimateAction) -> None:
        self.action = action if self.current_status.operating else ClimateAction.IDLE
        _log.debug("setting action to -> %s", self.action.name)

    def set_action_if_operating_and_compressor_is_active_to(self, action: ClimateAction) -> None:
        """Deprecated: the compressor frequency is not a reliable activity indicator."""
        _log.warning(
            "Warning: the use of compressor frequency as an active indicator is deprecated. "
            "Please use operating status instead."
        )
        if self.current_status.compressor_frequency <= 0:
            self.action = ClimateAction.IDLE
        else:
            self.set_action_if_operating_to(action)

    def update_action(self) -> None:
        """Derive the climate action from the mode and the operating status."""
        mode = self.mode
        if mode is ClimateMode.HEAT:
            self.set_action_if_operating_to(ClimateAction.HEATING)
        elif mode is ClimateMode.COOL:
            self.set_action_if_operating_to(ClimateAction.COOLING)
        elif mode is ClimateMode.AUTO:
            self._update_auto_action()
        elif mode is ClimateMode.DRY:
            self.set_action_if_operating_to(ClimateAction.DRYING)
        elif mode is ClimateMode.FAN_ONLY:
            self.action = ClimateAction.FAN
        else:
            self.action = ClimateAction.OFF
        _log.debug("Climate mode is: %s, action is: %s", self.mode.name, self.action.name)

    def _update_auto_action(self) -> None:
        traits = self.traits()
        heat = traits.supports_mode(ClimateMode.HEAT)
        cool = traits.supports_mode(ClimateMode.COOL)
        current, target = self.current_temperature, self.target_temperature
        if heat and cool:
            self.set_action_if_operating_to(
                ClimateAction.COOLING if current > target else ClimateAction.HEATING
            )
        elif cool:
            self.set_action_if_operating_to(
                ClimateAction.FAN if current <= target else ClimateAction.COOLING
            )
        elif heat:
            self.set_action_if_operating_to(
                ClimateAction.FAN if current >= target else ClimateAction.HEATING
            )
        else:
            _log.error("AUTO mode is not supported by this unit")

    def traits(self) -> ClimateTraits:
        return self._traits

    # ---- wanted settings -------------------------------------------------

    def set_mode_setting(self, setting: str) -> None:
        self.wanted_settings.mode = _pick(MODE_MAP, setting, "mode")

    def set_power_setting(self, setting: str) -> None:
        self.wanted_settings.power = _pick(POWER_MAP, setting, "power")

    def set_fan_speed(self, setting: str) -> None:
        self.wanted_settings.fan = _pick(FAN_MAP, setting, "fan")

    def set_vane_setting(self, setting: str) -> None:
        self.wanted_settings.vane = _pick(VANE_MAP, setting, "vane")

    def set_wide_vane_setting(self, setting: str) -> None:
        self.wanted_settings.wide_vane = _pick(WIDEVANE_MAP, setting, "wideVane")

    # ---- received settings -> climate state ------------------------------

    def check_power_and_mode_settings(
        self, settings: HeatpumpSettings, update_current: bool = True
    ) -> None:
        current = self.current_settings
        if not (
            has_changed(current.power, settings.power, "power")
            or has_changed(current.mode, settings.mode, "mode")
        ):
            return
        _log.info("power or mode changed")
        if update_current:
            current.power = settings.power
            current.mode = settings.mode
        if settings.power == "ON":
            mode = _MODE_FROM_SETTING.get(settings.mode) if settings.mode is not None else None
            if mode is None:
                _log.warning("Unknown climate mode value %s received from HeatPump", settings.mode)
            else:
                self.mode = mode
        else:
            self.mode = ClimateMode.OFF

    def check_fan_settings(self, settings: HeatpumpSettings, update_current: bool = True) -> None:
        if not has_changed(self.current_settings.fan, settings.fan, "fan"):
            return
        _log.info("fan setting changed")
        if update_current:
            self.current_settings.fan = settings.fan
        self.fan_mode = _FAN_FROM_SETTING.get(settings.fan, FanMode.AUTO)
        _log.debug("Fan mode is: %s", self.fan_mode.name)

    def check_vane_settings(self, settings: HeatpumpSettings, update_current: bool = True) -> None:
        if has_changed(self.current_settings.vane, settings.vane, "vane"):
            _settings_log.info("vane setting changed")
            if update_current:
                self.current_settings.vane = settings.vane
            self.swing_mode = _swing_mode_for(
                settings.vane == "SWING", self.current_settings.wide_vane == "SWING"
            )
            _settings_log.debug("Swing mode is: %s", self.swing_mode.name)
        self.update_extra_select_components(settings)

    def check_wide_vane_settings(
        self, settings: HeatpumpSettings, update_current: bool = True
    ) -> None:
        if has_changed(self.current_settings.wide_vane, settings.wide_vane, "wideVane"):
            _log.info("widevane setting changed")
            format_settings("settings", settings)
            if update_current:
                self.current_settings.wide_vane = settings.wide_vane
            self.swing_mode = _swing_mode_for(
                self.current_settings.vane == "SWING", settings.wide_vane == "SWING"
            )
            _log.debug("Swing mode is: %s", self.swing_mode.name)
        self.update_extra_select_components(settings)

    def update_extra_select_components(self, settings: HeatpumpSettings) -> None:
        vertical = self.vertical_vane_select
        if vertical is not None and has_changed(vertical.state, settings.vane, "select vane"):
            _log.info("vane setting (extra select component) changed")
            vertical.publish_state(settings.vane)
        horizontal = self.horizontal_vane_select
        if horizontal is not None and has_changed(
            horizontal.state, settings.wide_vane, "select wideVane"
        ):
            _log.info("widevane setting (extra select component) changed")
            horizontal.publish_state(settings.wide_vane)

    # ---- publication -----------------------------------------------------

    def add_on_state_callback(self, callback: Callable[[ClimateControls], None]) -> None:
        self._state_callbacks.append(callback)

    def publish_state(self) -> None:
        """Notify listeners of the current climate state."""
        _log.debug(
            "publishing state: mode=%s action=%s target=%.1f current=%.1f fan=%s swing=%s",
            self.mode.name,
            self.action.name,
            self.target_temperature,
            self.current_temperature,
            self.fan_mode.name if self.fan_mode is not None else "-",
            self.swing_mode.name,
        )
        for callback in self._state_callbacks:
            callback(self)