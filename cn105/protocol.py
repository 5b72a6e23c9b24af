"""Wire constants, lookup tables and the settings/status records of the CN105 protocol."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

MAX_DATA_BYTES = 64
MAX_DELAY_RESPONSE_FACTOR = 10

LOG_ACTION_EVT_TAG = "EVT_SETS"
TAG = "CN105"
LOG_REMOTE_TEMP = "REMOTE_TEMP"
LOG_ACK = "ACK"
LOG_SETTINGS_TAG = "SETTINGS"
LOG_STATUS_TAG = "STATUS"
LOG_CYCLE_TAG = "CYCLE"
LOG_UPD_INT_TAG = "UPDT_ITVL"

SCHEDULER_REMOTE_TEMP_TIMEOUT = "->remote_temp_timeout"

# Rest time granted to the heat pump after a settings packet has been sent.
DEFER_SCHEDULE_UPDATE_LOOP_DELAY = 750

PACKET_LEN = 22
PACKET_TYPE_DEFAULT = 99

CONNECT = bytes((0xFC, 0x5A, 0x01, 0x30, 0x02, 0xCA, 0x01, 0xA8))
HEADER = bytes((0xFC, 0x41, 0x01, 0x30, 0x10, 0x01, 0x00, 0x00))
INFOHEADER = bytes((0xFC, 0x42, 0x01, 0x30, 0x10))

# Info request codes, indexed by the RQST_PKT_* constants.
INFOMODE = bytes((0x02, 0x03, 0x04, 0x05, 0x06, 0x09))

RCVD_PKT_NONE = -1
RCVD_PKT_FAIL = 0
RCVD_PKT_CONNECT_SUCCESS = 1
RCVD_PKT_SETTINGS = 2
RCVD_PKT_ROOM_TEMP = 3
RCVD_PKT_UPDATE_SUCCESS = 4
RCVD_PKT_STATUS = 5
RCVD_PKT_TIMER = 6
RCVD_PKT_FUNCTIONS = 7

# Requests left unanswered before the link is considered lost.
MAX_NON_RESPONSE_REQ = 5

# Control flags: power, mode, temperature, fan, vane.
CONTROL_PACKET_1 = (0x01, 0x02, 0x04, 0x08, 0x10)
# Control flags: wide vane.
CONTROL_PACKET_2 = (0x01,)

POWER = (0x00, 0x01)
POWER_MAP = ("OFF", "ON")
MODE = (0x01, 0x02, 0x03, 0x07, 0x08)
MODE_MAP = ("HEAT", "DRY", "COOL", "FAN", "AUTO")
TEMP = tuple(range(0x10))
TEMP_MAP = (31, 30, 29, 28, 27, 26, 25, 24, 23, 22, 21, 20, 19, 18, 17, 16)
FAN = (0x00, 0x01, 0x02, 0x03, 0x05, 0x06)
FAN_MAP = ("AUTO", "QUIET", "1", "2", "3", "4")
VANE = (0x00, 0x01, 0x02, 0x03, 0x04, 0x05, 0x07)
VANE_MAP = ("AUTO", "↑↑", "↑", "—", "↓", "↓↓", "SWING")
WIDEVANE = (0x01, 0x02, 0x03, 0x04, 0x05, 0x08, 0x0C)
WIDEVANE_MAP = ("←←", "←", "|", "→", "→→", "←→", "SWING")
ROOM_TEMP = tuple(range(0x20))
ROOM_TEMP_MAP = tuple(range(10, 42))
TIMER_MODE = (0x00, 0x01, 0x02, 0x03)
TIMER_MODE_MAP = ("NONE", "OFF", "ON", "BOTH")

STAGE = (0x00, 0x01, 0x02, 0x03, 0x04, 0x05, 0x06)
STAGE_MAP = ("IDLE", "LOW", "GENTLE", "MEDIUM", "MODERATE", "HIGH", "DIFFUSE")
SUB_MODE = (0x00, 0x02, 0x04, 0x08)
SUB_MODE_MAP = ("NORMAL", "DEFROST", "PREHEAT", "STANDBY")
AUTO_SUB_MODE = (0x00, 0x01, 0x02, 0x03)
AUTO_SUB_MODE_MAP = ("AUTO_OFF", "AUTO_COOL", "AUTO_HEAT", "AUTO_LEADER")

TIMER_INCREMENT_MINUTES = 10

FUNCTIONS_SET_PART1 = 0x1F
FUNCTIONS_GET_PART1 = 0x20
FUNCTIONS_SET_PART2 = 0x21
FUNCTIONS_GET_PART2 = 0x22

RQST_PKT_SETTINGS = 0
RQST_PKT_ROOM_TEMP = 1
RQST_PKT_UNKNOWN = 2
RQST_PKT_TIMERS = 3
RQST_PKT_STATUS = 4
RQST_PKT_STANDBY = 5

MIN_TEMPERATURE = 16
MAX_TEMPERATURE = 26
TEMPERATURE_STEP = 0.5

# Remote temperature timeout value that means "never time out".
REMOTE_TEMP_TIMEOUT_NEVER = 4294967295

UNSET_TEMPERATURE = -1.0


@dataclass(eq=False)
class HeatpumpSettings:
    """Settings of the heat pump; ``None`` means "not known / not set"."""

    power: str | None = None
    mode: str | None = None
    temperature: float = 0.0
    fan: str | None = None
    vane: str | None = None
    wide_vane: str | None = None
    isee: bool = False
    connected: bool = False
    stage: str | None = None
    sub_mode: str | None = None
    auto_sub_mode: str | None = None

    def reset(self) -> None:
        """Forget the controllable settings."""
        self.power = None
        self.mode = None
        self.temperature = UNSET_TEMPERATURE
        self.fan = None
        self.vane = None
        self.wide_vane = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeatpumpSettings):
            return NotImplemented
        return (
            self.power == other.power
            and self.mode == other.mode
            and self.temperature == other.temperature
            and self.fan == other.fan
            and self.vane == other.vane
            and self.wide_vane == other.wide_vane
        )

    __hash__ = None  # type: ignore[assignment]


@dataclass(eq=False)
class WantedSettings(HeatpumpSettings):
    """Settings requested by the user and not yet sent to the heat pump."""

    temperature: float = UNSET_TEMPERATURE
    has_changed: bool = False
    has_been_sent: bool = False
    nb_deferred_requests: int = 0
    last_change: int = 0

    def reset(self) -> None:
        """Forget the requested settings and the change flags."""
        super().reset()
        self.has_changed = False
        self.has_been_sent = False

    def mark_changed(self, now_ms: int) -> None:
        """Flag the settings as changed by the user at ``now_ms``."""
        self.has_changed = True
        self.has_been_sent = False
        self.last_change = now_ms


@dataclass
class HeatpumpTimers:
    """Timer state of the heat pump."""

    mode: str = TIMER_MODE_MAP[0]
    on_minutes_set: int = 0
    on_minutes_remaining: int = 0
    off_minutes_set: int = 0
    off_minutes_remaining: int = 0


def _same_or_both_nan(a: float, b: float) -> bool:
    if math.isnan(a):
        return math.isnan(b)
    return a == b


@dataclass(eq=False)
class HeatpumpStatus:
    """Measured state of the heat pump."""

    room_temperature: float = 0.0
    outside_air_temperature: float = 0.0
    operating: bool = False
    timers: HeatpumpTimers = field(default_factory=HeatpumpTimers)
    compressor_frequency: float = 0.0
    input_power: float = 0.0
    kwh: float = 0.0
    runtime_hours: float = 0.0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeatpumpStatus):
            return NotImplemented
        return (
            _same_or_both_nan(self.room_temperature, other.room_temperature)
            and _same_or_both_nan(self.outside_air_temperature, other.outside_air_temperature)
            and self.operating == other.operating
            and self.compressor_frequency == other.compressor_frequency
            and self.input_power == other.input_power
            and self.kwh == other.kwh
            and self.runtime_hours == other.runtime_hours
        )

    __hash__ = None  # type: ignore[assignment]