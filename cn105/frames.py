"""Framing of CN105 packets: checksums, the incoming byte-stream parser and outgoing packets."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass

from .functions import HeatpumpFunctions
from .protocol import (
    CONNECT,
    CONTROL_PACKET_1,
    CONTROL_PACKET_2,
    FAN,
    FAN_MAP,
    FUNCTIONS_GET_PART1,
    FUNCTIONS_GET_PART2,
    FUNCTIONS_SET_PART1,
    FUNCTIONS_SET_PART2,
    HEADER,
    INFOHEADER,
    INFOMODE,
    MAX_DATA_BYTES,
    MODE,
    MODE_MAP,
    PACKET_LEN,
    POWER,
    POWER_MAP,
    TAG,
    TEMP,
    TEMP_MAP,
    UNSET_TEMPERATURE,
    VANE,
    VANE_MAP,
    WIDEVANE,
    WIDEVANE_MAP,
    HeatpumpSettings,
    WantedSettings,
)
from .util import format_settings, lookup_index, packet_hex

_log = logging.getLogger(TAG)
_decoder_log = logging.getLogger("Decoder")
_checksum_log = logging.getLogger("chkSum")

# Start byte, command, two fixed bytes and the data length.
_HEADER_LEN = 5


def checksum(data: Iterable[int]) -> int:
    """Checksum byte of ``data``: 0xFC minus the byte sum, modulo 256."""
    return (0xFC - sum(data)) & 0xFF


@dataclass(frozen=True)
class Frame:
    """One complete frame received from the heat pump, checksum byte included."""

    raw: bytes

    @property
    def command(self) -> int:
        """Command byte, or 0 when the fixed header bytes do not match."""
        if self.raw[2] == HEADER[2] and self.raw[3] == HEADER[3]:
            return self.raw[1]
        return 0

    @property
    def data_length(self) -> int:
        return self.raw[4]

    @property
    def data(self) -> bytes:
        """The payload; its first byte is the packet type."""
        return self.raw[_HEADER_LEN:_HEADER_LEN + self.data_length]

    @property
    def checksum_byte(self) -> int:
        return self.raw[-1]

    def valid(self) -> bool:
        """True if the checksum byte matches the frame contents."""
        expected = checksum(self.raw[:-1])
        ok = expected == self.checksum_byte
        if ok:
            _checksum_log.debug("OK-> %02X=%02X", expected, self.checksum_byte)
        else:
            _checksum_log.warning("KO-> %02X!=%02X", expected, self.checksum_byte)
        return ok


class FrameParser:
    """Assembles frames from the bytes read off the serial line."""

    def __init__(self, max_length: int = MAX_DATA_BYTES) -> None:
        self._max_length = max_length
        self._buffer = bytearray()
        self._data_length: int | None = None

    def reset(self) -> None:
        """Drop any partly received frame."""
        self._buffer.clear()
        self._data_length = None

    def feed(self, byte: int) -> Frame | None:
        """Consume one byte; return a frame when it completes one."""
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"not a byte: {byte!r}")
        if not self._buffer:
            # Bytes before a start byte are noise.
            if byte == HEADER[0]:
                self._buffer.append(byte)
            return None

        self._buffer.append(byte)
        if len(self._buffer) == _HEADER_LEN:
            self._data_length = byte
            if _HEADER_LEN + byte + 1 > self._max_length:
                _decoder_log.warning("data length %d too large, dropping frame", byte)
                self.reset()
                return None
            _decoder_log.debug(
                "command: (%02X) data length: [%02X]<-- header", self._buffer[1], byte
            )

        if self._data_length is not None and len(self._buffer) == _HEADER_LEN + self._data_length + 1:
            frame = Frame(bytes(self._buffer))
            self.reset()
            _decoder_log.debug("READ %s", packet_hex(frame.raw))
            return frame
        return None

    def feed_bytes(self, data: Iterable[int]) -> list[Frame]:
        """Consume many bytes; return the frames they complete, in order."""
        return [frame for frame in map(self.feed, data) if frame is not None]


def _blank(header: bytes) -> bytearray:
    packet = bytearray(PACKET_LEN)
    packet[: len(header)] = header
    return packet


def _seal(packet: bytearray) -> bytes:
    packet[-1] = checksum(packet[:-1])
    return bytes(packet)


def _round_half_away(x: float) -> float:
    return math.copysign(math.floor(abs(x) + 0.5), x)


def connect_packet() -> bytes:
    """The packet that opens the connection."""
    return bytes(CONNECT)


def info_packet(packet_type: int) -> bytes:
    """An info request; ``packet_type`` is one of the RQST_PKT_* indices."""
    if not 0 <= packet_type < len(INFOMODE):
        raise ValueError(f"unknown info request type: {packet_type}")
    packet = _blank(INFOHEADER)
    packet[5] = INFOMODE[packet_type]
    return _seal(packet)


def set_packet() -> bytearray:
    """An unsealed set packet holding only the header."""
    return _blank(HEADER)


def _index(table: tuple, value: str | float, what: str) -> int:
    index = lookup_index(table, value, f"{what} (write)")
    if index is None:
        raise ValueError(f"unknown {what} setting: {value!r}")
    return index


def settings_packet(
    wanted: WantedSettings,
    current: HeatpumpSettings | None = None,
    temp_mode: bool = False,
    wide_vane_adj: bool = False,
) -> bytes:
    """The packet that applies every setting present in ``wanted``.

    ``temp_mode`` selects the half-degree temperature encoding; in the legacy
    encoding the temperature is truncated to whole degrees.
    """
    if current is not None:
        format_settings("current", current)
    format_settings("wanted", wanted)

    packet = set_packet()
    if wanted.power is not None:
        packet[8] = POWER[_index(POWER_MAP, wanted.power, "power")]
        packet[6] += CONTROL_PACKET_1[0]
    if wanted.mode is not None:
        packet[9] = MODE[_index(MODE_MAP, wanted.mode, "mode")]
        packet[6] += CONTROL_PACKET_1[1]
    if wanted.temperature != UNSET_TEMPERATURE:
        if temp_mode:
            packet[19] = int(wanted.temperature * 2 + 128) & 0xFF
        else:
            packet[10] = TEMP[_index(TEMP_MAP, wanted.temperature, "temperature")]
        packet[6] += CONTROL_PACKET_1[2]
    if wanted.fan is not None:
        packet[11] = FAN[_index(FAN_MAP, wanted.fan, "fan")]
        packet[6] += CONTROL_PACKET_1[3]
    if wanted.vane is not None:
        packet[12] = VANE[_index(VANE_MAP, wanted.vane, "vane")]
        packet[6] += CONTROL_PACKET_1[4]
    if wanted.wide_vane is not None:
        packet[18] = WIDEVANE[_index(WIDEVANE_MAP, wanted.wide_vane, "wideVane")] | (
            0x80 if wide_vane_adj else 0x00
        )
        packet[7] += CONTROL_PACKET_2[0]
    return _seal(packet)


def remote_temperature_packet(temperature: float) -> bytes:
    """The packet reporting an external room temperature; 0 or less returns to the internal sensor."""
    packet = set_packet()
    packet[5] = 0x07
    if temperature > 0:
        packet[6] = 0x01
        doubled = int(_round_half_away(temperature * 2))
        packet[7] = (doubled - 16) & 0xFF
        packet[8] = (doubled + 128) & 0xFF
    else:
        packet[8] = 0x80
    return _seal(packet)


def functions_request_packet(part: int) -> bytes:
    """The request for part 1 or part 2 of the function codes."""
    codes = {1: FUNCTIONS_GET_PART1, 2: FUNCTIONS_GET_PART2}
    if part not in codes:
        raise ValueError(f"function part must be 1 or 2, got {part}")
    packet = _blank(INFOHEADER)
    packet[5] = codes[part]
    return _seal(packet)


def functions_set_packets(functions: HeatpumpFunctions) -> tuple[bytes, bytes]:
    """The two packets that write the function codes back to the heat pump."""
    if not functions.is_valid():
        raise ValueError("function data is incomplete; read both parts first")
    packets = []
    for code, data in (
        (FUNCTIONS_SET_PART1, functions.data1()),
        (FUNCTIONS_SET_PART2, functions.data2()),
    ):
        packet = set_packet()
        packet[5] = code
        packet[6:21] = data
        if packet[20] != 0:
            raise ValueError("last function data byte must be 0")
        if 0 in packet[6:20]:
            raise ValueError("function data holds an unset byte")
        packets.append(_seal(packet))
    return packets[0], packets[1]