"""Installer function codes of the heat pump (codes 101 to 128)."""

from __future__ import annotations

from collections.abc import Iterable

MAX_FUNCTION_CODE_COUNT = 30
_PART_LEN = 15
_MIN_CODE = 101
_MAX_CODE = 128


def _code_of(b: int) -> int:
    return ((b >> 2) & 0xFF) + 100


def _value_of(b: int) -> int:
    return b & 3


def _valid_code(code: int) -> bool:
    return _MIN_CODE <= code <= _MAX_CODE


class HeatpumpFunctions:
    """The 30 function bytes read from, and written back to, the heat pump in two parts."""

    def __init__(self) -> None:
        self._raw = bytearray(MAX_FUNCTION_CODE_COUNT)
        self._valid1 = False
        self._valid2 = False

    def is_valid(self) -> bool:
        """True once both parts have been received."""
        return self._valid1 and self._valid2

    @staticmethod
    def _part(data: Iterable[int]) -> bytes:
        part = bytes(data)
        if len(part) < _PART_LEN:
            raise ValueError(f"function data needs {_PART_LEN} bytes, got {len(part)}")
        return part[:_PART_LEN]

    def set_data1(self, data: Iterable[int]) -> None:
        """Store the first 15 bytes."""
        self._raw[:_PART_LEN] = self._part(data)
        self._valid1 = True

    def set_data2(self, data: Iterable[int]) -> None:
        """Store the second 15 bytes."""
        self._raw[_PART_LEN:] = self._part(data)
        self._valid2 = True

    def data1(self) -> bytes:
        """The first 15 bytes."""
        return bytes(self._raw[:_PART_LEN])

    def data2(self) -> bytes:
        """The second 15 bytes."""
        return bytes(self._raw[_PART_LEN:])

    def clear(self) -> None:
        """Zero all bytes and mark both parts missing."""
        self._raw = bytearray(MAX_FUNCTION_CODE_COUNT)
        self._valid1 = False
        self._valid2 = False

    def get_value(self, code: int) -> int:
        """Value (0-3) of a function code; 0 if unknown or out of range."""
        if not _valid_code(code):
            return 0
        for b in self._raw:
            if _code_of(b) == code:
                return _value_of(b)
        return 0

    def set_value(self, code: int, value: int) -> bool:
        """Set a known function code to 1, 2 or 3; return whether it was set."""
        if not _valid_code(code) or not 1 <= value <= 3:
            return False
        for i, b in enumerate(self._raw):
            if _code_of(b) == code:
                self._raw[i] = ((code - 100) << 2) + value
                return True
        return False

    def all_codes(self) -> list[int]:
        """The valid function codes present, in storage order."""
        return [code for code in map(_code_of, self._raw) if _valid_code(code)]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeatpumpFunctions):
            return NotImplemented
        return self.is_valid() == other.is_valid() and self._raw == other._raw

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"HeatpumpFunctions(valid={self.is_valid()}, raw={self._raw.hex()})"