"""Packets, frame parsing, reply decoding and climate logic for Mitsubishi heat pumps over CN105."""

__version__ = "0.1.0"

__all__ = [
    "controls",
    "cycle",
    "decode",
    "entities",
    "frames",
    "functions",
    "protocol",
    "util",
]