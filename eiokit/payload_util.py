"""Length prefixes used by the payload encoding."""

from __future__ import annotations

from typing import BinaryIO

from eiokit.payload_errors import InvalidPayloadError

_BINARY_END = 0xFF
_TEXT_END = ord(":")


def write_binary_len(length: int, buf: BinaryIO) -> None:
    """Write a binary length prefix: one byte per decimal digit, then 0xff."""
    if length <= 0:
        buf.write(bytes([0x00, _BINARY_END]))
        return
    buf.write(bytes(int(digit) for digit in str(length)) + bytes([_BINARY_END]))


def write_text_len(length: int, buf: BinaryIO) -> None:
    """Write a text length prefix: decimal digits, then ':'."""
    if length <= 0:
        buf.write(b"0:")
        return
    buf.write(f"{length}:".encode("ascii"))


def _read_byte(reader: BinaryIO) -> int:
    data = reader.read(1)
    if not data:
        raise EOFError("unexpected end of payload")
    return data[0]


def read_binary_len(reader: BinaryIO) -> int:
    """Read a binary length prefix.

    Raises EOFError if the input ends first, InvalidPayloadError on a bad digit.
    """
    length = 0
    while (b := _read_byte(reader)) != _BINARY_END:
        if b > 9:
            raise InvalidPayloadError()
        length = length * 10 + b
    return length


def read_text_len(reader: BinaryIO) -> int:
    """Read a text length prefix.

    Raises EOFError if the input ends first, InvalidPayloadError on a bad digit.
    """
    length = 0
    while (b := _read_byte(reader)) != _TEXT_END:
        if not ord("0") <= b <= ord("9"):
            raise InvalidPayloadError()
        length = length * 10 + (b - ord("0"))
    return length