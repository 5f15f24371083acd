"""Decoder for engine.io payloads: many packets carried in one body."""

from __future__ import annotations

import base64
import binascii
import io
from typing import BinaryIO, Callable, NoReturn, Protocol

from eiokit.frame import FrameType, byte_to_frame_type
from eiokit.packet import PacketType, byte_to_packet_type
from eiokit.payload_errors import InvalidPayloadError
from eiokit.payload_util import read_binary_len, read_text_len


class ReaderFeeder(Protocol):
    """Supplies payload bodies to a decoder and receives the outcome."""

    def get_reader(self) -> tuple[BinaryIO, bool]:
        """Return the next body and whether it uses the binary encoding."""
        ...

    def put_reader(self, err: BaseException | None) -> None:
        """Report how reading the body ended; raise to override the outcome."""
        ...


def _read_byte(reader: BinaryIO) -> int:
    data = reader.read(1)
    if not data:
        raise EOFError("unexpected end of payload")
    return data[0]


def _packet_type(b: int, frame_type: FrameType) -> PacketType:
    try:
        return byte_to_packet_type(b, frame_type)
    except ValueError:
        raise InvalidPayloadError() from None


def _text_header(reader: BinaryIO) -> tuple[FrameType, PacketType, int]:
    length = read_text_len(reader)
    frame_type = FrameType.STRING
    b = _read_byte(reader)
    length -= 1
    if b == ord("b"):
        frame_type = FrameType.BINARY
        b = _read_byte(reader)
        length -= 1
    return frame_type, _packet_type(b, FrameType.STRING), length


def _binary_header(reader: BinaryIO) -> tuple[FrameType, PacketType, int]:
    b = _read_byte(reader)
    if b > 1:
        raise InvalidPayloadError()
    frame_type = byte_to_frame_type(b)
    length = read_binary_len(reader)
    packet_type = _packet_type(_read_byte(reader), frame_type)
    return frame_type, packet_type, length - 1


class PayloadDecoder:
    """Splits payload bodies from a feeder into packets.

    The decoder itself is the reader of the current packet: after
    :meth:`next_reader`, read the packet with :meth:`read` and finish it
    with :meth:`close`.
    """

    def __init__(self, feeder: ReaderFeeder) -> None:
        self._feeder = feeder
        self._raw: BinaryIO | None = None
        self._remaining = 0
        self._support_binary = False
        self._is_b64 = False
        self._b64: io.BytesIO | None = None
        self._frame_type = FrameType.STRING
        self._packet_type = PacketType.OPEN

    def next_reader(self) -> tuple[FrameType, PacketType, PayloadDecoder]:
        """Return the frame type, packet type and reader of the next packet."""
        if self._raw is None:
            reader, support_binary = self._feeder.get_reader()
            try:
                self._set_next_reader(reader, support_binary)
            except Exception as exc:
                self._fail(exc)
        return self._frame_type, self._packet_type, self

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes of the current packet, all if negative."""
        if self._is_b64:
            if self._b64 is None:
                encoded = self._read_limited(-1)
                try:
                    decoded = base64.b64decode(encoded, validate=True)
                except binascii.Error as exc:
                    raise InvalidPayloadError(f"invalid payload: {exc}") from exc
                self._b64 = io.BytesIO(decoded)
            return self._b64.read(size)
        return self._read_limited(size)

    def close(self) -> None:
        """Finish the current packet and move to the next one in the body."""
        try:
            self.read()
        except Exception as exc:
            self._fail(exc)
        raw = self._raw
        if raw is None:
            return
        try:
            self._set_next_reader(raw, self._support_binary)
        except EOFError:
            self._reset()
            self._feeder.put_reader(None)
        except Exception as exc:
            self._fail(exc)

    def _read_limited(self, size: int) -> bytes:
        if self._raw is None or self._remaining <= 0:
            return b""
        if size >= 0:
            chunk = self._raw.read(min(size, self._remaining))
            self._remaining -= len(chunk)
            return chunk
        chunks = []
        while self._remaining > 0:
            chunk = self._raw.read(self._remaining)
            if not chunk:
                break
            chunks.append(chunk)
            self._remaining -= len(chunk)
        return b"".join(chunks)

    def _set_next_reader(self, reader: BinaryIO, support_binary: bool) -> None:
        header: Callable[[BinaryIO], tuple[FrameType, PacketType, int]]
        header = _binary_header if support_binary else _text_header
        frame_type, packet_type, length = header(reader)
        self._frame_type = frame_type
        self._packet_type = packet_type
        self._raw = reader
        self._remaining = length
        self._support_binary = support_binary
        self._is_b64 = not support_binary and frame_type == FrameType.BINARY
        self._b64 = None

    def _reset(self) -> None:
        self._raw = None
        self._remaining = 0
        self._is_b64 = False
        self._b64 = None

    def _fail(self, exc: BaseException) -> NoReturn:
        self._feeder.put_reader(exc)
        raise exc