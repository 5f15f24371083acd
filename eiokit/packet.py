"""Engine.io packet types and the frame-level packet encoder and decoder."""

from __future__ import annotations

import enum
import io
from dataclasses import dataclass
from typing import BinaryIO, Protocol

from eiokit.frame import FrameType


class PacketType(enum.IntEnum):
    """The type of an engine.io packet."""

    OPEN = 0
    CLOSE = 1
    PING = 2
    PONG = 3
    MESSAGE = 4
    UPGRADE = 5
    NOOP = 6

    def __str__(self) -> str:
        return self.name.lower()

    def string_byte(self) -> int:
        """Return the packet type as it is written in a text frame."""
        return int(self) + ord("0")

    def binary_byte(self) -> int:
        """Return the packet type as it is written in a binary frame."""
        return int(self)


def byte_to_packet_type(b: int, frame_type: FrameType) -> PacketType:
    """Convert the leading byte of a frame to a :class:`PacketType`.

    Raises ValueError when the byte names no packet type.
    """
    if frame_type == FrameType.STRING:
        b -= ord("0")
    return PacketType(b)


@dataclass(frozen=True)
class Frame:
    """A raw frame: its type and its bytes."""

    frame_type: FrameType
    data: bytes


@dataclass(frozen=True)
class Packet:
    """A decoded packet: frame type, packet type and payload bytes."""

    frame_type: FrameType
    packet_type: PacketType
    data: bytes


class FrameReader(Protocol):
    def next_reader(self) -> tuple[FrameType, BinaryIO]: ...


class FrameWriter(Protocol):
    def next_writer(self, frame_type: FrameType) -> BinaryIO: ...


class Decoder:
    """Reads packets from a source of frames."""

    def __init__(self, reader: FrameReader) -> None:
        self._reader = reader

    def next_reader(self) -> tuple[FrameType, PacketType, BinaryIO]:
        """Return the frame type, packet type and a reader for the next packet.

        Raises EOFError when the source has no more frames.
        """
        frame_type, reader = self._reader.next_reader()
        head = reader.read(1)
        if len(head) != 1:
            reader.close()
            raise EOFError("frame has no packet type")
        return frame_type, byte_to_packet_type(head[0], frame_type), reader


class Encoder:
    """Writes packets to a sink of frames."""

    def __init__(self, writer: FrameWriter) -> None:
        self._writer = writer

    def next_writer(self, frame_type: FrameType, packet_type: PacketType) -> BinaryIO:
        """Open a frame, write the packet type and return the frame writer."""
        writer = self._writer.next_writer(frame_type)
        if frame_type == FrameType.STRING:
            head = packet_type.string_byte()
        else:
            head = packet_type.binary_byte()
        try:
            writer.write(bytes([head]))
        except BaseException:
            writer.close()
            raise
        return writer


class FakeConnReader:
    """A frame source that hands out a fixed list of frames."""

    def __init__(self, frames: list[Frame] | None = None) -> None:
        self._frames = list(frames or [])

    def next_reader(self) -> tuple[FrameType, BinaryIO]:
        if not self._frames:
            raise EOFError("no more frames")
        frame = self._frames.pop(0)
        return frame.frame_type, io.BytesIO(frame.data)


class _ConstFrame:
    """An endless frame that repeats one byte."""

    def __init__(self, value: int) -> None:
        self._value = bytes([value])
        self.closed = False

    def read(self, size: int = -1) -> bytes:
        return self._value

    def close(self) -> None:
        self.closed = True


class FakeConstReader:
    """A frame source that alternates text and binary message frames forever."""

    def __init__(self) -> None:
        self._frame_type = FrameType.STRING

    def next_reader(self) -> tuple[FrameType, _ConstFrame]:
        frame_type = self._frame_type
        if frame_type == FrameType.STRING:
            value = PacketType.MESSAGE.string_byte()
            self._frame_type = FrameType.BINARY
        else:
            value = PacketType.MESSAGE.binary_byte()
            self._frame_type = FrameType.STRING
        return frame_type, _ConstFrame(value)


class _FakeFrame:
    """A frame being written; it is stored in its writer when closed."""

    def __init__(self, owner: FakeConnWriter, frame_type: FrameType) -> None:
        self._owner = owner
        self._frame_type = frame_type
        self._data = bytearray()

    def write(self, data: bytes) -> int:
        self._data += data
        return len(data)

    def close(self) -> None:
        self._owner.frames.append(Frame(self._frame_type, bytes(self._data)))


class FakeConnWriter:
    """A frame sink that keeps every closed frame in :attr:`frames`."""

    def __init__(self) -> None:
        self.frames: list[Frame] = []

    def next_writer(self, frame_type: FrameType) -> _FakeFrame:
        return _FakeFrame(self, frame_type)


class _Discarder:
    """A frame that counts and drops what is written to it."""

    def __init__(self) -> None:
        self.written = 0
        self.closed = False

    def write(self, data: bytes) -> int:
        self.written += len(data)
        return len(data)

    def close(self) -> None:
        self.closed = True


class FakeDiscardWriter:
    """A frame sink that drops everything written to it."""

    def next_writer(self, frame_type: FrameType) -> _Discarder:
        return _Discarder()