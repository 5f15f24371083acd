"""Encoder for engine.io payloads: many packets carried in one body."""

from __future__ import annotations

import base64
import io
from typing import BinaryIO, Protocol

from eiokit.frame import FrameType
from eiokit.packet import PacketType
from eiokit.payload_util import write_binary_len, write_text_len

_NOOP_BINARY = bytes([0x00, 0x01, 0xFF, ord("6")])
_NOOP_TEXT = b"1:6"


class WriterFeeder(Protocol):
    """Supplies outputs to an encoder and receives the outcome."""

    def get_writer(self) -> BinaryIO:
        """Return the output for the next packet."""
        ...

    def put_writer(self, err: BaseException | None) -> None:
        """Report how writing ended; raise to override the outcome."""
        ...


class PayloadEncoder:
    """Writes packets in the payload encoding.

    The encoder itself is the writer of the current packet: after
    :meth:`next_writer`, write the packet with :meth:`write` and send it
    with :meth:`close`.
    """

    def __init__(self, support_binary: bool, feeder: WriterFeeder | None = None) -> None:
        self.support_binary = support_binary
        self.feeder = feeder
        self._raw: BinaryIO | None = None
        self._frame_type = FrameType.STRING
        self._packet_type = PacketType.OPEN
        self._cache = bytearray()

    def noop(self) -> bytes:
        """Return an encoded NOOP packet."""
        return _NOOP_BINARY if self.support_binary else _NOOP_TEXT

    def next_writer(self, frame_type: FrameType, packet_type: PacketType) -> PayloadEncoder:
        """Start a packet and return the writer for its body."""
        if self.feeder is None:
            raise RuntimeError("encoder has no writer feeder")
        self._raw = self.feeder.get_writer()
        self._frame_type = frame_type
        self._packet_type = packet_type
        self._cache = bytearray()
        return self

    def write(self, data: bytes) -> int:
        """Add bytes to the current packet."""
        self._cache += data
        return len(data)

    def close(self) -> None:
        """Encode the current packet and write it out."""
        if self.feeder is None or self._raw is None:
            raise RuntimeError("no packet is being written")
        err: BaseException | None = None
        try:
            body = self._body()
            self._raw.write(self._header(len(body)))
            self._raw.write(body)
        except Exception as exc:
            err = exc
        self.feeder.put_writer(err)
        if err is not None:
            raise err

    def _is_b64(self) -> bool:
        return not self.support_binary and self._frame_type == FrameType.BINARY

    def _body(self) -> bytes:
        if self._is_b64():
            return base64.b64encode(bytes(self._cache))
        return bytes(self._cache)

    def _header(self, body_len: int) -> bytes:
        header = io.BytesIO()
        if self.support_binary:
            header.write(bytes([self._frame_type.byte()]))
            write_binary_len(body_len + 1, header)
            if self._frame_type == FrameType.BINARY:
                header.write(bytes([self._packet_type.binary_byte()]))
            else:
                header.write(bytes([self._packet_type.string_byte()]))
        elif self._frame_type == FrameType.BINARY:
            write_text_len(body_len + 2, header)
            header.write(b"b" + bytes([self._packet_type.string_byte()]))
        else:
            write_text_len(body_len + 1, header)
            header.write(bytes([self._packet_type.string_byte()]))
        return header.getvalue()