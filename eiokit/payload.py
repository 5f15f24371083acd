"""Engine.io payload: packets carried over a series of request and response bodies."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable

from eiokit.frame import FrameType
from eiokit.packet import PacketType
from eiokit.pauser import Pauser
from eiokit.payload_decoder import PayloadDecoder
from eiokit.payload_encoder import PayloadEncoder
from eiokit.payload_errors import ERR_OVERLAP, ERR_PAUSED, ERR_TIMEOUT, OpError

_POLL_INTERVAL = 0.005


@dataclass
class _Offer:
    value: Any
    taken: bool = False


class _Channel:
    """An unbuffered hand-off between two threads, guarded by the payload's lock."""

    def __init__(self) -> None:
        self.offer: _Offer | None = None

    def take(self) -> Any:
        offer = self.offer
        if offer is None:
            raise RuntimeError("nothing to take")
        self.offer = None
        offer.taken = True
        return offer.value


class _Feeder:
    """Connects the payload's decoder and encoder to its hand-offs."""

    def __init__(self, payload: Payload) -> None:
        self._payload = payload

    def get_reader(self) -> tuple[BinaryIO, bool]:
        return self._payload._get_reader()

    def put_reader(self, err: BaseException | None) -> None:
        self._payload._put_reader(err)

    def get_writer(self) -> BinaryIO:
        return self._payload._get_writer()

    def put_writer(self, err: BaseException | None) -> None:
        self._payload._put_writer(err)


class Payload:
    """Moves packets between bodies fed in or flushed out and packet readers and writers.

    :meth:`feed_in` hands a request body to :meth:`next_reader`;
    :meth:`flush_out` hands a response body to :meth:`next_writer`. Deadlines
    are ``time.monotonic()`` values, or None for no deadline.
    """

    def __init__(self, support_binary: bool) -> None:
        self._cond = threading.Condition()
        self._closed = False
        self._err: BaseException | None = None
        self._pauser = Pauser()
        self._feeding = False
        self._flushing = False
        self._read_deadline: float | None = None
        self._write_deadline: float | None = None
        self._readers = _Channel()
        self._read_errors = _Channel()
        self._writers = _Channel()
        self._write_errors = _Channel()
        feeder = _Feeder(self)
        self._decoder = PayloadDecoder(feeder)
        self._encoder = PayloadEncoder(support_binary, feeder)

    def feed_in(self, reader: BinaryIO, support_binary: bool) -> None:
        """Hand a body to :meth:`next_reader` and wait until it is consumed.

        Raises EOFError when closed, a temporary OpError when paused, an
        OpError on timeout or overlap, and the read error otherwise.
        """
        with self._cond:
            if self._closed:
                raise self._load()
            if self._feeding:
                raise OpError("read", ERR_OVERLAP)
            self._feeding = True
        try:
            if not self._pauser.working():
                raise OpError("payload", ERR_PAUSED)
            try:
                with self._cond:
                    self._send(self._readers, (reader, support_binary), "read")
                    err = self._recv(self._read_errors, "read")
            finally:
                self._pauser.done()
        finally:
            with self._cond:
                self._feeding = False
        self._raise_stored("read", err)

    def flush_out(self, writer: BinaryIO) -> None:
        """Hand an output to :meth:`next_writer` and wait until a packet is written.

        When paused, or when a pause starts while waiting, a NOOP packet is
        written instead.
        """
        with self._cond:
            if self._closed:
                raise self._load()
            if self._flushing:
                raise OpError("write", ERR_OVERLAP)
            self._flushing = True
        try:
            if not self._pauser.working():
                writer.write(self._encoder.noop())
                return
            try:
                with self._cond:
                    sent = self._send(
                        self._writers, writer, "write", self._pauser.pausing_trigger
                    )
                    err = self._recv(self._write_errors, "write") if sent else None
                if not sent:
                    writer.write(self._encoder.noop())
                    return
            finally:
                self._pauser.done()
        finally:
            with self._cond:
                self._flushing = False
        self._raise_stored("write", err)

    def next_reader(self) -> tuple[FrameType, PacketType, PayloadDecoder]:
        """Return the frame type, packet type and reader of the next packet."""
        return self._decoder.next_reader()

    def set_read_deadline(self, deadline: float | None) -> None:
        """Set the deadline for reading; None waits forever."""
        with self._cond:
            self._read_deadline = deadline
            self._cond.notify_all()

    def next_writer(self, frame_type: FrameType, packet_type: PacketType) -> PayloadEncoder:
        """Return a writer for the next packet once an output is flushed out."""
        return self._encoder.next_writer(frame_type, packet_type)

    def set_write_deadline(self, deadline: float | None) -> None:
        """Set the deadline for writing; None waits forever."""
        with self._cond:
            self._write_deadline = deadline
            self._cond.notify_all()

    def pause(self) -> None:
        """Pause, waiting for bodies being fed in or flushed out to finish."""
        self._pauser.pause()

    def resume(self) -> None:
        """Resume after a pause."""
        self._pauser.resume()

    def close(self) -> None:
        """Close the payload; waiting and later calls raise EOFError or the stored error."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def store(self, op: str, err: BaseException | None) -> BaseException | None:
        """Record the first real error and return the error in effect.

        None and EOFError are returned as given and not recorded. Once an
        error is recorded, it is returned for every later call.
        """
        with self._cond:
            if self._err is not None:
                return self._err
            if err is None or isinstance(err, EOFError):
                return err
            self._err = OpError(op, err)
            return self._err

    def _raise_stored(self, op: str, err: BaseException | None) -> None:
        stored = self.store(op, err)
        if stored is not None:
            raise stored

    def _load(self) -> BaseException:
        return self._err if self._err is not None else EOFError("payload closed")

    def _remaining(self, op: str) -> float | None:
        deadline = self._read_deadline if op == "read" else self._write_deadline
        if deadline is None:
            return None
        return deadline - time.monotonic()

    def _await(
        self,
        ready: Callable[[], bool],
        op: str,
        trigger: Callable[[], threading.Event] | None = None,
    ) -> bool:
        """Wait, lock held, until ready; return False if the trigger fired first."""
        while True:
            if ready():
                return True
            remaining = self._remaining(op)
            if remaining is not None and remaining <= 0:
                raise self.store(op, ERR_TIMEOUT) or OpError(op, ERR_TIMEOUT)
            if self._closed:
                raise self._load()
            if trigger is not None and trigger().is_set():
                return False
            wait = _POLL_INTERVAL if remaining is None else min(_POLL_INTERVAL, remaining)
            self._cond.wait(wait)

    def _send(
        self,
        channel: _Channel,
        value: Any,
        op: str,
        trigger: Callable[[], threading.Event] | None = None,
    ) -> bool:
        offer = _Offer(value)
        channel.offer = offer
        self._cond.notify_all()
        try:
            return self._await(lambda: offer.taken, op, trigger)
        finally:
            if channel.offer is offer:
                channel.offer = None

    def _recv(self, channel: _Channel, op: str, paused: bool = False) -> Any:
        trigger = self._pauser.paused_trigger if paused else None
        if not self._await(lambda: channel.offer is not None, op, trigger):
            raise OpError("payload", ERR_PAUSED)
        value = channel.take()
        self._cond.notify_all()
        return value

    def _get_reader(self) -> tuple[BinaryIO, bool]:
        with self._cond:
            if self._closed:
                raise self._load()
        if not self._pauser.working():
            raise OpError("payload", ERR_PAUSED)
        self._pauser.done()
        with self._cond:
            reader, support_binary = self._recv(self._readers, "read", paused=True)
            return reader, support_binary

    def _put_reader(self, err: BaseException | None) -> None:
        with self._cond:
            if self._closed:
                raise self._load()
            self._send(self._read_errors, err, "read")

    def _get_writer(self) -> BinaryIO:
        with self._cond:
            if self._closed:
                raise self._load()
        if not self._pauser.working():
            raise OpError("payload", ERR_PAUSED)
        self._pauser.done()
        with self._cond:
            writer: BinaryIO = self._recv(self._writers, "write", paused=True)
            return writer

    def _put_writer(self, err: BaseException | None) -> None:
        with self._cond:
            if self._closed:
                raise self._load()
            remaining = self._remaining("write")
            if remaining is not None and remaining <= 0:
                raise self.store("write", ERR_TIMEOUT) or OpError("write", ERR_TIMEOUT)
            stored = self.store("write", err)
            self._send(self._write_errors, err, "write")
        if stored is not None:
            raise stored