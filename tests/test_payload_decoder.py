import io

import pytest

from eiokit.frame import FrameType
from eiokit.packet import Packet, PacketType
from eiokit.payload_decoder import PayloadDecoder
from eiokit.payload_errors import InvalidPayloadError

S = FrameType.STRING
B = FrameType.BINARY

CASES = [
    (True, bytes([0x00, 0x01, 0xFF]) + b"0", [Packet(S, PacketType.OPEN, b"")]),
    (
        True,
        bytes([0x00, 0x01, 0x03, 0xFF]) + "4hello 你好".encode(),
        [Packet(S, PacketType.MESSAGE, "hello 你好".encode())],
    ),
    (
        True,
        bytes([0x01, 0x01, 0x03, 0xFF, 0x04]) + "hello 你好".encode(),
        [Packet(B, PacketType.MESSAGE, "hello 你好".encode())],
    ),
    (
        True,
        bytes([0x01, 0x07, 0xFF, 0x04])
        + b"hello\n"
        + bytes([0x00, 0x08, 0xFF])
        + "4你好\n".encode()
        + bytes([0x00, 0x06, 0xFF])
        + b"2probe",
        [
            Packet(B, PacketType.MESSAGE, b"hello\n"),
            Packet(S, PacketType.MESSAGE, "你好\n".encode()),
            Packet(S, PacketType.PING, b"probe"),
        ],
    ),
    (False, b"1:0", [Packet(S, PacketType.OPEN, b"")]),
    (
        False,
        "13:4hello 你好".encode(),
        [Packet(S, PacketType.MESSAGE, "hello 你好".encode())],
    ),
    (
        False,
        b"18:b4aGVsbG8g5L2g5aW9",
        [Packet(B, PacketType.MESSAGE, "hello 你好".encode())],
    ),
    (
        False,
        "10:b4aGVsbG8K8:4你好\n6:2probe".encode(),
        [
            Packet(B, PacketType.MESSAGE, b"hello\n"),
            Packet(S, PacketType.MESSAGE, "你好\n".encode()),
            Packet(S, PacketType.PING, b"probe"),
        ],
    ),
]


class FakeFeeder:
    def __init__(self, data, support_binary, return_error=None):
        self.data = data
        self.support_binary = support_binary
        self.return_error = return_error
        self.sent_error = "unset"
        self.get_counter = 0
        self.put_counter = 0

    def get_reader(self):
        self.get_counter += 1
        if self.return_error is not None:
            raise self.return_error
        return io.BytesIO(self.data), self.support_binary

    def put_reader(self, err):
        self.put_counter += 1
        self.sent_error = err
        if self.return_error is not None:
            raise self.return_error


@pytest.mark.parametrize("support_binary, data, expected", CASES)
def test_decoder(support_binary, data, expected):
    feeder = FakeFeeder(data, support_binary)
    decoder = PayloadDecoder(feeder)
    packets = []
    for _ in expected:
        frame_type, packet_type, reader = decoder.next_reader()
        body = reader.read()
        reader.close()
        packets.append(Packet(frame_type, packet_type, body))
    assert packets == expected
    assert feeder.get_counter == 1
    assert feeder.put_counter == 1
    assert feeder.sent_error is None


def test_next_reader_error():
    target = RuntimeError("error")
    feeder = FakeFeeder(bytes([0x00, 0x01, 0xFF]) + b"0", True, return_error=target)
    decoder = PayloadDecoder(feeder)
    with pytest.raises(RuntimeError) as info:
        decoder.next_reader()
    assert info.value is target


def test_partial_read_then_rest():
    feeder = FakeFeeder("13:4hello 你好".encode(), False)
    decoder = PayloadDecoder(feeder)
    _, _, reader = decoder.next_reader()
    assert reader.read(5) == b"hello"
    assert reader.read() == " 你好".encode()
    assert reader.read() == b""


def test_close_discards_unread_bytes():
    feeder = FakeFeeder("10:b4aGVsbG8K8:4你好\n6:2probe".encode(), False)
    decoder = PayloadDecoder(feeder)
    decoder.next_reader()
    decoder.read(2)
    decoder.close()
    frame_type, packet_type, reader = decoder.next_reader()
    assert (frame_type, packet_type) == (S, PacketType.MESSAGE)
    assert reader.read() == "你好\n".encode()


def test_invalid_binary_frame_type():
    feeder = FakeFeeder(bytes([0x02, 0x01, 0xFF]) + b"0", True)
    decoder = PayloadDecoder(feeder)
    with pytest.raises(InvalidPayloadError) as info:
        decoder.next_reader()
    assert feeder.sent_error is info.value


def test_invalid_text_length():
    feeder = FakeFeeder(b"1x:0", False)
    decoder = PayloadDecoder(feeder)
    with pytest.raises(InvalidPayloadError):
        decoder.next_reader()
    assert feeder.put_counter == 1


def test_empty_body_reports_eof():
    feeder = FakeFeeder(b"", False)
    decoder = PayloadDecoder(feeder)
    with pytest.raises(EOFError) as info:
        decoder.next_reader()
    assert feeder.sent_error is info.value


def test_feeder_error_on_finish_wins():
    feeder = FakeFeeder(b"1:0", False)
    decoder = PayloadDecoder(feeder)
    decoder.next_reader()
    target = RuntimeError("closed")
    feeder.return_error = target
    with pytest.raises(RuntimeError) as info:
        decoder.close()
    assert info.value is target
    assert feeder.sent_error is None