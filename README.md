# eiokit

Building blocks for the Engine.IO wire protocol:

- `eiokit.frame` – frame types (`FrameType`, `byte_to_frame_type`).
- `eiokit.packet` – packet types (`PacketType`, `byte_to_packet_type`), the
  `Frame` and `Packet` records, and a packet `Encoder` and `Decoder` that sit
  over a frame reader or writer. In-memory `FakeConnReader`, `FakeConnWriter`,
  `FakeConstReader` and `FakeDiscardWriter` are there for tests and benchmarks.
- `eiokit.payload_util` – length prefixes for the polling payload format
  (`write_text_len`, `write_binary_len`, `read_text_len`, `read_binary_len`).
- `eiokit.payload_encoder` and `eiokit.payload_decoder` – `PayloadEncoder` and
  `PayloadDecoder` for the text (with base64 for binary frames) and binary
  payload encodings.
- `eiokit.payload` – `Payload`, which hands HTTP request bodies to a reader
  and flushes pending frames to HTTP responses. It supports deadlines, pause
  and resume, and close.
- `eiokit.pauser` – `Pauser`, the pause/resume coordinator that `Payload` uses.
- `eiokit.payload_errors` – `PayloadError`, `OpError`, `RetryError` and
  `InvalidPayloadError`.
- `eiokit.broadcast` – `Broadcast`, which keeps track of the rooms that
  connections have joined and sends events to them.
- `eiokit.adapter_options` – `RedisAdapterOptions`, plus `default_options()` and
  `get_options()`.

## Install

```
pip install eiokit
```

Python 3.10 or later is required. The package has no third-party dependencies.

## Encoding packets

```python
from eiokit.frame import FrameType
from eiokit.packet import Encoder, FakeConnWriter, PacketType

sink = FakeConnWriter()
encoder = Encoder(sink)
writer = encoder.next_writer(FrameType.STRING, PacketType.MESSAGE)
writer.write(b"hello")
writer.close()
# sink.frames now holds one string frame whose data is b"4hello"
```

## Rooms

```python
from eiokit.broadcast import Broadcast

rooms = Broadcast()
rooms.join("lobby", connection)   # any object with id() and emit()
rooms.send("lobby", "greeting", "hi")
rooms.count("lobby")              # 1
```

## Running the tests

```
pip install -e ".[test]"
pytest
```