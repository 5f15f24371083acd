"""Frame types carried by an engine.io connection."""

from __future__ import annotations

import enum


class FrameType(enum.IntEnum):
    """The kind of a frame: text or binary."""

    STRING = 0
    BINARY = 1

    def byte(self) -> int:
        """Return the frame type as a byte value."""
        return int(self)


def byte_to_frame_type(b: int) -> FrameType:
    """Convert a byte value to a :class:`FrameType`.

    Raises ValueError for a byte that names no frame type.
    """
    return FrameType(b)