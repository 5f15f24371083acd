"""Errors raised by the payload layer."""

from __future__ import annotations


class PayloadError(Exception):
    """Base class of payload errors."""

    def temporary(self) -> bool:
        """Return True if the operation may be retried."""
        return False


class RetryError(PayloadError):
    """An error after which the operation may be retried."""

    def temporary(self) -> bool:
        return True


class InvalidPayloadError(PayloadError, ValueError):
    """The payload bytes are malformed."""

    def __init__(self, message: str = "invalid payload") -> None:
        super().__init__(message)


class OpError(PayloadError):
    """An error that happened during a named operation."""

    def __init__(self, op: str, err: BaseException) -> None:
        super().__init__(op, err)
        self.op = op
        self.err = err

    def __str__(self) -> str:
        return f"{self.op}: {self.err}"

    def temporary(self) -> bool:
        check = getattr(self.err, "temporary", None)
        return bool(check()) if callable(check) else False


ERR_PAUSED = RetryError("paused")
ERR_TIMEOUT = PayloadError("timeout")
ERR_OVERLAP = PayloadError("overlap")