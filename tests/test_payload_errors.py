import pytest

from eiokit.payload_errors import (
    ERR_PAUSED,
    ERR_TIMEOUT,
    InvalidPayloadError,
    OpError,
    PayloadError,
)


@pytest.mark.parametrize(
    "op, err, temporary, text",
    [
        ("read", ERR_PAUSED, True, "read: paused"),
        ("read", ERR_TIMEOUT, False, "read: timeout"),
    ],
)
def test_op_error(op, err, temporary, text):
    error = OpError(op, err)
    assert str(error) == text
    assert isinstance(error, PayloadError)
    assert error.temporary() is temporary


def test_op_error_wrapping_plain_exception_is_not_temporary():
    error = OpError("write", OSError("broken"))
    assert error.temporary() is False
    assert str(error) == "write: broken"


def test_invalid_payload_error_message():
    error = InvalidPayloadError()
    assert isinstance(error, ValueError)
    assert "invalid payload" in str(error)