"""
Tests for the error taxonomy.
"""

import pytest

from ecsign.exceptions import (
    ECSignError,
    InvalidInputError,
    KeyGenerationError,
    KeyIOError,
    KeyValidationError,
    NoKeyLoadedError,
    ParseError,
    SigningError,
    UnsupportedCurveError,
    UnsupportedDigestError,
)


@pytest.mark.parametrize("error,code", [
    (KeyIOError("x", path="/tmp/k.pem"), "IO_ERROR"),
    (ParseError("x"), "PARSE_ERROR"),
    (KeyValidationError("x"), "KEY_VALIDATION_FAILED"),
    (KeyGenerationError("x"), "GENERATION_FAILED"),
    (SigningError("x"), "SIGNING_FAILED"),
    (UnsupportedCurveError("p521"), "UNSUPPORTED_CURVE"),
    (UnsupportedDigestError("md5"), "UNSUPPORTED_DIGEST"),
    (NoKeyLoadedError("private"), "NO_KEY_LOADED"),
    (InvalidInputError("x"), "INVALID_INPUT"),
])
def test_codes(error, code):
    assert isinstance(error, ECSignError)
    assert error.code == code


def test_to_dict_with_cause():
    cause = OSError(2, "No such file or directory")
    error = KeyIOError("Cannot read key", path="/tmp/k.pem", cause=cause)

    data = error.to_dict()

    assert data["code"] == "IO_ERROR"
    assert data["message"] == "Cannot read key"
    assert data["details"] == {"path": "/tmp/k.pem"}
    assert "No such file" in data["cause"]


def test_to_dict_without_cause():
    data = UnsupportedCurveError("p521").to_dict()

    assert data["cause"] is None
    assert data["details"] == {"curve": "p521"}
    assert "p521" in data["message"]
