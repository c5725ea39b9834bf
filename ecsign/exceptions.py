"""
ECSign Exceptions.

All errors raised by ecsign inherit from ECSignError, so callers can catch
a single type. A failed verification is not an error: verify() returns False.
"""

from typing import Any, Optional


class ECSignError(Exception):
    """Base exception for all ecsign errors."""

    def __init__(
        self,
        message: str,
        code: str = "ECSIGN_ERROR",
        details: Optional[dict] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> dict:
        """Convert error to dictionary representation."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }


class KeyIOError(ECSignError):
    """A key file could not be opened, read or written."""

    def __init__(self, message: str, path: Any = None, **kwargs: Any):
        super().__init__(message, "IO_ERROR", details={"path": str(path)}, **kwargs)
        self.path = path


class ParseError(ECSignError):
    """Malformed PEM key or malformed signature text."""

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(message, "PARSE_ERROR", **kwargs)


class KeyValidationError(ECSignError):
    """Key failed domain-parameter or consistency checks."""

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(message, "KEY_VALIDATION_FAILED", **kwargs)


class KeyGenerationError(ECSignError):
    """The underlying library could not generate a key pair."""

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(message, "GENERATION_FAILED", **kwargs)


class SigningError(ECSignError):
    """The underlying library failed while producing a signature."""

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(message, "SIGNING_FAILED", **kwargs)


class UnsupportedCurveError(ECSignError):
    """Curve name outside the supported set."""

    def __init__(self, curve: str, **kwargs: Any):
        super().__init__(
            f"Unsupported curve: {curve!r}",
            "UNSUPPORTED_CURVE",
            details={"curve": curve},
            **kwargs,
        )
        self.curve = curve


class UnsupportedDigestError(ECSignError):
    """Digest name outside the supported set."""

    def __init__(self, digest: str, **kwargs: Any):
        super().__init__(
            f"Unsupported digest: {digest!r}",
            "UNSUPPORTED_DIGEST",
            details={"digest": digest},
            **kwargs,
        )
        self.digest = digest


class NoKeyLoadedError(ECSignError):
    """Operation needs a key that has not been loaded."""

    def __init__(self, role: str):
        super().__init__(
            f"No {role} key loaded",
            "NO_KEY_LOADED",
            details={"role": role},
        )
        self.role = role


class InvalidInputError(ECSignError):
    """Empty, mistyped or structurally malformed input."""

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(message, "INVALID_INPUT", **kwargs)
