"""
Signature value type and its colon-separated decimal text form.

A signature renders as one decimal byte value per token, each followed by
":" (for example "48:69:2:33:"). The empty signature renders as "".
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from .algorithms import MAX_SIGNATURE_SIZE
from .exceptions import ParseError

DELIMITER = ":"


def encode_signature(data: bytes) -> str:
    """Render raw signature bytes as "B0:B1:...:Bn-1:"."""
    return "".join(f"{b}{DELIMITER}" for b in data)


def decode_signature(payload: str) -> bytes:
    """
    Parse colon-separated decimal text back into raw signature bytes.

    Args:
        payload: Text produced by encode_signature()

    Returns:
        The decoded bytes

    Raises:
        ParseError: On a missing trailing delimiter, a token that is not
            1-3 decimal digits, a value above 255, or too many bytes
    """
    if not isinstance(payload, str):
        raise ParseError(f"Signature text must be str, got {type(payload).__name__}")

    payload = payload.strip()
    if not payload:
        return b""

    if not payload.endswith(DELIMITER):
        raise ParseError("Signature text must end with ':'")

    tokens = payload[:-1].split(DELIMITER)
    if len(tokens) > MAX_SIGNATURE_SIZE:
        raise ParseError(
            f"Signature text holds {len(tokens)} bytes, maximum is {MAX_SIGNATURE_SIZE}"
        )

    out = bytearray()
    for position, token in enumerate(tokens):
        # isdigit() accepts non-ASCII digits, so check the characters explicitly
        if not token or len(token) > 3 or any(c not in "0123456789" for c in token):
            raise ParseError(
                f"Invalid byte token {token!r} at position {position}",
                details={"position": position, "token": token},
            )
        value = int(token)
        if value > 255:
            raise ParseError(
                f"Byte value {value} out of range at position {position}",
                details={"position": position, "token": token},
            )
        out.append(value)

    return bytes(out)


class Signature(BaseModel):
    """A DER-encoded ECDSA signature produced by ECCSigner.sign()."""

    data: bytes = b""

    model_config = ConfigDict(frozen=True)

    @field_validator("data", mode="before")
    @classmethod
    def validate_data(cls, v: Any) -> bytes:
        """Accept raw bytes or the colon-decimal text form."""
        if isinstance(v, str):
            v = decode_signature(v)
        elif isinstance(v, (bytearray, memoryview)):
            v = bytes(v)
        if isinstance(v, bytes) and len(v) > MAX_SIGNATURE_SIZE:
            raise ParseError(
                f"Signature is {len(v)} bytes, maximum is {MAX_SIGNATURE_SIZE}"
            )
        return v

    @field_serializer("data")
    def serialize_data(self, v: bytes, _info) -> str:
        return encode_signature(v)

    @classmethod
    def parse(cls, payload: str) -> "Signature":
        """Build a Signature from its colon-decimal text."""
        return cls(data=decode_signature(payload))

    def dump(self) -> str:
        """Colon-decimal text of this signature."""
        return encode_signature(self.data)

    @property
    def hex(self) -> str:
        return self.data.hex()

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return self.data

    def __str__(self) -> str:
        return self.dump()
