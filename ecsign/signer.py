"""
EC signing and verification over PEM key files.

This module provides ECCSigner, which:
- generates EC key pairs on secp256k1 or brainpool256r1 and writes them as PEM
- loads PEM public and private keys, validating them against the curve
- signs byte buffers with ECDSA over SHA-256 or SHA-1
- verifies DER-encoded ECDSA signatures
- converts signatures to and from colon-separated decimal text

An instance is not thread-safe. Use one signer per thread or guard it with
an external lock.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature

from . import backend
from .algorithms import curve_name, curve_spec, get_digest, to_nid
from .config import ECSignConfig
from .exceptions import (
    ECSignError,
    InvalidInputError,
    KeyGenerationError,
    KeyIOError,
    KeyValidationError,
    NoKeyLoadedError,
    ParseError,
    SigningError,
)
from .key_security import SensitiveBuffer
from .signature import Signature

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]
SignatureLike = Union[Signature, bytes, bytearray, memoryview]


def _require_bytes(value, what: str) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise InvalidInputError(f"{what} must be bytes, got {type(value).__name__}")


def validate_private_key(key: ec.EllipticCurvePrivateKey) -> None:
    """
    Check a private key against its curve.

    The scalar must lie in [1, n-1] and the stored public point must equal
    d*G. Raises KeyValidationError or UnsupportedCurveError.
    """
    spec = curve_spec(key.curve)
    d = key.private_numbers().private_value
    if not 1 <= d < spec.order:
        raise KeyValidationError(f"Private scalar out of range for {spec.name}")

    try:
        derived = ec.derive_private_key(d, spec.curve_class()).public_key()
    except ValueError as e:
        raise KeyValidationError(f"Cannot derive public point: {e}", cause=e) from e

    if derived.public_numbers() != key.public_key().public_numbers():
        raise KeyValidationError(f"Public point does not match private scalar on {spec.name}")


def validate_public_key(key: ec.EllipticCurvePublicKey) -> None:
    """Check that a public key is on a supported curve and its point is valid."""
    spec = curve_spec(key.curve)
    numbers = key.public_numbers()
    try:
        # Rebuilding from coordinates runs the library's on-curve check
        ec.EllipticCurvePublicNumbers(numbers.x, numbers.y, spec.curve_class()).public_key()
    except ValueError as e:
        raise KeyValidationError(f"Public point not on {spec.name}: {e}", cause=e) from e


class ECCSigner:
    """
    Stateful EC signer/verifier.

    Holds at most one private (signing) key, one public (verification) key
    and the most recent signature produced by sign() or set_signature().

    Usage:
        with ECCSigner() as signer:
            signer.generate_keys("pub.pem", "priv.pem", "secp256k1")
            signer.load_privkey("priv.pem")
            signer.load_pubkey("pub.pem")

            sig = signer.sign(b"hello", "sha256")
            assert signer.verify(b"hello", sig, "sha256")

            text = signer.dump_signature()   # "48:68:2:...:"
    """

    def __init__(self, config: Optional[ECSignConfig] = None):
        self.config = config
        self._private_key: Optional[ec.EllipticCurvePrivateKey] = None
        self._public_key: Optional[ec.EllipticCurvePublicKey] = None
        self._signature: Optional[Signature] = None
        self._closed = True

        backend.acquire()
        self._closed = False

    # -- lifecycle --------------------------------------------------------

    def close(self) -> None:
        """Drop keys and signature and release the shared backend. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._private_key = None
        self._public_key = None
        self._signature = None
        backend.release()

    def __enter__(self) -> "ECCSigner":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __del__(self):
        """Best-effort cleanup on garbage collection."""
        try:
            self.close()
        except Exception:
            pass  # Ignore errors during GC

    def _check_open(self) -> None:
        if self._closed:
            raise InvalidInputError("Signer has been closed")

    # -- state ------------------------------------------------------------

    @property
    def has_private_key(self) -> bool:
        return self._private_key is not None

    @property
    def has_public_key(self) -> bool:
        return self._public_key is not None

    @property
    def curve(self) -> Optional[str]:
        """Curve name of the loaded private key, else of the public key."""
        key = self._private_key or self._public_key
        return curve_name(key.curve) if key is not None else None

    @property
    def signature(self) -> Optional[Signature]:
        return self._signature

    @staticmethod
    def to_nid(curve_name: str) -> ec.EllipticCurve:
        """Resolve a curve name; raises UnsupportedCurveError."""
        return to_nid(curve_name)

    # -- keys -------------------------------------------------------------

    def generate_keys(
        self,
        public_key_path: PathLike,
        private_key_path: PathLike,
        curve_name: str,
        activate: bool = False,
    ) -> None:
        """
        Generate a key pair and write it to two PEM files.

        The public key is written as SubjectPublicKeyInfo, the private key as
        an unencrypted "EC PRIVATE KEY". Existing files are overwritten.

        Args:
            public_key_path: Destination of the public key
            private_key_path: Destination of the private key
            curve_name: "secp256k1" or "brainpool256r1"
            activate: Also make the new pair the active signing and
                verification keys

        Raises:
            UnsupportedCurveError, KeyGenerationError, KeyValidationError,
            KeyIOError
        """
        self._check_open()
        curve = to_nid(curve_name)

        try:
            private_key = ec.generate_private_key(curve)
        except (ValueError, UnsupportedAlgorithm) as e:
            logger.error(f"Key generation on {curve_name} failed: {e}")
            raise KeyGenerationError(f"Key generation on {curve_name} failed", cause=e) from e

        validate_private_key(private_key)
        public_key = private_key.public_key()

        public_pem = public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        private_pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        )

        mode = self.config.private_key_mode if self.config else 0o600
        self._write_file(public_key_path, public_pem)
        self._write_file(private_key_path, private_pem, mode=mode)

        logger.info(f"Generated {curve_name} key pair: {public_key_path}, {private_key_path}")

        if activate:
            self._private_key = private_key
            self._public_key = public_key

    @staticmethod
    def _write_file(path: PathLike, data: bytes, mode: Optional[int] = None) -> None:
        try:
            with open(path, "wb") as f:
                f.write(data)
            if mode is not None:
                Path(path).chmod(mode)
        except OSError as e:
            raise KeyIOError(f"Cannot write key file {path}: {e.strerror}", path=path, cause=e) from e

    def load_pubkey(self, path: PathLike) -> None:
        """
        Load a PEM public key as the active verification key.

        Raises:
            KeyIOError, ParseError, UnsupportedCurveError, KeyValidationError
        """
        self._check_open()
        try:
            with open(path, "rb") as f:
                pem = f.read()
        except OSError as e:
            raise KeyIOError(f"Cannot read public key {path}: {e.strerror}", path=path, cause=e) from e

        try:
            key = serialization.load_pem_public_key(pem)
        except (ValueError, UnsupportedAlgorithm) as e:
            logger.warning(f"Rejected public key {path}: {e}")
            raise ParseError(f"Invalid PEM public key in {path}", cause=e) from e

        if not isinstance(key, ec.EllipticCurvePublicKey):
            raise ParseError(f"{path} does not hold an EC public key")

        validate_public_key(key)

        self._public_key = key
        logger.debug(f"Loaded {curve_name(key.curve)} public key from {path}")

    def load_privkey(self, path: PathLike) -> None:
        """
        Load an unencrypted PEM private key as the active signing key.

        The key is validated before it replaces the current one; an invalid
        key raises KeyValidationError and leaves the signer unchanged.

        Raises:
            KeyIOError, ParseError, UnsupportedCurveError, KeyValidationError
        """
        self._check_open()
        try:
            buf = SensitiveBuffer.read(path)
        except OSError as e:
            raise KeyIOError(f"Cannot read private key {path}: {e.strerror}", path=path, cause=e) from e

        with buf:
            try:
                key = serialization.load_pem_private_key(buf.view, password=None)
            except TypeError as e:
                # Raised for encrypted keys when no password is given
                raise ParseError(f"Encrypted private keys are not supported: {path}", cause=e) from e
            except (ValueError, UnsupportedAlgorithm) as e:
                logger.warning(f"Rejected private key {path}: {e}")
                raise ParseError(f"Invalid PEM private key in {path}", cause=e) from e

        if not isinstance(key, ec.EllipticCurvePrivateKey):
            raise ParseError(f"{path} does not hold an EC private key")

        try:
            validate_private_key(key)
        except KeyValidationError as e:
            logger.warning(f"Private key {path} failed validation: {e.message}")
            raise

        self._private_key = key
        logger.debug(f"Loaded {curve_name(key.curve)} private key from {path}")

    # -- sign / verify ----------------------------------------------------

    def sign(self, message: bytes, digest: str = "sha256") -> Signature:
        """
        Sign a message with the loaded private key.

        Args:
            message: Bytes to sign
            digest: "sha256" or "sha1"

        Returns:
            The new Signature, also kept as the signer's current signature

        Raises:
            NoKeyLoadedError, InvalidInputError, UnsupportedDigestError,
            SigningError
        """
        self._check_open()
        if self._private_key is None:
            raise NoKeyLoadedError("private")

        message = _require_bytes(message, "message")
        algorithm = get_digest(digest)

        try:
            der = self._private_key.sign(message, ec.ECDSA(algorithm))
            signature = Signature(data=der)
        except (ValueError, UnsupportedAlgorithm, ECSignError) as e:
            logger.error(f"Signing with {digest} failed: {e}")
            raise SigningError(f"Signing with {digest} failed", cause=e) from e

        self._signature = signature
        return signature

    def verify(
        self,
        message: bytes,
        signature: SignatureLike,
        digest: str = "sha256",
    ) -> bool:
        """
        Verify a signature with the loaded public key.

        Args:
            message: The signed bytes
            signature: DER-encoded ECDSA signature (bytes or Signature)
            digest: "sha256" or "sha1"

        Returns:
            True if the signature matches, False otherwise

        Raises:
            NoKeyLoadedError, InvalidInputError (also for a signature that
            is not DER-encoded), UnsupportedDigestError
        """
        self._check_open()
        if self._public_key is None:
            raise NoKeyLoadedError("public")

        message = _require_bytes(message, "message")
        if isinstance(signature, Signature):
            sig_bytes = signature.data
        else:
            sig_bytes = _require_bytes(signature, "signature")

        if not message:
            raise InvalidInputError("message is empty")
        if not sig_bytes:
            raise InvalidInputError("signature is empty")

        algorithm = get_digest(digest)

        try:
            decode_dss_signature(sig_bytes)
        except ValueError as e:
            raise InvalidInputError("signature is not a DER-encoded ECDSA signature", cause=e) from e

        try:
            self._public_key.verify(sig_bytes, message, ec.ECDSA(algorithm))
        except InvalidSignature:
            logger.debug("Signature mismatch")
            return False
        return True

    # -- signature text ---------------------------------------------------

    def dump_signature(self) -> str:
        """Current signature as colon-separated decimal text ("" if none)."""
        if self._signature is None:
            return ""
        return self._signature.dump()

    def set_signature(self, payload: str) -> Signature:
        """
        Replace the current signature with one parsed from text.

        Raises:
            ParseError: On malformed text; the current signature is kept
        """
        self._check_open()
        signature = Signature.parse(payload)
        self._signature = signature
        return signature

    def __repr__(self) -> str:
        return (
            f"ECCSigner(curve={self.curve!r}, private={self.has_private_key}, "
            f"public={self.has_public_key}, closed={self._closed})"
        )
