"""
ecsign - EC key generation, ECDSA signing and verification.

Wraps the EC primitives of the `cryptography` package behind a small,
stateful signer with PEM key files and a text form for signatures.

Quick Start:
    from ecsign import ECCSigner

    with ECCSigner() as signer:
        signer.generate_keys("pub.pem", "priv.pem", "secp256k1")
        signer.load_privkey("priv.pem")
        signer.load_pubkey("pub.pem")

        signature = signer.sign(b"hello", "sha256")
        assert signer.verify(b"hello", signature, "sha256")

        text = signer.dump_signature()
        assert signer.set_signature(text) == signature

Supported:
    - Curves: secp256k1, brainpool256r1
    - Digests: sha256, sha1
"""

from .algorithms import (
    MAX_SIGNATURE_SIZE,
    SUPPORTED_CURVES,
    SUPPORTED_DIGESTS,
    get_digest,
    to_nid,
)
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
    UnsupportedCurveError,
    UnsupportedDigestError,
)
from .signature import Signature
from .signer import ECCSigner

__version__ = "1.0.0"

__all__ = [
    # Core
    "ECCSigner",
    "Signature",
    "ECSignConfig",
    "to_nid",
    "get_digest",
    "SUPPORTED_CURVES",
    "SUPPORTED_DIGESTS",
    "MAX_SIGNATURE_SIZE",
    # Exceptions
    "ECSignError",
    "KeyIOError",
    "ParseError",
    "KeyValidationError",
    "KeyGenerationError",
    "SigningError",
    "UnsupportedCurveError",
    "UnsupportedDigestError",
    "NoKeyLoadedError",
    "InvalidInputError",
    # Version
    "__version__",
]
