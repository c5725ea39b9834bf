"""
Curve and digest registries.

Only two named curves and two digests are accepted. Anything else is a
configuration error reported through UnsupportedCurveError or
UnsupportedDigestError.
"""

from typing import NamedTuple

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from .exceptions import UnsupportedCurveError, UnsupportedDigestError


class CurveSpec(NamedTuple):
    """Public curve name bound to its library curve class and group order."""

    name: str
    curve_class: type
    order: int


SUPPORTED_CURVES: dict[str, CurveSpec] = {
    "secp256k1": CurveSpec(
        "secp256k1",
        ec.SECP256K1,
        0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141,
    ),
    "brainpool256r1": CurveSpec(
        "brainpool256r1",
        ec.BrainpoolP256R1,
        0xA9FB57DBA1EEA9BC3E660A909D838D718C397AA3B561A6F7901E0E82974856A7,
    ),
}

SUPPORTED_DIGESTS: dict[str, type] = {
    "sha256": hashes.SHA256,
    "sha1": hashes.SHA1,
}

# DER SEQUENCE of two INTEGERs, each up to 33 bytes for a 256-bit order
MAX_SIGNATURE_SIZE = 72


def to_nid(curve_name: str) -> ec.EllipticCurve:
    """
    Resolve a public curve name to a library curve instance.

    Args:
        curve_name: One of "secp256k1" or "brainpool256r1"

    Returns:
        A fresh EllipticCurve instance

    Raises:
        UnsupportedCurveError: If the name is not supported
    """
    spec = SUPPORTED_CURVES.get(curve_name) if isinstance(curve_name, str) else None
    if spec is None:
        raise UnsupportedCurveError(str(curve_name))
    return spec.curve_class()


def curve_spec(curve: ec.EllipticCurve) -> CurveSpec:
    """Find the registry entry for a loaded key's curve."""
    for spec in SUPPORTED_CURVES.values():
        if isinstance(curve, spec.curve_class):
            return spec
    raise UnsupportedCurveError(getattr(curve, "name", type(curve).__name__))


def curve_name(curve: ec.EllipticCurve) -> str:
    """Map a library curve back to its public name."""
    return curve_spec(curve).name


def get_digest(digest_name: str) -> hashes.HashAlgorithm:
    """Resolve a digest name ("sha256" or "sha1") to a hash algorithm."""
    digest_cls = SUPPORTED_DIGESTS.get(digest_name) if isinstance(digest_name, str) else None
    if digest_cls is None:
        raise UnsupportedDigestError(str(digest_name))
    return digest_cls()
