"""
Tests for the curve and digest registries.
"""

import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from ecsign.algorithms import (
    SUPPORTED_CURVES,
    curve_name,
    get_digest,
    to_nid,
)
from ecsign.exceptions import UnsupportedCurveError, UnsupportedDigestError


class TestCurves:
    """Tests for curve lookup."""

    def test_secp256k1(self):
        assert isinstance(to_nid("secp256k1"), ec.SECP256K1)

    def test_brainpool(self):
        assert isinstance(to_nid("brainpool256r1"), ec.BrainpoolP256R1)

    @pytest.mark.parametrize("name", ["nist-p256", "SECP256K1", "brainpoolP256r1", "", None, 7])
    def test_unsupported(self, name):
        """Test that anything outside the closed set is rejected."""
        with pytest.raises(UnsupportedCurveError) as exc_info:
            to_nid(name)

        assert exc_info.value.code == "UNSUPPORTED_CURVE"

    def test_reverse_lookup(self):
        """Test mapping library curves back to public names."""
        assert curve_name(ec.SECP256K1()) == "secp256k1"
        assert curve_name(ec.BrainpoolP256R1()) == "brainpool256r1"

        with pytest.raises(UnsupportedCurveError):
            curve_name(ec.SECP384R1())

    def test_orders_match_curves(self):
        """Test that registry orders are 256-bit values."""
        for spec in SUPPORTED_CURVES.values():
            assert spec.order.bit_length() == 256


class TestDigests:
    """Tests for digest lookup."""

    def test_sha256(self):
        assert isinstance(get_digest("sha256"), hashes.SHA256)

    def test_sha1(self):
        assert isinstance(get_digest("sha1"), hashes.SHA1)

    @pytest.mark.parametrize("name", ["md5", "sha512", "SHA256", ""])
    def test_unsupported(self, name):
        with pytest.raises(UnsupportedDigestError) as exc_info:
            get_digest(name)

        assert exc_info.value.details == {"digest": name}
