"""
Process-wide crypto library lifecycle.

The OpenSSL backend is shared by every ECCSigner in the process. Signers
call acquire() when constructed and release() when closed; the first
acquire initializes the shared state and the last release tears it down.
All transitions happen under one lock.
"""

import logging
import os
import threading
from typing import Optional

from cryptography.hazmat.backends import default_backend

from .algorithms import SUPPORTED_CURVES

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_refcount = 0
_openssl_version: Optional[str] = None
_curve_support: dict[str, bool] = {}


def _initialize() -> None:
    """Load the backend, record its version and probe curve support."""
    global _openssl_version

    backend = default_backend()
    _openssl_version = backend.openssl_version_text()

    for name, spec in SUPPORTED_CURVES.items():
        supported = backend.elliptic_curve_supported(spec.curve_class())
        _curve_support[name] = supported
        if not supported:
            logger.warning(f"Curve {name} is not available in {_openssl_version}")

    # Draw once so an unseeded RNG fails here rather than mid-operation
    os.urandom(32)

    logger.debug(f"Crypto backend initialized: {_openssl_version}")


def _teardown() -> None:
    global _openssl_version

    _openssl_version = None
    _curve_support.clear()
    logger.debug("Crypto backend released")


def acquire() -> int:
    """
    Take a reference on the shared backend, initializing it on first use.

    Returns:
        The reference count after acquiring
    """
    global _refcount

    with _lock:
        if _refcount == 0:
            _initialize()
        _refcount += 1
        return _refcount


def release() -> int:
    """
    Drop a reference on the shared backend. Never raises.

    Returns:
        The reference count after releasing
    """
    global _refcount

    with _lock:
        if _refcount == 0:
            logger.warning("Backend release() without matching acquire()")
            return 0
        _refcount -= 1
        if _refcount == 0:
            try:
                _teardown()
            except Exception as e:
                logger.error(f"Backend teardown failed: {e}")
        return _refcount


def refcount() -> int:
    """Current number of live references."""
    with _lock:
        return _refcount


def is_initialized() -> bool:
    """True while at least one reference is held."""
    with _lock:
        return _refcount > 0 and _openssl_version is not None


def openssl_version() -> Optional[str]:
    """OpenSSL version text of the active backend, or None when released."""
    with _lock:
        return _openssl_version


def curve_available(name: str) -> bool:
    """Whether the linked OpenSSL supports a registry curve."""
    with _lock:
        return _curve_support.get(name, False)
