"""
Best-effort wiping of private key material read from disk.

Python may keep copies of data we cannot reach, so this only shortens the
window in which PEM text of a private key sits in memory.
"""

import ctypes
import logging

logger = logging.getLogger(__name__)


def wipe(buffer: bytes | bytearray | memoryview) -> None:
    """
    Zero a mutable buffer in place.

    Args:
        buffer: bytearray or writable memoryview. Immutable bytes are left
            untouched and a warning is logged.
    """
    if isinstance(buffer, bytes):
        logger.warning("Cannot wipe immutable bytes - read key files into a bytearray")
        return

    if len(buffer) == 0:
        return

    try:
        addr = ctypes.addressof(ctypes.c_char.from_buffer(buffer))
        ctypes.memset(addr, 0, len(buffer))
    except (TypeError, ValueError) as e:
        for i in range(len(buffer)):
            buffer[i] = 0
        logger.debug(f"Wiped buffer at Python level: {e}")


class SensitiveBuffer:
    """
    Owns a bytearray that is wiped when the context exits.

    Usage:
        with SensitiveBuffer.read(path) as buf:
            key = load_pem_private_key(buf.view, password=None)
    """

    def __init__(self, data: bytes | bytearray = b""):
        self._data = bytearray(data)
        self._wiped = False

    @classmethod
    def read(cls, path) -> "SensitiveBuffer":
        """Read a whole file into a new buffer. OSError propagates."""
        buf = cls()
        with open(path, "rb") as f:
            buf._data = bytearray(f.read())
        return buf

    @property
    def view(self) -> memoryview:
        if self._wiped:
            raise ValueError("Buffer has been wiped")
        return memoryview(self._data)

    @property
    def wiped(self) -> bool:
        return self._wiped

    def wipe(self) -> None:
        if not self._wiped:
            wipe(self._data)
            self._wiped = True

    def __enter__(self) -> "SensitiveBuffer":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.wipe()

    def __len__(self) -> int:
        return len(self._data)
