"""
Holder for the active key pair.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hotcert.common.rwlock import ReadWriteLock

if TYPE_CHECKING:
    from hotcert.loader import KeyPair


class KeyPairStore:
    """Publishes one immutable KeyPair to any number of concurrent readers."""

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._pair: KeyPair | None = None

    def get(self) -> KeyPair | None:
        """Return the active pair, or None if nothing has loaded yet."""
        with self._lock.read_locked():
            return self._pair

    def set(self, pair: KeyPair) -> None:
        """Replace the active pair. Holders of the previous pair keep it."""
        with self._lock.write_locked():
            self._pair = pair

    @property
    def loaded(self) -> bool:
        return self.get() is not None
