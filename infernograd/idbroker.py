"""Process-wide source of sequential integer identifiers."""

from __future__ import annotations

import threading
from typing import ClassVar


class IDBroker:
    """Hands out increasing integer ids, starting from zero."""

    _next_id: ClassVar[int] = 0
    _lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def gen_id(cls) -> int:
        """Return the next id."""
        with cls._lock:
            value = cls._next_id
            cls._next_id += 1
            return value

    @classmethod
    def reset(cls, start: int = 0) -> None:
        """Make the next call to ``gen_id`` return ``start``."""
        with cls._lock:
            cls._next_id = start