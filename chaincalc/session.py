# chaincalc/session.py

from __future__ import annotations

import threading
from typing import Optional


class Session:
    """Single-slot store for the last successfully computed result.

    ``lock`` is re-entrant so a caller can hold it across a whole
    read-evaluate-store sequence while the evaluator reads ``last_result``.
    """

    def __init__(self, last_result: Optional[float] = None):
        self.lock = threading.RLock()
        self._last_result = last_result

    @property
    def last_result(self) -> Optional[float]:
        with self.lock:
            return self._last_result

    def store(self, value: float) -> None:
        with self.lock:
            self._last_result = value

    def clear(self) -> None:
        with self.lock:
            self._last_result = None

    def __repr__(self) -> str:
        return f"Session(last_result={self.last_result!r})"
