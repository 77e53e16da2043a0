from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from lockstake.runtime.errors import Reentrancy


class CallGuard:
    """Single serialization point for an engine.

    - Calls from different threads queue on the lock and run one at a time.
    - A call that re-enters while another is in progress on the same thread
      (e.g. a token ledger calling back into the engine) fails with Reentrancy.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._entered = False

    @property
    def entered(self) -> bool:
        return self._entered

    @contextmanager
    def guarded(self, op: str) -> Iterator[None]:
        with self._lock:
            if self._entered:
                raise Reentrancy(details={"op": op})
            self._entered = True
            try:
                yield
            finally:
                self._entered = False

    @contextmanager
    def serialized(self) -> Iterator[None]:
        """Serialize a read without marking the engine as entered."""
        with self._lock:
            yield
