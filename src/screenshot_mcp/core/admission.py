#!/usr/bin/env python3
"""
Admission Gate for Screenshot Captures

A hard concurrency ceiling: callers over the limit are rejected immediately
instead of queued. The check and the increment happen under one lock so the
ceiling holds whether captures interleave on an event loop or run on threads.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- gate = AdmissionGate(max_concurrent=2); gate.try_acquire() three times

Expected output:
- True, True, False; gate.active == 2
"""

import threading

from loguru import logger


class AdmissionGate:
    """
    Counter of in-flight captures bounded by ``max_concurrent``.

    Args:
        max_concurrent: Maximum number of admitted captures at once
    """

    def __init__(self, max_concurrent: int):
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, got {max_concurrent}")
        self.max_concurrent = max_concurrent
        self._active = 0
        self._lock = threading.Lock()

    @property
    def active(self) -> int:
        return self._active

    def try_acquire(self) -> bool:
        """Admit one capture if a slot is free. Never blocks on capacity."""
        with self._lock:
            if self._active >= self.max_concurrent:
                logger.warning(
                    f"Admission rejected: {self._active}/{self.max_concurrent} captures in flight"
                )
                return False
            self._active += 1
            return True

    def release(self) -> None:
        """Give back a slot taken by a successful try_acquire()."""
        with self._lock:
            if self._active <= 0:
                raise RuntimeError("AdmissionGate.release() called without a matching acquire")
            self._active -= 1
