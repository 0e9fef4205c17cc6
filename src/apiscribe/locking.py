# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""A shared-read / exclusive-write lock for registries mutated at import time."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

# ###############
# Public Interface
# ###############


class ReadWriteLock:
    """Allows any number of concurrent readers or a single writer.

    Writers are preferred: once a writer is waiting, new readers block until
    it has finished.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        """Hold the lock in shared mode for the duration of the block."""
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        """Hold the lock in exclusive mode for the duration of the block."""
        with self._cond:
            self._waiting_writers += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()
