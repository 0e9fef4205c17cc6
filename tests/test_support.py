# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the name helpers and the read/write lock."""

import threading

from apiscribe.locking import ReadWriteLock
from apiscribe.names import name_candidates, short_name

# ###############
# Names
# ###############


def test_short_name() -> None:
    assert short_name("workspace.Fee") == "Fee"
    assert short_name("a.b.Fee") == "Fee"
    assert short_name("Fee") == "Fee"


def test_name_candidates() -> None:
    """Qualified names fall back to their short name; bare names stand alone."""
    assert name_candidates("workspace.Fee") == ["workspace.Fee", "Fee"]
    assert name_candidates("Fee") == ["Fee"]


# ###############
# ReadWriteLock
# ###############


def test_readers_share_the_lock() -> None:
    """Two readers can hold the lock at the same time."""
    lock = ReadWriteLock()
    inside = threading.Event()
    release = threading.Event()

    def reader() -> None:
        with lock.read():
            inside.set()
            release.wait(timeout=5)

    thread = threading.Thread(target=reader)
    thread.start()
    assert inside.wait(timeout=5)
    with lock.read():
        entered = True
    release.set()
    thread.join(timeout=5)
    assert entered


def test_writer_waits_for_reader() -> None:
    """A writer does not enter while a reader holds the lock."""
    lock = ReadWriteLock()
    events: list[str] = []
    reading = threading.Event()

    def writer() -> None:
        reading.wait(timeout=5)
        with lock.write():
            events.append("write")

    thread = threading.Thread(target=writer)
    thread.start()
    with lock.read():
        reading.set()
        # Give the writer a chance to block on the held read lock.
        thread.join(timeout=0.1)
        events.append("read-done")
    thread.join(timeout=5)

    assert events == ["read-done", "write"]


def test_lock_released_on_error() -> None:
    """An exception inside the block still releases the lock."""
    lock = ReadWriteLock()
    try:
        with lock.write():
            raise ValueError("boom")
    except ValueError:
        pass
    with lock.write():
        pass
