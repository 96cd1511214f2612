"""Tests for per-tag lock serialization."""

from __future__ import annotations

import threading
import time

from core.tag_locks import TagLockRegistry


def test_same_tag_is_serialized() -> None:
    registry = TagLockRegistry()
    entered = threading.Event()
    release = threading.Event()
    order: list[str] = []

    def first() -> None:
        with registry.hold("TAG1"):
            entered.set()
            release.wait(2)
            order.append("first")

    def second() -> None:
        entered.wait(2)
        with registry.hold("TAG1"):
            order.append("second")

    t1 = threading.Thread(target=first)
    t2 = threading.Thread(target=second)
    t1.start()
    t2.start()
    entered.wait(2)
    time.sleep(0.05)
    assert order == []

    release.set()
    t1.join(2)
    t2.join(2)
    assert order == ["first", "second"]


def test_distinct_tags_do_not_block_each_other() -> None:
    registry = TagLockRegistry()
    done = threading.Event()

    def other() -> None:
        with registry.hold("TAG2"):
            done.set()

    with registry.hold("TAG1"):
        worker = threading.Thread(target=other)
        worker.start()
        worker.join(1)
        assert done.is_set()


def test_locks_are_dropped_when_unused() -> None:
    registry = TagLockRegistry()
    with registry.hold("TAG1"):
        assert registry.active() == ["TAG1"]
    assert registry.active() == []


def test_lock_is_released_on_error() -> None:
    registry = TagLockRegistry()
    try:
        with registry.hold("TAG1"):
            raise ValueError("boom")
    except ValueError:
        pass
    assert registry.active() == []
    with registry.hold("TAG1"):
        pass
