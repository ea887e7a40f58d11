from __future__ import annotations

import pytest

from balance_trap.core.buffers import HistoryBuffer


def test_history_buffer_evicts_oldest() -> None:
    buf = HistoryBuffer(capacity=3)
    for block in range(1, 5):
        buf.add(block, bytes([block]))
    assert buf.size() == 3
    assert [cp.block for cp in buf.checkpoints()] == [2, 3, 4]


def test_newest_first_order_and_limit() -> None:
    buf = HistoryBuffer(capacity=5)
    buf.add(10, b"a")
    buf.add(11, b"b")
    buf.add(12, b"c")
    assert buf.newest_first() == [b"c", b"b", b"a"]
    assert buf.newest_first(limit=2) == [b"c", b"b"]
    assert buf.latest_block() == 12


def test_same_block_recorded_once() -> None:
    buf = HistoryBuffer(capacity=5)
    assert buf.add(7, b"x") is True
    assert buf.add(7, b"y") is False
    assert buf.newest_first() == [b"x"]


def test_empty_and_clear() -> None:
    buf = HistoryBuffer(capacity=2)
    assert buf.latest_block() is None
    assert buf.newest_first() == []
    buf.add(1, b"x")
    buf.clear()
    assert buf.size() == 0


def test_capacity_must_hold_a_pair() -> None:
    with pytest.raises(ValueError):
        HistoryBuffer(capacity=1)
