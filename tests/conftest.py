from __future__ import annotations

from typing import Dict, Optional, Union

import pytest

from balance_trap.config import AppConfig, RuntimeConfig, TrapConfig


ADDRESS = "0x00000000000000000000000000000000000000aa"


class FakeEth:
    """Minimal stand-in for ``w3.eth`` backed by a block -> balance table."""

    def __init__(self, balances: Dict[int, int], head: Optional[int] = None) -> None:
        self.balances = dict(balances)
        self.head = head if head is not None else max(balances)
        self.fail_reads = 0
        self.calls = 0

    @property
    def block_number(self) -> int:
        return self.head

    def get_balance(self, address: str, block_identifier: Union[int, str] = "latest") -> int:
        self.calls += 1
        if self.fail_reads > 0:
            self.fail_reads -= 1
            raise ConnectionError("rpc unreachable")
        block = self.head if block_identifier == "latest" else block_identifier
        return self.balances[block]


class FakeW3:
    def __init__(self, balances: Dict[int, int], head: Optional[int] = None) -> None:
        self.eth = FakeEth(balances, head)


def make_config(threshold: int = 10, **runtime) -> AppConfig:
    runtime.setdefault("max_retries", 2)
    runtime.setdefault("backoff_base_sec", 0.0)
    runtime.setdefault("backoff_cap_sec", 0.0)
    rt = RuntimeConfig(
        trap=TrapConfig(monitored_address=ADDRESS, threshold_wei=threshold),
        **runtime,
    )
    return AppConfig(env={"RPC_URL": "http://rpc.invalid", "WEBHOOK_URL": None}, runtime=rt)


@pytest.fixture
def config() -> AppConfig:
    return make_config()
