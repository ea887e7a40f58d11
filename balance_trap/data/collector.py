from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Union

from web3 import Web3

from ..core.errors import CollectionError
from ..core.snapshot import encode_snapshot

if TYPE_CHECKING:
    from ..config import AppConfig


logger = logging.getLogger(__name__)

BlockId = Union[int, str]


class BalanceCollector:
    """Read the monitored account's native balance and encode it as a snapshot.

    Reads are side-effect free. Any failure of the underlying RPC call is
    raised as :class:`CollectionError`; a snapshot is never fabricated.
    """

    def __init__(self, w3: Any, address: str) -> None:
        self.w3 = w3
        self.address = Web3.to_checksum_address(address)

    @classmethod
    def from_config(cls, config: AppConfig) -> "BalanceCollector":
        provider = Web3.HTTPProvider(
            config.env.RPC_URL,
            request_kwargs={"timeout": config.runtime.network_timeout_sec},
        )
        return cls(Web3(provider), config.runtime.trap.monitored_address)

    def latest_block(self) -> int:
        try:
            block = self.w3.eth.block_number
        except Exception as exc:  # noqa: BLE001
            raise CollectionError(f"could not read block number: {exc}") from exc
        return self._as_int(block, "block number")

    def read_balance(self, block: BlockId = "latest") -> int:
        try:
            balance = self.w3.eth.get_balance(self.address, block_identifier=block)
        except Exception as exc:  # noqa: BLE001
            raise CollectionError(
                f"could not read balance of {self.address} at {block}: {exc}"
            ) from exc
        return self._as_int(balance, "balance")

    def collect(self) -> bytes:
        return self.collect_at("latest")

    def collect_at(self, block: BlockId) -> bytes:
        balance = self.read_balance(block)
        logger.debug("collected balance", extra={"address": self.address, "block": block, "balance_wei": balance})
        return encode_snapshot(balance)

    @staticmethod
    def _as_int(value: Any, what: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise CollectionError(f"RPC returned an invalid {what}: {value!r}")
        return int(value)
