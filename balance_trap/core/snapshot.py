from __future__ import annotations

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError

from .errors import SnapshotDecodeError


SNAPSHOT_ENCODING = "abi-uint256/v1"
SNAPSHOT_WIDTH = 32
MAX_VALUE = 2**256 - 1


def encode_snapshot(value: int) -> bytes:
    """Encode a balance as a 32-byte ABI ``uint256`` word."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"snapshot value must be an int, got {type(value).__name__}")
    if value < 0 or value > MAX_VALUE:
        raise ValueError(f"snapshot value out of uint256 range: {value}")
    return encode(["uint256"], [value])


def decode_snapshot(data: bytes) -> int:
    """Decode a snapshot produced by :func:`encode_snapshot`.

    Anything that is not exactly one 32-byte word raises
    :class:`SnapshotDecodeError`; no default value is ever substituted.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise SnapshotDecodeError(f"snapshot must be bytes, got {type(data).__name__}")
    raw = bytes(data)
    if len(raw) != SNAPSHOT_WIDTH:
        raise SnapshotDecodeError(
            f"snapshot must be {SNAPSHOT_WIDTH} bytes ({SNAPSHOT_ENCODING}), got {len(raw)}"
        )
    try:
        (value,) = decode(["uint256"], raw)
    except DecodingError as exc:
        raise SnapshotDecodeError(f"undecodable snapshot: {exc}") from exc
    return value
