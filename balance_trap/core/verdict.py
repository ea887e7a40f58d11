from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError


INSUFFICIENT_DATA = "insufficient data"
THRESHOLD_EXCEEDED = "Balance change exceeded threshold"


def encode_payload(message: str) -> bytes:
    """ABI-encode a message as the single ``string`` argument of a response call."""
    return encode(["string"], [message])


def decode_payload(payload: bytes) -> str:
    if not payload:
        return ""
    try:
        (message,) = decode(["string"], bytes(payload))
    except DecodingError as exc:
        raise ValueError(f"payload is not an ABI-encoded string: {exc}") from exc
    return message


@dataclass(frozen=True)
class Verdict:
    """Outcome of one evaluation: whether to respond, plus the payload.

    A negative verdict carries either an empty payload (no trigger) or an
    informational message (insufficient history). A positive verdict always
    carries the trigger message.
    """

    should_respond: bool
    payload: bytes = b""

    @classmethod
    def respond(cls, message: str) -> "Verdict":
        return cls(True, encode_payload(message))

    @classmethod
    def skip(cls, message: Union[str, None] = None) -> "Verdict":
        return cls(False, encode_payload(message) if message else b"")

    @property
    def message(self) -> str:
        return decode_payload(self.payload)

    def __iter__(self) -> Iterator[Union[bool, bytes]]:
        yield self.should_respond
        yield self.payload
