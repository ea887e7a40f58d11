"""Pure primitives: snapshot codec, verdicts, evaluation strategies, decider.

Nothing here holds state between calls. The history a decision needs is
always passed in, newest first, by the host.
"""

from .decider import Decider, should_respond
from .errors import CollectionError, SnapshotDecodeError, TrapError
from .snapshot import decode_snapshot, encode_snapshot
from .verdict import Verdict

__all__ = [
    "CollectionError",
    "Decider",
    "SnapshotDecodeError",
    "TrapError",
    "Verdict",
    "decode_snapshot",
    "encode_snapshot",
    "should_respond",
]
