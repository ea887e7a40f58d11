from __future__ import annotations


class TrapError(Exception):
    """Base class for failures the host must see as distinct from a verdict."""


class SnapshotDecodeError(TrapError, ValueError):
    """A snapshot does not match the fixed-width encoding."""


class CollectionError(TrapError, RuntimeError):
    """The monitored quantity could not be read."""
