"""Host-side collaborators: the scheduler loop and the response sinks.

The runner owns the bounded history and the polling cadence; the core only
sees the snapshots it is handed.
"""
