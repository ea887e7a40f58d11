"""Native-balance anomaly trap.

Samples one account's native-currency balance once per block and raises an
alert when two consecutive samples differ by at least a fixed threshold. The
core (snapshot codec, strategies, decider) is pure; the host runner owns the
history window, the web3 collector and the response sinks.
"""

__all__ = [
    "config",
    "core",
    "data",
    "host",
    "utils",
]
