"""Building blocks for structured logging: sinks, buffered writers, clocks, stack traces and test helpers."""

__version__ = "0.1.0"