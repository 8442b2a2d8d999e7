"""Token and cost benchmarks for browser automation approaches."""

__version__ = "0.1.0"
