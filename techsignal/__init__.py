"""Technical indicator engine for crypto assets."""

__version__ = "0.1.0"
