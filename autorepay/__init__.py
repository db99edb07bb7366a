"""Self-repaying collateral vault: accounting engine, keeper and CLI."""

__version__ = "0.1.0"
