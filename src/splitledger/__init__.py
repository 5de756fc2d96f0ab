"""Splitledger - group expense splitting, balances and debt simplification."""

__version__ = "0.1.0"
