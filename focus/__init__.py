"""focus: a Dash dashboard for token analytics, transactions and wallet statistics."""

__version__ = "0.1.0"
