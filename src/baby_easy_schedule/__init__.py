"""E.A.S.Y. baby routine scheduling service."""

__version__ = "0.1.0"
