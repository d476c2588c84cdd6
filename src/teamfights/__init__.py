"""Batch creation of recurring LMAO team battles."""

__version__ = "1.0.0"
