"""Utilities for Secret Rotator."""

from .logging import setup_logging

__all__ = ["setup_logging"]
