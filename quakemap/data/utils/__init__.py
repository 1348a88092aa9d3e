"""Utility functions."""

from .callbacks import Callback, invoke_callback

__all__ = ["Callback", "invoke_callback"]
