"""High-level clients."""

from .quake_feed import QuakeFeed

__all__ = ["QuakeFeed"]
