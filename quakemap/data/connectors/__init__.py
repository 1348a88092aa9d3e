"""Connectors for remote event services."""

from .usgs import ChunkFetcher

__all__ = ["ChunkFetcher"]
