"""USGS FDSN event service connector."""

from .config import BASE_URL, QUERY_PATH, RECORD_CEILING
from .rest.fetcher import ChunkFetcher

__all__ = ["BASE_URL", "QUERY_PATH", "RECORD_CEILING", "ChunkFetcher"]
