"""Shared USGS event service constants.

This module centralizes the endpoint location and service limits used by the
REST endpoint definition and the chunk fetcher.
"""

from __future__ import annotations

BASE_URL = "https://earthquake.usgs.gov"
QUERY_PATH = "/fdsnws/event/1/query"

# The service refuses or truncates result sets this large; a response that
# reports at least this many records counts as a failed chunk.
RECORD_CEILING = 15000

RESPONSE_FORMAT = "geojson"

DEFAULT_TIMEOUT = 30.0
