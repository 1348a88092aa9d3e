"""USGS event query endpoint definition and adapter.

One request covers an inclusive date range and a set of magnitude/depth
bounds. The adapter enforces the record ceiling: a response that reports at
least RECORD_CEILING records is rejected even though the request succeeded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from quakemap.data.connectors.usgs.config import QUERY_PATH, RECORD_CEILING, RESPONSE_FORMAT
from quakemap.data.connectors.usgs.rest.schemas import UsgsFeature, UsgsFeatureCollection
from quakemap.data.core import TooManyRecordsError
from quakemap.data.models import EventRecord, FilterPredicate
from quakemap.data.runtime.rest import ResponseAdapter, RestEndpointSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventPage:
    """Parsed query response."""

    records: list[EventRecord]
    reported_count: int | None = None


def build_query(params: dict[str, Any]) -> dict[str, Any]:
    """Build query parameters for the event query endpoint."""
    filters: FilterPredicate = params["filters"]
    return {
        "format": RESPONSE_FORMAT,
        "starttime": params["start_date"].isoformat(),
        "endtime": params["end_date"].isoformat(),
        "minmagnitude": filters.min_magnitude,
        "maxmagnitude": filters.max_magnitude,
        "maxdepth": filters.max_depth,
    }


# Endpoint specification
SPEC = RestEndpointSpec(
    id="event_query",
    build_path=lambda _params: QUERY_PATH,
    build_query=build_query,
)


def _to_record(feature: UsgsFeature) -> EventRecord:
    longitude, latitude, depth = feature.geometry.coordinates[:3]
    return EventRecord(
        longitude=longitude,
        latitude=latitude,
        depth=depth,
        magnitude=feature.properties.mag,
        place=feature.properties.place,
        timestamp_ms=feature.properties.time,
        tsunami=feature.properties.tsunami == 1,
        event_id=feature.id,
    )


class Adapter(ResponseAdapter):
    """Adapter for parsing a GeoJSON query response into EventRecords."""

    def __init__(self, ceiling: int = RECORD_CEILING) -> None:
        self._ceiling = ceiling

    def parse(self, response: Any, params: dict[str, Any]) -> EventPage:
        """Parse a query response.

        Args:
            response: Decoded GeoJSON FeatureCollection
            params: Request parameters

        Returns:
            EventPage with every feature as a record, in payload order; events
            the service reports without a magnitude keep magnitude=None

        Raises:
            TooManyRecordsError: If metadata.count is at or above the ceiling
            pydantic.ValidationError: If the payload is malformed
        """
        collection = UsgsFeatureCollection.model_validate(response)
        count = collection.metadata.count
        if count is not None and count >= self._ceiling:
            raise TooManyRecordsError(count, self._ceiling)

        records: list[EventRecord] = []
        for feature in collection.features:
            if feature.properties.mag is None:
                logger.debug(f"Event {feature.id!r} has no magnitude")
            records.append(_to_record(feature))
        return EventPage(records=records, reported_count=count)
