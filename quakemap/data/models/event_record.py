"""Seismic event record model."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class EventRecord(BaseModel):
    """Single seismic event as returned by the event service."""

    longitude: float = Field(..., ge=-180, le=180)
    latitude: float = Field(..., ge=-90, le=90)
    depth: float
    magnitude: float | None = None
    place: str | None = None
    timestamp_ms: int
    tsunami: bool = False
    event_id: str | None = None

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @property
    def time(self) -> datetime:
        """Origin time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.timestamp_ms / 1000, tz=UTC)

    @property
    def coordinates(self) -> tuple[float, float, float]:
        """(longitude, latitude, depth), GeoJSON order."""
        return (self.longitude, self.latitude, self.depth)
