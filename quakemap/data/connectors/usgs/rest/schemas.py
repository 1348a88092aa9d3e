"""USGS event service raw response schemas.

This module defines Pydantic models for the GeoJSON FeatureCollection the
event service returns, before conversion to domain models. Field names match
the service payload; unknown fields are ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class UsgsMetadata(BaseModel):
    """Collection metadata."""

    count: int | None = None
    status: int | None = None
    title: str | None = None


class UsgsGeometry(BaseModel):
    """Point geometry: [longitude, latitude, depth]."""

    coordinates: list[float] = Field(..., min_length=3)


class UsgsProperties(BaseModel):
    """Subset of event properties the library consumes."""

    mag: float | None = None
    place: str | None = None
    time: int
    tsunami: int = 0


class UsgsFeature(BaseModel):
    """Single event feature."""

    id: str | None = None
    geometry: UsgsGeometry
    properties: UsgsProperties


class UsgsFeatureCollection(BaseModel):
    """Top-level query response."""

    metadata: UsgsMetadata = Field(default_factory=UsgsMetadata)
    features: list[UsgsFeature] = Field(default_factory=list)
