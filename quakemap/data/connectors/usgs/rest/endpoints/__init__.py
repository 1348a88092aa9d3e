"""USGS REST endpoint definitions."""

from .event_query import SPEC, Adapter, EventPage, build_query

__all__ = ["SPEC", "Adapter", "EventPage", "build_query"]
