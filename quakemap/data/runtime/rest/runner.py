"""REST request runner using endpoint specs and response adapters."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .http_client import HTTPClient


@dataclass(frozen=True)
class RestEndpointSpec:
    id: str
    build_path: Callable[[dict[str, Any]], str]
    build_query: Callable[[dict[str, Any]], dict[str, Any]] | None = None
    build_headers: Callable[[dict[str, Any]], dict[str, str]] | None = None


class ResponseAdapter:
    def parse(self, response: Any, params: dict[str, Any]) -> Any:
        return response


class RestRunner:
    def __init__(self, http: HTTPClient) -> None:
        self._http = http

    async def run(
        self, *, spec: RestEndpointSpec, adapter: ResponseAdapter, params: dict[str, Any]
    ) -> Any:
        path = spec.build_path(params)
        query = spec.build_query(params) if spec.build_query else None
        headers = spec.build_headers(params) if spec.build_headers else None

        data = await self._http.get(path, params=query, headers=headers)
        return adapter.parse(data, params)

    async def close(self) -> None:
        await self._http.close()
