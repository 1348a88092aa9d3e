"""Structured logging for chunked retrieval.

This module provides telemetry hooks for retrieval cycles, emitting
structured logs with the event name as message and details in `extra`.
"""

from __future__ import annotations

import logging
from datetime import date

from .definitions import Chunk, ChunkFailure, RetrievalResult

logger = logging.getLogger(__name__)


def log_chunk_plan(
    *,
    total_chunks: int,
    window_size: int,
    start_date: date,
    end_date: date,
) -> None:
    """Log a static chunk plan.

    Args:
        total_chunks: Number of chunks planned
        window_size: Chunk size in days
        start_date: First day of the range
        end_date: Last day of the range
    """
    logger.debug(
        "chunk_plan_created",
        extra={
            "total_chunks": total_chunks,
            "window_size": window_size,
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
        },
    )


def log_retrieval_started(
    *,
    path: str,
    start_date: date,
    end_date: date,
    total_days: int,
    chunk_size: int | None = None,
) -> None:
    """Log the start of a retrieval cycle."""
    logger.info(
        "retrieval_started",
        extra={
            "path": path,
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
            "total_days": total_days,
            "chunk_size": chunk_size,
        },
    )


def log_chunk_completed(
    *,
    chunk: Chunk,
    rows_aggregated: int,
    processed_days: int,
    latency_ms: float | None = None,
) -> None:
    """Log completion of a single chunk.

    Args:
        chunk: Chunk that was fetched
        rows_aggregated: Number of records aggregated from this chunk
        processed_days: Running processed-day counter after this chunk
        latency_ms: Latency in milliseconds (optional)
    """
    logger.info(
        "chunk_completed",
        extra={
            "chunk_index": chunk.index,
            "chunk_start": chunk.start.isoformat(),
            "chunk_end": chunk.end.isoformat(),
            "rows_aggregated": rows_aggregated,
            "processed_days": processed_days,
            "latency_ms": latency_ms,
        },
    )


def log_chunk_failed(*, chunk: Chunk, failure: ChunkFailure) -> None:
    """Log a classified chunk failure."""
    logger.warning(
        "chunk_failed",
        extra={
            "chunk_index": chunk.index,
            "chunk_start": chunk.start.isoformat(),
            "chunk_end": chunk.end.isoformat(),
            "failure_kind": failure.kind.value,
            "status_code": failure.status_code,
            "error_message": failure.message,
        },
    )


def log_chunk_shrunk(*, cursor: date, old_size: int, new_size: int, consecutive_failures: int) -> None:
    """Log a chunk-size reduction."""
    logger.info(
        "chunk_shrunk",
        extra={
            "cursor": cursor.isoformat(),
            "old_size": old_size,
            "new_size": new_size,
            "consecutive_failures": consecutive_failures,
        },
    )


def log_retrieval_complete(*, result: RetrievalResult, total_latency_ms: float | None = None) -> None:
    """Log completion of a retrieval cycle."""
    logger.info(
        "retrieval_complete",
        extra={
            "path": result.path.value,
            "chunks_used": result.chunks_used,
            "attempts": result.attempts,
            "total_records": result.total_records,
            "processed_days": result.processed_days,
            "total_days": result.total_days,
            "total_latency_ms": total_latency_ms,
        },
    )


def log_retrieval_fatal(*, error_type: str, error_message: str, chunk: Chunk | None = None) -> None:
    """Log an unrecoverable retrieval error."""
    logger.error(
        "retrieval_fatal",
        extra={
            "chunk_index": chunk.index if chunk else None,
            "chunk_start": chunk.start.isoformat() if chunk else None,
            "chunk_end": chunk.end.isoformat() if chunk else None,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_retrieval_cancelled(*, reason: str | None, processed_days: int) -> None:
    """Log a cycle abandoned because a newer one superseded it."""
    logger.info(
        "retrieval_cancelled",
        extra={"reason": reason, "processed_days": processed_days},
    )
