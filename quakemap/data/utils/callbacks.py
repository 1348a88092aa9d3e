"""Helpers for invoking user callbacks that may be sync or async."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

Callback = Callable[..., Awaitable[None]] | Callable[..., None]


async def invoke_callback(callback: Callback | None, *args: Any) -> None:
    """Call `callback` with `args`, awaiting it if it returns an awaitable.

    Errors raised by the callback are logged and do not interrupt the caller.
    """
    if callback is None:
        return
    try:
        result = callback(*args)
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        logger.error(f"Error in callback {getattr(callback, '__name__', callback)!r}: {e}")
