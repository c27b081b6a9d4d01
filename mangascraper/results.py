"""Single-outcome result delivery with an optional callback listener."""

import asyncio
from typing import Awaitable

from .types import MangaCallback, T


def _notify(callback: MangaCallback | None, error: BaseException | None, result) -> None:
    if callback is None:
        return
    try:
        callback(error, result)
    except Exception as e:
        print(f"[deliver] callback raised, outcome unchanged: {e}")


async def deliver(operation: Awaitable[T], callback: MangaCallback | None = None) -> T:
    """
    Await `operation` once and hand the same outcome to `callback`.

    The callback is invoked as callback(None, result) on success or
    callback(error, None) on failure, before the result is returned or the
    error re-raised. A raising callback does not change the outcome.
    """
    try:
        result = await operation
    except asyncio.CancelledError as e:
        _notify(callback, e, None)
        raise
    except Exception as e:
        _notify(callback, e, None)
        raise
    _notify(callback, None, result)
    return result
