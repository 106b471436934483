from __future__ import annotations

from typing import Awaitable, Callable, TypeVar

from app.services.logger import logger

T = TypeVar("T")


async def with_fallback(
    primary: Callable[[], Awaitable[T]],
    fallback: Callable[[], T],
    *,
    caller: str,
) -> tuple[T, bool]:
    """Run `primary`; on any exception return `fallback()` instead.

    Returns `(value, used_fallback)`. `fallback` must be deterministic and must
    not raise: it is the answer of last resort for unreliable structured-output
    generators.
    """
    try:
        return await primary(), False
    except Exception as e:
        logger.warning(f"{caller}: primary path failed, using fallback ({type(e).__name__}: {e})")
        return fallback(), True
