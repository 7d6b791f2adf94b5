from __future__ import annotations

from collections.abc import Callable, Coroutine
from functools import wraps
from typing import Any, TypeVar

T = TypeVar("T")


def status_tuple(
    fn: Callable[..., Coroutine[Any, Any, T]],
) -> Callable[..., Coroutine[Any, Any, tuple[bool, T | str]]]:
    """Turn an async adapter write into ``(True, result)`` / ``(False, error)``.

    Used on methods whose failures the caller records and moves past, such as
    one strategy's ``work`` in a harvest run.
    """

    @wraps(fn)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> tuple[bool, T | str]:
        try:
            return True, await fn(self, *args, **kwargs)
        except Exception as exc:
            self.logger.error(f"{fn.__name__} failed: {type(exc).__name__}: {exc}")
            return False, str(exc) or type(exc).__name__

    return wrapper  # type: ignore[return-value]
