import asyncio
import functools
from contextlib import contextmanager
from typing import Awaitable, Callable, Optional, Tuple, TypeVar

T = TypeVar("T")


class LoadingState:
    """In-flight flag for UI affordances: True while a wrapped call is running."""

    def __init__(self, on_change: Optional[Callable[[bool], None]] = None):
        self.loading = False
        self._on_change = on_change

    def _set(self, value: bool) -> None:
        self.loading = value
        if self._on_change is not None:
            self._on_change(value)

    @contextmanager
    def hold(self):
        self._set(True)
        try:
            yield self
        finally:
            self._set(False)


def use_loading(
    inner: Callable[..., Awaitable[T]],
    on_change: Optional[Callable[[bool], None]] = None,
) -> Tuple[LoadingState, Callable[..., "asyncio.Future[T]"]]:
    """
    Wrap a coroutine function so a LoadingState tracks it.

    Calling ``do_loading`` sets the flag right away and schedules ``inner``
    on the running loop; the returned future is awaited like the original
    call. The flag is reset on every exit path and exceptions from ``inner``
    reach the caller unchanged. Must be called with an event loop running.
    """
    state = LoadingState(on_change)

    async def run(awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        finally:
            state._set(False)

    @functools.wraps(inner)
    def do_loading(*args, **kwargs) -> "asyncio.Future[T]":
        state._set(True)
        try:
            awaitable = inner(*args, **kwargs)
            return asyncio.ensure_future(run(awaitable))
        except BaseException:
            state._set(False)
            raise

    return state, do_loading
