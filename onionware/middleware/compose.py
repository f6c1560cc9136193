"""Onion composition of resolved middleware.

Every handler is called as ``handler(request, response, next)`` where
``next`` is a zero-argument coroutine function standing for the rest of
the chain.  Awaiting it runs everything downstream; code after the
``await`` runs once the downstream has finished::

    class Timer:
        async def handle(self, request, response, next):
            started = time.monotonic()
            await next()
            response.headers["x-elapsed"] = time.monotonic() - started

A handler that does not await ``next`` stops the chain there.  Exceptions
travel up through the enclosing handlers untouched.

Plain (sync) handlers are terminal unless they ``return next()``; the
returned coroutine is awaited for them.  Calling ``next()`` without
returning it drops the downstream and leaves an un-awaited coroutine.
"""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Union

from onionware.middleware.resolver import MiddlewareReference

Continuation = Callable[[], Awaitable[Any]]
Pipeline = Callable[..., Awaitable[Any]]


async def _noop() -> None:
    """End of the pipeline."""
    return None


class _Continuation:
    """Zero-argument handle on the downstream chain.

    The downstream runs at most once; calling it again returns ``None``
    without re-entering any handler.
    """

    __slots__ = ("_step", "_called")

    def __init__(self, step: Continuation) -> None:
        self._step = step
        self._called = False

    async def __call__(self) -> Any:
        if self._called:
            return None
        self._called = True
        return await self._step()


def _as_handler(entry: Union[MiddlewareReference, Callable[..., Any]]) -> Callable[..., Any]:
    if isinstance(entry, MiddlewareReference):
        return entry.bind()
    return entry


def compose(
    middleware: Sequence[Union[MiddlewareReference, Callable[..., Any]]],
    request: Any,
    response: Any,
) -> Pipeline:
    """Compose *middleware* into a single pipeline for one request.

    Position 0 is the outermost layer: it runs first on the way in and
    last on the way out.

    Args:
        middleware: Resolved references, or plain ``(request, response,
            next)`` callables.
        request: Passed through to every handler as is.
        response: Passed through to every handler as is.

    Returns:
        An async callable ``(next=None) -> Any``.  The optional *next* is
        placed at the centre of the onion (typically the route handler);
        without it the innermost ``next`` is a no-op.
    """
    handlers: List[Callable[..., Any]] = [_as_handler(entry) for entry in middleware]

    async def pipeline(next: Optional[Continuation] = None) -> Any:
        chain = _Continuation(next or _noop)
        for handler in reversed(handlers):
            downstream = chain

            async def _step(
                _handler: Callable[..., Any] = handler,
                _next: _Continuation = downstream,
            ) -> Any:
                result = _handler(request, response, _next)
                if inspect.isawaitable(result):
                    result = await result
                return result

            chain = _Continuation(_step)
        return await chain()

    return pipeline
