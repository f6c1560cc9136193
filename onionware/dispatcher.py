"""Per-request glue: filter → resolve → compose → run.

The dispatcher is what a server calls once per request.  It owns no
per-request state; every call builds a fresh pipeline.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Iterable, Optional

from onionware.config.schema import MiddlewareConfig
from onionware.errors import ResolutionError
from onionware.middleware.compose import Pipeline, compose
from onionware.middleware.registry import MiddlewareRegistry
from onionware.middleware.resolver import InjectionContainer, MiddlewareResolver

logger = logging.getLogger(__name__)


class MiddlewareDispatcher:
    """Run the applicable middleware around an optional route handler.

    Parameters
    ----------
    registry:
        The process-wide :class:`MiddlewareRegistry`, read-only here.
    resolver:
        The :class:`MiddlewareResolver` used to turn namespaces into
        handlers.
    """

    def __init__(self, registry: MiddlewareRegistry, resolver: MiddlewareResolver) -> None:
        self._registry = registry
        self._resolver = resolver

    @classmethod
    def from_config(
        cls, config: MiddlewareConfig, container: InjectionContainer
    ) -> "MiddlewareDispatcher":
        """Build a registry from *config* and a resolver on *container*."""
        registry = MiddlewareRegistry()
        registry.load_config(config)
        return cls(registry, MiddlewareResolver(container, method=config.method))

    @property
    def registry(self) -> MiddlewareRegistry:
        return self._registry

    def build(
        self,
        request: Any,
        response: Any,
        keys: Iterable[str] = (),
        include_global: bool = True,
    ) -> Pipeline:
        """Return the composed pipeline for one request without running it.

        Raises:
            ResolutionError: If any selected namespace cannot be resolved.
        """
        namespaces = self._registry.filter(keys, include_global)
        try:
            resolved = self._resolver.resolve(namespaces)
        except ResolutionError as exc:
            logger.error("Middleware resolution failed for '%s': %s", exc.namespace, exc)
            raise
        logger.debug("Composed pipeline: %s", " → ".join(namespaces) or "(empty)")
        return compose(resolved, request, response)

    async def dispatch(
        self,
        request: Any,
        response: Any,
        keys: Iterable[str] = (),
        include_global: bool = True,
        handler: Optional[Callable[[Any, Any], Any]] = None,
    ) -> Any:
        """Build and run the pipeline once.

        *handler*, when given, is called as ``handler(request, response)``
        at the centre of the onion, i.e. when the innermost middleware
        awaits ``next``.
        """
        pipeline = self.build(request, response, keys, include_global)

        async def _final() -> Any:
            result = handler(request, response)  # type: ignore[misc]
            if inspect.isawaitable(result):
                result = await result
            return result

        try:
            return await pipeline(_final if handler is not None else None)
        except Exception as exc:
            logger.debug("Pipeline raised %s: %s", type(exc).__name__, exc)
            raise
