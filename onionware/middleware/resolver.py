"""Namespace → handler resolution through an injection container.

Each namespace is resolved to "the ``handle`` method of whatever the
namespace names".  The container decides whether that object is shared
or built fresh; the resolver only asks for it.
"""

from __future__ import annotations

import inspect
import logging
import types
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Protocol

from onionware.constants import HANDLER_METHOD
from onionware.errors import ResolutionError

logger = logging.getLogger(__name__)


class InjectionContainer(Protocol):
    """Anything that can build the object bound to a namespace."""

    def make(self, namespace: str) -> Any: ...


@dataclass(frozen=True)
class MiddlewareReference:
    """A resolved middleware: the handler and, for methods, its owner.

    Attributes:
        namespace: The namespace the handler was resolved from.
        method: The handler callable, unbound when *instance* is set.
        instance: Owning object the handler is bound to on call.
    """

    namespace: str
    method: Callable[..., Any]
    instance: Optional[Any] = None

    def bind(self) -> Callable[..., Any]:
        """Return the handler ready to be called with ``(request, response, next)``."""
        if self.instance is None:
            return self.method
        return types.MethodType(self.method, self.instance)


class MiddlewareResolver:
    """Resolve namespaces to :class:`MiddlewareReference` objects.

    Parameters
    ----------
    container:
        The injection capability; ``container.make(namespace)`` must return
        the object for *namespace* or raise.
    method:
        Name of the handler attribute looked up on resolved objects.
    """

    def __init__(self, container: InjectionContainer, method: str = HANDLER_METHOD) -> None:
        self._container = container
        self._method = method

    @property
    def method(self) -> str:
        return self._method

    def resolve(self, references: Iterable[str]) -> List[MiddlewareReference]:
        """Resolve every namespace in *references*, in order.

        Raises:
            ResolutionError: On the first namespace that cannot be resolved.
                Nothing is returned for the rest of the batch.
        """
        return [self.resolve_one(namespace) for namespace in references]

    def resolve_one(self, namespace: str) -> MiddlewareReference:
        try:
            target = self._container.make(namespace)
        except Exception as exc:
            logger.debug("Container failed to make '%s': %s", namespace, exc)
            raise ResolutionError(namespace, str(exc), orig_exc=exc) from exc

        handler = getattr(target, self._method, None)
        if handler is None or not callable(handler):
            raise ResolutionError(
                namespace,
                f"{type(target).__name__} has no callable '{self._method}'",
            )

        # Keep the owner separately so the composer binds at call time.
        if inspect.ismethod(handler):
            return MiddlewareReference(namespace, handler.__func__, handler.__self__)
        return MiddlewareReference(namespace, handler)
