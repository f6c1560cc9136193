"""Minimal dependency-injection container for middleware lookup.

The resolver only relies on the ``make(namespace)`` contract, so any
container exposing it can be plugged in.  This one covers what bootstrap
code and tests usually need::

    container = Container()
    container.singleton("App/Middleware/Auth", AuthMiddleware)
    container.bind("App/Middleware/Timer", lambda: TimerMiddleware(clock))

    container.make("App/Middleware/Auth")        # same instance every time
    container.make("myapp.middleware:Cors")      # imported, then instantiated

Namespaces without a binding are treated as import paths, either
``package.module:attr`` or dotted ``package.module.attr``.
"""

from __future__ import annotations

import importlib
import inspect
import logging
from typing import Any, Callable, Dict, Tuple

logger = logging.getLogger(__name__)

Factory = Callable[[], Any]

_SENTINEL = object()


class ContainerLookupError(LookupError):
    """Raised when a namespace has no binding and cannot be imported."""


class Container:
    """Namespace → object bindings with fresh, singleton and instance scopes."""

    def __init__(self) -> None:
        # namespace -> (factory, shared)
        self._bindings: Dict[str, Tuple[Factory, bool]] = {}
        self._instances: Dict[str, Any] = {}

    def bind(self, namespace: str, factory: Factory) -> None:
        """Bind *factory*; every :meth:`make` call builds a new object."""
        self._bindings[namespace] = (factory, False)
        self._instances.pop(namespace, None)

    def singleton(self, namespace: str, factory: Factory) -> None:
        """Bind *factory*; it is called once and the result is cached."""
        self._bindings[namespace] = (factory, True)
        self._instances.pop(namespace, None)

    def instance(self, namespace: str, obj: Any) -> None:
        """Bind an already-built object."""
        self._bindings.pop(namespace, None)
        self._instances[namespace] = obj

    def has(self, namespace: str) -> bool:
        return namespace in self._instances or namespace in self._bindings

    def forget(self, namespace: str) -> None:
        self._bindings.pop(namespace, None)
        self._instances.pop(namespace, None)

    def make(self, namespace: str) -> Any:
        """Return the object bound to *namespace*.

        Raises:
            ContainerLookupError: If nothing is bound and the namespace is
                not an importable path.
        """
        if namespace in self._instances:
            return self._instances[namespace]

        binding = self._bindings.get(namespace)
        if binding is not None:
            factory, shared = binding
            obj = factory()
            if shared:
                self._instances[namespace] = obj
            return obj

        target = _import_path(namespace)
        if inspect.isclass(target):
            return target()
        return target


def _import_path(path: str) -> Any:
    """Import ``module:attr`` or the longest importable prefix of ``a.b.c``."""
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
        candidates = [(module_name, attr_path)]
    else:
        parts = path.split(".")
        candidates = [
            (".".join(parts[:i]), ".".join(parts[i:])) for i in range(len(parts), 0, -1)
        ]

    for module_name, attr_path in candidates:
        if not module_name or module_name.startswith("."):
            continue
        try:
            obj: Any = importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            # Only a missing candidate means "try a shorter prefix".
            if exc.name and (module_name == exc.name or module_name.startswith(exc.name + ".")):
                continue
            raise ContainerLookupError(f"Importing '{module_name}' failed: {exc}") from exc
        except ImportError as exc:
            raise ContainerLookupError(f"Importing '{module_name}' failed: {exc}") from exc
        for attr in filter(None, attr_path.split(".")):
            obj = getattr(obj, attr, _SENTINEL)
            if obj is _SENTINEL:
                raise ContainerLookupError(
                    f"'{module_name}' has no attribute path '{attr_path}'"
                )
        logger.debug("Imported '%s' from module '%s'.", path, module_name)
        return obj

    raise ContainerLookupError(f"Nothing bound to '{path}' and it is not importable")
