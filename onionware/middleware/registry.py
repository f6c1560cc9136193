"""Global and named middleware bookkeeping.

A :class:`MiddlewareRegistry` is owned by the serving process and handed
to whoever needs it (bootstrap code, dispatcher).  It is written during
startup and only read while serving, so it carries no locking.  Code that
registers middleware while requests are in flight must synchronise
externally.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional

from onionware.middleware.filter import select_middleware, unique

if TYPE_CHECKING:
    from onionware.config.schema import MiddlewareConfig

logger = logging.getLogger(__name__)


class MiddlewareRegistry:
    """Ordered global namespaces plus a key → namespace map."""

    def __init__(self) -> None:
        self._global: List[str] = []
        self._named: Dict[str, str] = {}

    def reset(self) -> None:
        """Discard every registration."""
        self._global = []
        self._named = {}

    def register(self, key: str, namespace: Optional[str] = None) -> None:
        """Register *key* as a global namespace, or *namespace* under *key*.

        Duplicate globals are kept here and collapsed on read.  A named key
        registered twice keeps the latest namespace.
        """
        if not namespace:
            self._global.append(key)
            logger.debug("Registered global middleware '%s'.", key)
            return
        if key in self._named and self._named[key] != namespace:
            logger.debug(
                "Named middleware '%s' re-registered: '%s' -> '%s'.",
                key,
                self._named[key],
                namespace,
            )
        self._named[key] = namespace

    def register_global(self, namespaces: Iterable[str]) -> None:
        """Append *namespaces* to the global list, keeping their order."""
        self._global.extend(namespaces)

    def register_named(self, mapping: Mapping[str, str]) -> None:
        """Register every ``key → namespace`` pair of *mapping*."""
        for key, namespace in mapping.items():
            self.register(key, namespace)

    def get_global(self) -> List[str]:
        """Return global namespaces, deduplicated in first-seen order."""
        return unique(self._global)

    def get_named(self) -> Dict[str, str]:
        """Return a snapshot of the named map."""
        return dict(self._named)

    def filter(self, keys: Iterable[str], include_global: bool = False) -> List[str]:
        """Return the namespaces to run for a request asking for *keys*.

        See :mod:`onionware.middleware.filter` for the selection rules.
        """
        return select_middleware(self._global, self._named, keys, include_global)

    def load_config(self, config: "MiddlewareConfig") -> None:
        """Apply the ``global`` and ``named`` sections of a loaded config."""
        self.register_global(config.global_)
        self.register_named(config.named)
        logger.debug(
            "Loaded %d global and %d named middleware from config.",
            len(config.global_),
            len(config.named),
        )

    def __len__(self) -> int:
        return len(self.get_global()) + len(self._named)

    def __contains__(self, item: object) -> bool:
        return item in self._global or item in self._named

    def __repr__(self) -> str:
        return (
            f"MiddlewareRegistry(global={self.get_global()}, named={sorted(self._named)})"
        )
