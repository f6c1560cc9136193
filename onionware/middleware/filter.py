"""Per-request middleware selection.

Evaluation rules:

1. Requested *keys* are matched against the **named** map only.  Keys
   that are not registered are dropped without error.
2. Named results follow the order of *keys*, not the map's insertion
   order.  A key requested twice is selected once.
3. When globals are requested, the deduplicated global list comes
   **first**, whatever the caller asked for.  Globals and named entries
   are never deduplicated against each other.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence


def unique(namespaces: Iterable[str]) -> List[str]:
    """Return *namespaces* without duplicates, keeping first occurrences."""
    return list(dict.fromkeys(namespaces))


def select_middleware(
    global_middleware: Sequence[str],
    named_middleware: Dict[str, str],
    keys: Iterable[str],
    include_global: bool = False,
) -> List[str]:
    """Return the ordered namespaces to run for a single request."""
    named = [named_middleware[key] for key in unique(keys) if key in named_middleware]
    if include_global is True:
        return unique(global_middleware) + named
    return named
