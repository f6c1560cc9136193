"""Middleware registry, selection, resolution and composition.

Public API
----------
- :class:`MiddlewareRegistry` — Global list and named map, written at startup
- :func:`select_middleware` — Pick the namespaces to run for one request
- :class:`MiddlewareResolver` — Namespace → handler via an injection container
- :class:`MiddlewareReference` — A resolved handler and its owning instance
- :func:`compose` — Build the onion pipeline for one request
"""

from onionware.middleware.compose import Continuation, Pipeline, compose
from onionware.middleware.filter import select_middleware
from onionware.middleware.registry import MiddlewareRegistry
from onionware.middleware.resolver import (
    InjectionContainer,
    MiddlewareReference,
    MiddlewareResolver,
)

__all__ = [
    "Continuation",
    "InjectionContainer",
    "MiddlewareReference",
    "MiddlewareRegistry",
    "MiddlewareResolver",
    "Pipeline",
    "compose",
    "select_middleware",
]
