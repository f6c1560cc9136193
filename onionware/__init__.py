"""
Onionware - middleware composition for async request pipelines.

Global and named middleware are declared once at startup in a
:class:`MiddlewareRegistry`.  Per request, the applicable entries are
filtered, resolved through a dependency-injection container and composed
into a single "onion" pipeline where every handler can run code both
before and after the rest of the chain.
"""

from onionware.constants import PACKAGE_NAME, PACKAGE_VERSION
from onionware.container import Container
from onionware.dispatcher import MiddlewareDispatcher
from onionware.errors import (
    ConfigurationError,
    HandlerError,
    OnionwareBaseError,
    ResolutionError,
)
from onionware.middleware import (
    MiddlewareReference,
    MiddlewareRegistry,
    MiddlewareResolver,
    compose,
)

__version__ = PACKAGE_VERSION
__app_name__ = PACKAGE_NAME

__all__ = [
    "ConfigurationError",
    "Container",
    "HandlerError",
    "MiddlewareDispatcher",
    "MiddlewareReference",
    "MiddlewareRegistry",
    "MiddlewareResolver",
    "OnionwareBaseError",
    "PACKAGE_NAME",
    "PACKAGE_VERSION",
    "ResolutionError",
    "compose",
    "__version__",
    "__app_name__",
]
