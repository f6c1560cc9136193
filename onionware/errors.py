"""Custom exception classes for Onionware."""

from typing import Optional


class OnionwareBaseError(Exception):
    """Base class for all custom exceptions in Onionware."""

    pass


class ConfigurationError(OnionwareBaseError):
    """Raised when loading or validating the configuration file fails."""

    pass


class ResolutionError(OnionwareBaseError):
    """
    Raised when a middleware namespace cannot be turned into a callable
    handler by the injection container.
    """

    def __init__(
        self,
        namespace: str,
        message: Optional[str] = None,
        orig_exc: Optional[Exception] = None,
    ):
        self.namespace = namespace
        self.orig_exc = orig_exc

        full_msg = f"Unable to resolve middleware '{namespace}'"
        if message:
            full_msg += f": {message}"
        if orig_exc:
            full_msg += f" (original error: {type(orig_exc).__name__})"
        super().__init__(full_msg)


class HandlerError(OnionwareBaseError):
    """
    Convenience base for failures raised inside middleware bodies.

    The pipeline never raises or wraps this itself; whatever a handler
    raises travels up the chain unchanged.
    """

    pass
