"""Logging setup and console output for the Onionware CLI."""

from onionware.display.logging_config import setup_logging

__all__ = ["setup_logging"]
