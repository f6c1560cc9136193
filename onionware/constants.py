"""Shared constants for Onionware."""

PACKAGE_NAME = "Onionware"
PACKAGE_VERSION = "0.1.0"

# Resolved handlers are looked up as ``<namespace>.<HANDLER_METHOD>``
HANDLER_METHOD = "handle"

# Config file discovery
CONFIG_ENV_VAR = "ONIONWARE_CONFIG"
CONFIG_SEARCH_ORDER = ("middleware.yaml", "middleware.yml")

# Logging defaults
LOG_DIR = "logs"
DEFAULT_LOG_LEVEL = "INFO"
