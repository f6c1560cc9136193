"""Pydantic configuration models for Onionware.

Defines the validated middleware config structure using the versioned
v1 format.
"""

from __future__ import annotations

from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from onionware.constants import DEFAULT_LOG_LEVEL, HANDLER_METHOD, LOG_DIR


class LoggingSettings(BaseModel):
    """File logging settings used by the CLI."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = DEFAULT_LOG_LEVEL
    log_dir: str = Field(default=LOG_DIR, min_length=1)

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.strip().upper() if isinstance(v, str) else v


class MiddlewareConfig(BaseModel):
    """Top-level validated middleware configuration.

    Supports version ``"1"`` format::

        version: "1"
        global:
          - app.middleware:Cors
          - app.middleware:Timer
        named:
          auth: app.middleware:Auth
    """

    model_config = ConfigDict(populate_by_name=True)

    version: Literal["1"] = "1"
    global_: List[str] = Field(
        default_factory=list,
        alias="global",
        description="Namespaces run on every request, in order.",
    )
    named: Dict[str, str] = Field(
        default_factory=dict,
        description="Middleware selectable per route (key → namespace).",
    )
    method: str = Field(
        default=HANDLER_METHOD,
        min_length=1,
        description="Handler attribute looked up on resolved objects.",
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, v: object) -> object:
        """Accept an unquoted ``version: 1`` in YAML."""
        return str(v) if isinstance(v, int) else v

    @field_validator("global_")
    @classmethod
    def _validate_global(cls, v: List[str]) -> List[str]:
        for namespace in v:
            if not namespace.strip():
                raise ValueError("Global middleware namespace must be a non-empty string")
        return v

    @field_validator("named")
    @classmethod
    def _validate_named(cls, v: Dict[str, str]) -> Dict[str, str]:
        for key, namespace in v.items():
            stripped = key.strip()
            if not stripped:
                raise ValueError("Named middleware key must be a non-empty string")
            if stripped != key:
                raise ValueError(f"Named middleware key '{key}' has leading/trailing whitespace")
            if not namespace.strip():
                raise ValueError(f"Named middleware '{key}' has an empty namespace")
        return v
