"""``${VAR}`` expansion for configuration values.

Supports ``${VAR}`` and ``${VAR:-fallback}``.  Unset variables without a
fallback are left in place so validation can point at them.
"""

from __future__ import annotations

import os
import re
from typing import Any, Mapping, Optional

_ENV_VAR_RE = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def expand_env_vars(value: Any, environ: Optional[Mapping[str, str]] = None) -> Any:
    """Recursively expand environment references in string leaves of *value*."""
    env = os.environ if environ is None else environ

    def _sub(match: "re.Match[str]") -> str:
        name, fallback = match.group(1), match.group(2)
        if name in env:
            return env[name]
        return fallback if fallback is not None else match.group(0)

    if isinstance(value, str):
        return _ENV_VAR_RE.sub(_sub, value)
    if isinstance(value, dict):
        return {k: expand_env_vars(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item, env) for item in value]
    return value
