from __future__ import annotations

import os

DEBUG_PY_TRACE_ENV = "DESCENT_DEBUG_PY_TRACE"

_TRUTHY = ("1", "true", "yes", "on")


def env_flag(name: str) -> bool:
    """Check if an env var is set to a truthy value."""
    return os.environ.get(name, "").strip().lower() in _TRUTHY


def set_env_flag(name: str, enabled: bool) -> None:
    if enabled:
        os.environ[name] = "1"
    else:
        os.environ.pop(name, None)


def debug_py_trace_enabled() -> bool:
    """Diagnostics append the Python traceback when this is on."""
    return env_flag(DEBUG_PY_TRACE_ENV)
