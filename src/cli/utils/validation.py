"""Input validation utilities for CLI commands."""

import json
import re
from typing import Any


def validate_host(host: str) -> str:
    """Validate and return endpoint URL. Raises ValueError if invalid."""
    if not host or not host.strip():
        raise ValueError("Host cannot be empty")
    host = host.strip()
    if not host.startswith(("http://", "https://")):
        raise ValueError("Host must be an http:// or https:// URL")
    if len(host) > 2048:
        raise ValueError("Host URL cannot exceed 2048 characters")
    return host


def validate_method(method: str) -> str:
    """Validate and return remote method name. Raises ValueError if invalid."""
    if not method or not method.strip():
        raise ValueError("Method name cannot be empty")
    method = method.strip()
    if not re.match(r"^[a-zA-Z0-9_.]+$", method):
        raise ValueError(
            "Method name can only contain letters, numbers, underscores, and dots"
        )
    return method


def parse_param(raw: str) -> Any:
    """Parse a command-line parameter as a JSON literal, else keep it as a string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def validate_steps(data: Any) -> list[tuple[str, list]]:
    """Validate a chain file's contents. Raises ValueError if invalid."""
    if not isinstance(data, list) or not data:
        raise ValueError("Chain file must contain a non-empty list of steps")
    steps = []
    for i, step in enumerate(data, 1):
        if isinstance(step, str):
            step = {"method": step}
        if not isinstance(step, dict):
            raise ValueError(f"Step {i} must be a mapping with a 'method' key")
        method = validate_method(str(step.get("method") or ""))
        params = step.get("params") or []
        if not isinstance(params, list):
            raise ValueError(f"Step {i} params must be a list")
        steps.append((method, params))
    return steps
