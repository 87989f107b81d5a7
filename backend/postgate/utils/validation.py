"""Request body helpers with consistent 400 error semantics."""
from __future__ import annotations
from typing import Any, Dict, Optional
from flask import abort, request


def json_object_body(message: str) -> Dict[str, Any]:
    """Return the JSON body when it is an object; a missing body counts as `{}`.

    Any other JSON value (array, string, number) aborts with 400 and `message`.
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        abort(400, description=message)
    return data


def clean_str(value) -> Optional[str]:
    """Stripped string, or None for anything that is not a string."""
    return value.strip() if isinstance(value, str) else None

__all__ = ['json_object_body', 'clean_str']
