"""Minimal deterministic OpenAPI spec built from the live URL map.

Each gated view carries `required_actions` (set by `require_permissions`); it is
published as `x-required-permissions` so clients and tests can see the policy
each endpoint enforces.
"""
import re
from typing import Any, Dict

from postgate.constants.permissions import ROLE_NAMES, permission_table_payload

__all__ = ["build_openapi_spec"]

_PARAM = re.compile(r'<(?:[^:<>]+:)?([^<>]+)>')
_SKIP_METHODS = {'HEAD', 'OPTIONS'}
_SKIP_ENDPOINTS = {'static'}


def _openapi_path(rule: str) -> str:
    return _PARAM.sub(r'{\1}', rule)


def _schemas() -> Dict[str, Any]:
    return {
        "Post": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "title": {"type": "string"},
                "content": {"type": "string"},
                "author": {
                    "type": "object",
                    "properties": {"id": {"type": "integer"}, "username": {"type": "string"}},
                },
                "created_at": {"type": "string", "format": "date-time"},
                "updated_at": {"type": "string", "format": "date-time"},
            },
            "required": ["id", "title", "content", "author"],
        },
        "User": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "username": {"type": "string"},
                "role": {"type": "string", "enum": ROLE_NAMES},
            },
            "required": ["id", "username", "role"],
        },
        "Pagination": {
            "type": "object",
            "properties": {
                "total": {"type": "integer"},
                "limit": {"type": "integer"},
                "offset": {"type": "integer"},
                "returned": {"type": "integer"},
            },
            "required": ["total", "limit", "offset", "returned"],
        },
        "Error": {
            "type": "object",
            "properties": {
                "error": {
                    "type": "object",
                    "properties": {
                        "status": {"type": "integer"},
                        "title": {"type": "string"},
                        "detail": {"type": "string"},
                    },
                }
            },
            "required": ["error"],
        },
    }


def build_openapi_spec(app) -> Dict[str, Any]:
    paths: Dict[str, Any] = {}
    for rule in sorted(app.url_map.iter_rules(), key=lambda r: r.rule):
        if rule.endpoint in _SKIP_ENDPOINTS:
            continue
        view = app.view_functions[rule.endpoint]
        path = _openapi_path(rule.rule)
        for method in sorted((rule.methods or set()) - _SKIP_METHODS):
            op: Dict[str, Any] = {
                "summary": (view.__doc__ or rule.endpoint).strip().splitlines()[0],
                "operationId": rule.endpoint.replace('.', '_') + f"_{method.lower()}",
                "tags": [path.strip('/').split('/')[1 if path.startswith('/api/') else 0].capitalize() or 'Root'],
                "responses": {"200": {"description": "OK"}},
            }
            actions = getattr(view, 'required_actions', None)
            if actions:
                op["x-required-permissions"] = list(actions)
                op["security"] = [{"BearerAuth": []}]
                op["responses"].update({
                    "401": {"description": "Not authenticated"},
                    "403": {"description": "Forbidden"},
                })
            paths.setdefault(path, {})[method.lower()] = op

    return {
        "openapi": "3.0.3",
        "info": {"title": "Postgate API", "version": "0.1.0"},
        "paths": paths,
        "components": {
            "schemas": _schemas(),
            "securitySchemes": {"BearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}},
        },
        "x-permission-table": permission_table_payload(),
    }
