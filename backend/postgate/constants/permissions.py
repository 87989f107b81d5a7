"""Central role/action definitions: the single source of truth for authorization.

Actions are `resource:operation` strings matched exactly (no wildcards, no hierarchy).
Each grant carries a scope: ANY applies to every resource, OWN only to resources
the acting user created. Roles or actions missing from the table grant nothing.

The table is exported to `shared/permission_table.json` for non-Python clients
(see scripts/export_permissions.py); never edit that file by hand.
"""
from __future__ import annotations
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional


class Role(str, Enum):
    ADMIN = 'Admin'
    EDITOR = 'Editor'
    VIEWER = 'Viewer'


class Scope(str, Enum):
    ANY = 'any'
    OWN = 'own'


POSTS_READ = 'posts:read'
POSTS_CREATE = 'posts:create'
POSTS_UPDATE = 'posts:update'
POSTS_DELETE = 'posts:delete'
USERS_MANAGE = 'users:manage'

_TABLE: Dict[Role, Dict[str, Scope]] = {
    Role.ADMIN: {
        POSTS_READ: Scope.ANY,
        POSTS_CREATE: Scope.ANY,
        POSTS_UPDATE: Scope.ANY,
        POSTS_DELETE: Scope.ANY,
        USERS_MANAGE: Scope.ANY,
    },
    Role.EDITOR: {
        POSTS_READ: Scope.ANY,
        POSTS_CREATE: Scope.ANY,
        POSTS_UPDATE: Scope.OWN,
        POSTS_DELETE: Scope.OWN,
    },
    Role.VIEWER: {
        POSTS_READ: Scope.ANY,
    },
}

# Read-only views; the table cannot be changed at runtime.
PERMISSIONS: Mapping[Role, Mapping[str, Scope]] = MappingProxyType(
    {role: MappingProxyType(dict(grants)) for role, grants in _TABLE.items()}
)

_EMPTY: Mapping[str, Scope] = MappingProxyType({})

DEFAULT_ROLE = Role.VIEWER
ROLE_NAMES: List[str] = [r.value for r in Role]


def parse_role(raw) -> Optional[Role]:
    """Return the Role for `raw` (Role or its string value), or None if unrecognized."""
    try:
        return Role(raw)
    except ValueError:
        return None


def grants_for(role) -> Mapping[str, Scope]:
    parsed = parse_role(role)
    if parsed is None:
        return _EMPTY
    return PERMISSIONS.get(parsed, _EMPTY)


def scope_for(role, action) -> Optional[Scope]:
    if not isinstance(action, str):
        return None
    return grants_for(role).get(action)


def all_actions() -> List[str]:
    seen: List[str] = []
    for grants in PERMISSIONS.values():
        for action in grants:
            if action not in seen:
                seen.append(action)
    return seen


def permission_table_payload() -> Dict[str, Dict[str, str]]:
    """JSON-able export: {role name: {action: scope}} with deterministic key order."""
    return {
        role.value: {action: scope.value for action, scope in sorted(grants.items())}
        for role, grants in PERMISSIONS.items()
    }
