from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional
from postgate.constants.permissions import Scope, scope_for


class Decision(str, Enum):
    ALLOW = 'allow'
    DENY = 'deny'

    @property
    def allowed(self) -> bool:
        return self is Decision.ALLOW


@dataclass(frozen=True)
class Principal:
    """The authenticated actor behind a request or client session."""
    id: str
    role: str
    username: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> 'Principal':
        return cls(id=str(user.id), role=user.role, username=user.username)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> 'Principal':
        return cls(id=str(payload['id']), role=payload['role'], username=payload.get('username'))


def evaluate(role, action, principal_id, owner_id=None) -> Decision:
    """Decide whether `role` may perform `action`.

    Own-scoped grants compare `owner_id` to `principal_id` by plain equality.
    When no owner is supplied an Own grant allows: list/create style calls have no
    single owner, and per-resource callers are expected to pass the stored owner.
    Never raises; anything unrecognized is a DENY.
    """
    scope = scope_for(role, action)
    if scope is None:
        return Decision.DENY
    if scope is Scope.ANY:
        return Decision.ALLOW
    if owner_id is None:
        return Decision.ALLOW
    return Decision.ALLOW if owner_id == principal_id else Decision.DENY


def is_allowed(role, action, principal_id, owner_id=None) -> bool:
    return evaluate(role, action, principal_id, owner_id).allowed


def allows_any(principal: Principal, actions, owner_id=None) -> bool:
    return any(evaluate(principal.role, a, principal.id, owner_id).allowed for a in actions)


def current_principal() -> Principal:
    """Principal for the current request; call after verify_jwt_in_request()."""
    from flask_jwt_extended import get_current_user
    return Principal.from_user(get_current_user())


def can_modify(principal: Principal, action: str, owner_id: str) -> bool:
    """Second enforcement point for update/delete, with the owner taken from storage."""
    return evaluate(principal.role, action, principal.id, owner_id).allowed
