"""Presentation-side permission checks.

Decides which controls a client should render. Purely advisory: the API's
request gate is what actually enforces the policy.
"""
from __future__ import annotations
from typing import Callable, Iterable, Mapping, Optional, Union

from postgate.constants.permissions import POSTS_CREATE, POSTS_DELETE, POSTS_UPDATE
from postgate.services.policy import Principal, evaluate

PrincipalSource = Union[Optional[Principal], Callable[[], Optional[Principal]]]


class UIGate:
    def __init__(self, principal: PrincipalSource = None):
        # Accept a fixed principal or a callable (e.g. lambda: client.principal)
        self._source = principal

    @property
    def principal(self) -> Optional[Principal]:
        return self._source() if callable(self._source) else self._source

    def can(self, action: str, owner_id=None) -> bool:
        principal = self.principal
        if principal is None:
            return False
        if owner_id is not None:
            owner_id = str(owner_id)
        return evaluate(principal.role, action, principal.id, owner_id).allowed

    def can_create_post(self) -> bool:
        return self.can(POSTS_CREATE)

    def post_controls(self, post: Mapping) -> dict:
        owner_id = (post.get('author') or {}).get('id')
        return {
            'edit': self.can(POSTS_UPDATE, owner_id),
            'delete': self.can(POSTS_DELETE, owner_id),
        }

    def can_enter(self, allowed_roles: Optional[Iterable[str]] = None) -> bool:
        """Route guard: logged in, and in `allowed_roles` when given."""
        principal = self.principal
        if principal is None:
            return False
        if allowed_roles is None:
            return True
        return principal.role in set(allowed_roles)
