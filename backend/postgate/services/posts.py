"""Post lookups that report failures as data instead of exceptions.

Routes translate `AccessOutcome` into HTTP statuses; the checks run in a fixed
order so a missing post is reported before an ownership mismatch.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from sqlalchemy import select
from postgate.models.post import Post
from postgate.services.policy import Principal, can_modify


class AccessOutcome(str, Enum):
    OK = 'ok'
    INVALID_IDENTIFIER = 'invalid_identifier'
    NOT_FOUND = 'not_found'
    FORBIDDEN = 'forbidden'


@dataclass(frozen=True)
class PostAccess:
    outcome: AccessOutcome
    post: Optional[Post] = None

    @property
    def ok(self) -> bool:
        return self.outcome is AccessOutcome.OK


MAX_POST_ID = 2**63 - 1


def parse_post_id(raw) -> Optional[int]:
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw if 0 < raw <= MAX_POST_ID else None
    if isinstance(raw, str) and raw.isascii() and raw.isdigit() and len(raw) <= 19:
        value = int(raw)
        return value if 0 < value <= MAX_POST_ID else None
    return None


def find_post(session, raw_id) -> PostAccess:
    post_id = parse_post_id(raw_id)
    if post_id is None:
        return PostAccess(AccessOutcome.INVALID_IDENTIFIER)
    post = session.execute(select(Post).where(Post.id == post_id)).scalar_one_or_none()
    if post is None:
        return PostAccess(AccessOutcome.NOT_FOUND)
    return PostAccess(AccessOutcome.OK, post)


def load_post_for(session, principal: Principal, action: str, raw_id) -> PostAccess:
    """Resolve a post for a mutating action, re-deriving the owner from storage."""
    found = find_post(session, raw_id)
    if not found.ok:
        return found
    if not can_modify(principal, action, found.post.owner_id):
        return PostAccess(AccessOutcome.FORBIDDEN, found.post)
    return found
