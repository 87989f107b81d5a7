from flask import Blueprint
from postgate import get_db
from postgate.constants.permissions import USERS_MANAGE
from postgate.decorators.auth import require_permissions
from postgate.models.authz import User
from postgate.utils.listing import apply_pagination, build_list_payload, isoformat

users_bp = Blueprint('users', __name__)


@users_bp.get('')
@require_permissions(USERS_MANAGE)
def list_users():
    session = get_db()
    q = session.query(User).order_by(User.created_at.desc(), User.id.desc())
    paged_q, total, limit, offset = apply_pagination(q)
    rows = [
        {'id': u.id, 'username': u.username, 'role': u.role, 'created_at': isoformat(u.created_at)}
        for u in paged_q.all()
    ]
    return build_list_payload(rows, total, limit, offset)
