from functools import wraps
from flask import abort, current_app, request
from flask_jwt_extended import verify_jwt_in_request
from postgate.services.policy import allows_any, current_principal


def require_permissions(*actions: str):
    """Gate a view on identity first, then on at least one of `actions`.

    Token problems are answered with 401 by the JWT callbacks before the
    evaluator runs; a resolved principal lacking every action gets 403.
    """
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            principal = current_principal()
            if not allows_any(principal, actions):
                current_app.logger.info(
                    'Denied %s %s for user %s (role=%s, needs one of %s)',
                    request.method, request.path, principal.id, principal.role, list(actions),
                )
                abort(403, description='Forbidden: You do not have permission to perform this action')
            return fn(*args, **kwargs)
        wrapper.required_actions = tuple(actions)
        return wrapper
    return outer
