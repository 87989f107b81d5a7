from flask import Blueprint, abort, current_app
from flask_jwt_extended import create_access_token, create_refresh_token, jwt_required, get_current_user
from sqlalchemy import select
from postgate import get_db
from postgate.models.authz import User
from postgate.utils.validation import json_object_body

auth_bp = Blueprint('auth', __name__)


def _issue_access_token(user: User) -> str:
    # JWT identity must be a string (flask-jwt-extended v4 requirement)
    return create_access_token(identity=str(user.id), additional_claims={'role': user.role})


def user_json(user: User):
    return {'id': user.id, 'username': user.username, 'role': user.role}


@auth_bp.post('/login')
def login():
    data = json_object_body('Please provide username and password')
    username = data.get('username'); password = data.get('password')
    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        abort(400, description='Please provide username and password')
    session = get_db()
    user = session.execute(select(User).where(User.username == username)).scalar_one_or_none()
    if not user or not user.verify_password(password):
        current_app.logger.info('Failed login for username %r', username)
        abort(401, description='Invalid credentials')
    return {
        **user_json(user),
        'access_token': _issue_access_token(user),
        'refresh_token': create_refresh_token(identity=str(user.id)),
    }


@auth_bp.post('/refresh')
@jwt_required(refresh=True)
def refresh():
    user = get_current_user()
    return {'access_token': _issue_access_token(user), 'user': user_json(user)}


@auth_bp.get('/me')
@jwt_required()
def me():
    return user_json(get_current_user())
