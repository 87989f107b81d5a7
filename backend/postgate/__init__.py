from flask import Flask
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from typing import Optional, Dict, Any

load_dotenv()

db_engine = None
SessionLocal = None
jwt = JWTManager()


def _error_body(status: int, title: str, detail: str):
    return {
        'error': {
            'status': status,
            'title': title,
            'detail': detail,
        }
    }


def create_app(config: Optional[Dict[str, Any]] = None):
    global db_engine, SessionLocal
    app = Flask(__name__)

    from .config.settings import env_settings
    app.config.update(env_settings())

    if config:
        # allow tests or callers to override default config values
        app.config.update(config)

    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Database
    db_url = app.config['DATABASE_URL']
    if db_url.endswith(':memory:'):
        # Ensure a single shared in-memory SQLite database across all sessions
        db_engine = create_engine(
            db_url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        db_engine = create_engine(db_url, echo=False, future=True)
    SessionLocal = scoped_session(sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False))

    jwt.init_app(app)
    _register_jwt_callbacks()

    from .routes.auth import auth_bp
    from .routes.posts import posts_bp
    from .routes.users import users_bp
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(posts_bp, url_prefix='/api/posts')
    app.register_blueprint(users_bp, url_prefix='/api/users')

    @app.route('/healthz')
    def health():
        from datetime import datetime, timezone
        return {
            'status': 'healthy',
            'message': 'Posts RBAC API is running',
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        }

    # Unified error handler producing standardized JSON shape
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            return _error_body(e.code, e.name, e.description), e.code
        # Unhandled exception
        app.logger.exception('Unhandled exception')
        return _error_body(500, 'Internal Server Error', 'Unexpected error'), 500

    from .openapi import build_openapi_spec

    @app.route('/openapi.json')
    def openapi_spec():
        return build_openapi_spec(app)

    return app


def _register_jwt_callbacks():
    """Identity resolution: token -> user row, with every failure rendered as 401."""
    from .models.authz import User

    @jwt.user_lookup_loader
    def load_user(_jwt_header, jwt_data):
        try:
            user_id = int(jwt_data['sub'])
        except (KeyError, TypeError, ValueError):
            return None
        return get_db().get(User, user_id)

    @jwt.user_lookup_error_loader
    def user_not_found(_jwt_header, _jwt_data):
        return _error_body(401, 'Unauthorized', 'Not authorized, user not found'), 401

    @jwt.unauthorized_loader
    def missing_token(reason: str):
        return _error_body(401, 'Unauthorized', 'Not authorized, no token'), 401

    @jwt.invalid_token_loader
    def invalid_token(reason: str):
        return _error_body(401, 'Unauthorized', 'Not authorized, token failed'), 401

    @jwt.expired_token_loader
    def expired_token(_jwt_header, _jwt_data):
        return _error_body(401, 'Unauthorized', 'Not authorized, token expired'), 401


def get_db():
    return SessionLocal()
