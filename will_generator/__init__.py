"""
U.S. Will Generator Application

A deterministic last-will assembly service for the 50 states and the
District of Columbia.

Provides:
- Per-step questionnaire validation
- Plain-text preview and US Letter PDF output from one document model
- Rate limiting and security headers
- Audit logging
"""

import os
from datetime import datetime
from flask import Flask, request, g, jsonify
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def _env_flag(name: str, default: str = 'true') -> bool:
    return os.environ.get(name, default).lower() == 'true'


def default_config() -> dict:
    """Settings read from the environment, overridable by instance config."""
    return {
        'SECRET_KEY': os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production'),
        'SQLALCHEMY_DATABASE_URI': os.environ.get('DATABASE_URL', 'sqlite:///will_generator.db'),
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'RATELIMIT_ENABLED': _env_flag('RATELIMIT_ENABLED'),
        'RATELIMIT_STORAGE_URI': os.environ.get('REDIS_URL', 'memory://'),
        'RATELIMIT_STRATEGY': 'fixed-window',
        'RATELIMIT_DEFAULT': os.environ.get('RATELIMIT_DEFAULT', '500 per day;100 per hour'),
        'RATELIMIT_HEADERS_ENABLED': True,
        'LOG_LEVEL': os.environ.get('LOG_LEVEL', 'INFO'),
        'AUDIT_ENABLED': _env_flag('AUDIT_ENABLED'),
    }


def _register_request_hooks(app):
    from will_generator.security import add_security_headers

    @app.before_request
    def start_timer():
        g.request_start_time = datetime.utcnow()

    @app.after_request
    def finish_request(response):
        """Apply security headers and log method, path, status and duration."""
        response = add_security_headers(response)
        started = g.get('request_start_time')
        if started is not None:
            elapsed = (datetime.utcnow() - started).total_seconds()
            app.logger.info(f'{request.method} {request.path} {response.status_code} {elapsed:.3f}s')
        return response


def _json_error(message: str, status: int):
    return jsonify({'ok': False, 'error': message}), status


def _register_error_handlers(app):
    @app.errorhandler(404)
    def not_found(error):
        return _json_error('Not found', 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return _json_error('Method not allowed', 405)

    @app.errorhandler(429)
    def too_many_requests(error):
        app.logger.warning(f'Rate limit hit on {request.path} from {request.remote_addr}')
        return _json_error('Rate limit exceeded. Please try again later.', 429)

    @app.errorhandler(500)
    def internal_error(error):
        # A failed request may leave the audit session mid-transaction
        db.session.rollback()
        app.logger.error(f'Internal error: {str(error)}')
        return _json_error('Internal server error', 500)


def create_app(test_config=None):
    """
    Application factory.

    Args:
        test_config: Mapping that replaces the instance config file

    Returns:
        Configured Flask application with tables created
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_mapping(default_config())

    if test_config is None:
        app.config.from_pyfile('config.py', silent=True)
    else:
        app.config.from_mapping(test_config)

    app.logger.setLevel(app.config['LOG_LEVEL'])

    os.makedirs(app.instance_path, exist_ok=True)

    db.init_app(app)

    # Imported here: these modules import db from this package
    from will_generator.security import init_security
    from will_generator.routes import api_bp

    init_security(app)
    app.register_blueprint(api_bp)

    _register_request_hooks(app)
    _register_error_handlers(app)

    with app.app_context():
        from will_generator import models  # noqa: F401
        db.create_all()

    app.logger.info(f'Will generator started (audit={"on" if app.config["AUDIT_ENABLED"] else "off"})')
    return app
