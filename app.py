# app.py
"""
Flask Application Factory for the Portfolio Contact API

Request pipeline, in order:
- ProxyFix (production) so client addresses survive the reverse proxy
- Flask-Limiter: global per-IP limit, stricter limit on the contact route
- Flask-CORS for the configured frontend origins
- JSON / form body parsing bounded by MAX_CONTENT_LENGTH
- route handler (validation -> persistence -> notification)
- security headers and slow-request logging on every response
- JSON error handlers as the terminal error boundary, 404 for unknown routes
"""

import os
import logging
import logging.handlers
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from flask import Flask, request, jsonify, g
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from api.admin import admin_bp
from api.contact import contact_bp
from config import CONFIGS
from core.exceptions import DatabaseError, NotFoundError, ServerError
from middleware.security import limiter, security_headers
from services.contact_handler import ContactSubmissionHandler
from services.contact_store import ContactStore
from services.mailer import SMTPMailer
from services.notifier import ContactNotifier, SenderProfile

logger = logging.getLogger(__name__)


def setup_logging(app: Flask) -> None:
    """
    Configure application logging

    - journal-style stream handler on stderr (captured by systemd/containers)
    - optional rotating file handler when LOG_FILE is set
    - module loggers propagate to the root logger at the same level
    """
    app.logger.handlers.clear()

    journal_formatter = logging.Formatter(
        fmt='%(name)s[%(process)d]: %(levelname)s %(message)s'
    )
    detailed_formatter = logging.Formatter(
        fmt='%(asctime)s %(name)-20s %(levelname)-8s %(funcName)-15s:%(lineno)-4d %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    log_level = getattr(logging, app.config.get('LOG_LEVEL', 'INFO').upper(), logging.INFO)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(journal_formatter)
    stream_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    # Leave handlers installed by the host (gunicorn, pytest) alone
    if not root_logger.handlers:
        root_logger.addHandler(stream_handler)

    log_file = app.config.get('LOG_FILE')
    if log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5
        )
        file_handler.setFormatter(detailed_formatter)
        file_handler.setLevel(logging.DEBUG)
        app.logger.addHandler(file_handler)

    if not app.debug:
        logging.getLogger('werkzeug').setLevel(logging.WARNING)
        logging.getLogger('aiosmtplib').setLevel(logging.WARNING)


def configure_database(app: Flask, store: Optional[ContactStore] = None) -> ContactStore:
    """
    Build the persistence client

    A missing DATABASE_URL leaves the store unconfigured: the process still
    starts and the health check reports the datastore as unavailable.
    """
    if store is None:
        database_url = app.config.get('DATABASE_URL')
        engine_options: Dict[str, Any] = {
            'pool_pre_ping': True,  # Verify connections before use
            'pool_recycle': 3600,
            'echo': False,
        }

        if database_url and database_url.startswith('postgresql'):
            engine_options.update({
                'pool_size': app.config.get('DB_POOL_SIZE', 5),
                'max_overflow': app.config.get('DB_MAX_OVERFLOW', 10),
                'connect_args': {
                    'application_name': 'portfolio_contact_api',
                    'connect_timeout': app.config.get('DB_CONNECT_TIMEOUT', 10),
                }
            })

        store = ContactStore(database_url, engine_options)

    if store.configured and app.config.get('AUTO_CREATE_SCHEMA'):
        try:
            store.create_schema()
            app.logger.info("Database tables created (development mode)")
        except DatabaseError as e:
            app.logger.error(f"Could not create database tables: {e}")

    if store.configured:
        url = store.database_url or ''
        app.logger.info(f"Database configured: {url.split('@')[-1] if '@' in url else url}")
    else:
        app.logger.warning("DATABASE_URL is not set; contact messages cannot be stored")

    return store


def configure_notifications(app: Flask, mailer=None) -> ContactNotifier:
    """Build the mail relay client and the notifier that uses it"""
    if mailer is None:
        mailer = SMTPMailer.from_config(app.config)
        if not mailer.configured:
            app.logger.warning("SMTP_HOST is not set; notification emails will fail")

    if not app.config.get('ADMIN_EMAIL'):
        app.logger.warning("ADMIN_EMAIL is not set; admin notifications will fail")

    return ContactNotifier(
        mailer=mailer,
        sender=app.config.get('SMTP_FROM'),
        admin_email=app.config.get('ADMIN_EMAIL'),
        profile=SenderProfile.from_config(app.config)
    )


def configure_security(app: Flask) -> None:
    """Rate limiting and CORS"""
    limiter.init_app(app)

    CORS(app,
         resources={r'/api/*': {'origins': app.config.get('CORS_ORIGINS', [])}},
         supports_credentials=app.config.get('CORS_SUPPORTS_CREDENTIALS', True),
         allow_headers=app.config.get('CORS_ALLOW_HEADERS', ['Content-Type']))

    if app.config.get('ADMIN_AUTHORIZER') is None:
        app.logger.warning("ADMIN_AUTHORIZER is not set; /api/admin/messages is unauthenticated")

    app.logger.info("Security features configured")


def register_blueprints(app: Flask) -> None:
    app.register_blueprint(contact_bp, url_prefix='/api')
    app.register_blueprint(admin_bp, url_prefix='/api')


def configure_error_handlers(app: Flask) -> None:
    """
    JSON error responses; every body carries ``error`` and ``details``
    """
    @app.errorhandler(404)
    def not_found(error):
        not_found_error = NotFoundError(request.full_path.rstrip('?'))
        return jsonify(not_found_error.to_dict()), not_found_error.status_code

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({
            'error': 'Method not allowed',
            'details': f'{request.method} is not supported for {request.path}.'
        }), 405

    @app.errorhandler(413)
    def payload_too_large(error):
        app.logger.warning(f"Oversized request body from {request.remote_addr}")
        return jsonify({
            'error': 'Payload too large',
            'details': 'The request body exceeds the allowed size.'
        }), 413

    @app.errorhandler(429)
    def rate_limit_exceeded(error):
        app.logger.warning(f"Rate limit exceeded for {request.remote_addr} on {request.path}")
        limit = getattr(error, 'limit', None)
        if getattr(limit, 'error_message', None):
            details = error.description
        else:
            details = app.config['RATE_LIMIT_MESSAGE']
        return jsonify({
            'error': 'Too many requests',
            'details': details
        }), 429

    @app.errorhandler(Exception)
    def handle_exception(e):
        """Handle unexpected exceptions"""
        if isinstance(e, HTTPException):
            return jsonify({
                'error': e.name,
                'details': e.description
            }), e.code

        app.logger.error(f"Unhandled exception: {e}", exc_info=True)
        server_error = ServerError(
            error='Internal server error',
            details='Something went wrong on our end.'
        )
        return jsonify(server_error.to_dict()), server_error.status_code


def configure_health_checks(app: Flask, store: ContactStore) -> None:
    """
    Health check endpoint for uptime monitoring
    """
    def uptime_seconds() -> float:
        return (datetime.now(timezone.utc) - app.config['START_TIME']).total_seconds()

    def is_set(key: str) -> str:
        return 'SET' if app.config.get(key) else 'NOT_SET'

    @app.route('/api/health')
    def health_check():
        try:
            try:
                store.probe()
                database = 'CONNECTED'
            except DatabaseError as e:
                app.logger.warning(f"Health check database probe failed: {e}")
                database = 'ERROR'

            return jsonify({
                'status': 'OK',
                'timestamp': datetime.now(timezone.utc).isoformat(),
                'uptime': uptime_seconds(),
                'database': database,
                'environment': app.config['ENVIRONMENT'],
                'database_url': is_set('DATABASE_URL'),
                'smtp_host': is_set('SMTP_HOST'),
                'admin_email': is_set('ADMIN_EMAIL'),
            })
        except Exception as e:
            app.logger.error(f"Health check error: {e}", exc_info=True)
            return jsonify({
                'status': 'ERROR',
                'timestamp': datetime.now(timezone.utc).isoformat(),
                'uptime': uptime_seconds(),
                'database': 'ERROR',
                'error': 'Health check failed'
            }), 500


def configure_request_middleware(app: Flask) -> None:
    @app.before_request
    def before_request():
        g.start_time = datetime.now(timezone.utc)

    @app.after_request
    def after_request(response):
        response = security_headers(response)

        if hasattr(g, 'start_time'):
            duration = (datetime.now(timezone.utc) - g.start_time).total_seconds() * 1000
            if duration > app.config.get('SLOW_REQUEST_THRESHOLD', 1000):
                app.logger.warning(f"Slow request ({duration:.0f}ms): {request.method} {request.path}")

        return response


def create_app(config_name: Optional[str] = None,
               store: Optional[ContactStore] = None,
               mailer=None,
               config_overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Flask application factory

    Args:
        config_name: 'development', 'testing' or 'production'; defaults to FLASK_ENV
        store: persistence client replacing the SQLAlchemy-backed one
        mailer: mail relay client replacing the SMTP one
        config_overrides: values applied on top of the selected config class

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)

    config_name = config_name or os.environ.get('FLASK_ENV', 'development')
    app.config.from_object(CONFIGS.get(config_name, CONFIGS['production']))
    if config_overrides:
        app.config.update(config_overrides)

    app.config['START_TIME'] = datetime.now(timezone.utc)

    if app.config['ENVIRONMENT'] == 'production':
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    setup_logging(app)
    app.logger.info(f"Starting Contact API in {app.config['ENVIRONMENT']} mode")

    store = configure_database(app, store)
    notifier = configure_notifications(app, mailer)

    app.extensions['contact_store'] = store
    app.extensions['contact_notifier'] = notifier
    app.extensions['contact_handler'] = ContactSubmissionHandler(
        store=store,
        notifier=notifier,
        expose_error_details=app.config.get('EXPOSE_ERROR_DETAILS', False)
    )

    configure_security(app)
    register_blueprints(app)
    configure_error_handlers(app)
    configure_health_checks(app, store)
    configure_request_middleware(app)

    app.logger.info("Flask application factory completed successfully")
    return app


if __name__ == '__main__':
    app = create_app()
    app.logger.info(f"Server running on port {app.config['PORT']}")
    app.run(host='0.0.0.0', port=app.config['PORT'], debug=app.debug)
