# config/__init__.py
"""
Environment-based configuration for the Contact API

Values are read from the process environment once, when this module is
imported at startup. Missing datastore or mail settings are allowed: the
affected collaborators report themselves as unconfigured instead of failing
application startup.
"""

import os
from typing import List, Optional

from config.security import SecurityConfig


def env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def env_list(name: str) -> Optional[List[str]]:
    value = os.environ.get(name)
    if not value:
        return None
    return [item.strip() for item in value.split(',') if item.strip()]


class Config(SecurityConfig):
    """Settings shared by every environment"""

    ENVIRONMENT = 'development'
    DEBUG = False
    TESTING = False
    PORT = int(os.environ.get('PORT', 5000))
    VERSION = os.environ.get('APP_VERSION', '1.0.0')

    # Datastore
    DATABASE_URL = os.environ.get('DATABASE_URL')
    DB_POOL_SIZE = int(os.environ.get('DB_POOL_SIZE', 5))
    DB_MAX_OVERFLOW = int(os.environ.get('DB_MAX_OVERFLOW', 10))
    DB_CONNECT_TIMEOUT = int(os.environ.get('DB_CONNECT_TIMEOUT', 10))
    AUTO_CREATE_SCHEMA = False

    # Mail relay
    SMTP_HOST = os.environ.get('SMTP_HOST')
    SMTP_PORT = int(os.environ.get('SMTP_PORT', 587))
    SMTP_SECURE = env_flag('SMTP_SECURE')
    SMTP_USER = os.environ.get('SMTP_USER')
    SMTP_PASS = os.environ.get('SMTP_PASS')
    SMTP_TIMEOUT = float(os.environ.get('SMTP_TIMEOUT', 60))
    SMTP_FROM = os.environ.get('SMTP_FROM')
    ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL')

    # Auto-reply content
    BRAND_NAME = os.environ.get('BRAND_NAME', 'HafTech')
    PORTFOLIO_URL = os.environ.get('PORTFOLIO_URL', 'https://your-portfolio.vercel.app/#portfolio')
    WHATSAPP_URL = os.environ.get('WHATSAPP_URL', 'https://wa.me/+2348128653553')
    LINKEDIN_URL = os.environ.get('LINKEDIN_URL', 'https://linkedin.com/in/haftech')
    SIGNATURE_NAME = os.environ.get('SIGNATURE_NAME', 'Ariyo Faruq')
    SIGNATURE_TITLE = os.environ.get('SIGNATURE_TITLE', 'CEO & Founder, HafTech')
    SIGNATURE_EMAIL = os.environ.get('SIGNATURE_EMAIL', 'contact@haftech.com')
    SIGNATURE_PHONE = os.environ.get('SIGNATURE_PHONE', '+234 8128 653 553')

    # CORS
    CORS_ORIGINS = env_list('CORS_ORIGINS') or [
        'http://localhost:5173',
        'http://localhost:3000'
    ]

    # Logging and monitoring
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FILE = os.environ.get('LOG_FILE')
    SLOW_REQUEST_THRESHOLD = 1000  # ms

    # Raw datastore errors are echoed as `debug` outside production
    EXPOSE_ERROR_DETAILS = True


class DevelopmentConfig(Config):
    ENVIRONMENT = 'development'
    DEBUG = True
    AUTO_CREATE_SCHEMA = True


class TestingConfig(Config):
    ENVIRONMENT = 'testing'
    TESTING = True
    RATELIMIT_ENABLED = False
    DATABASE_URL = 'sqlite://'
    SMTP_HOST = 'smtp.test'
    SMTP_FROM = 'Portfolio <noreply@example.com>'
    ADMIN_EMAIL = 'admin@example.com'
    CORS_ORIGINS = ['http://localhost:5173']


class ProductionConfig(Config):
    ENVIRONMENT = 'production'
    EXPOSE_ERROR_DETAILS = False
    CORS_ORIGINS = env_list('CORS_ORIGINS') or [
        os.environ.get('CLIENT_URL_PROD', 'https://your-portfolio.vercel.app'),
        'https://portfolio-project-frontend.vercel.app',
        r'https://.*\.vercel\.app'
    ]


CONFIGS = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
}
