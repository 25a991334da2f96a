# config/security.py
"""
Security Configuration for the Contact API
"""

import os


class SecurityConfig:
    """Security configuration settings"""

    # Request body limit (JSON and urlencoded form posts)
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # 10MB

    # Rate limiting (Flask-Limiter)
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')
    RATELIMIT_STRATEGY = 'fixed-window'
    RATELIMIT_HEADERS_ENABLED = True
    # One per-IP bucket shared by every route
    APPLICATION_RATE_LIMIT = '100 per 15 minutes'
    CONTACT_RATE_LIMIT = '5 per hour'

    RATE_LIMIT_MESSAGE = 'Too many requests from this IP, please try again later.'
    CONTACT_RATE_LIMIT_MESSAGE = 'Too many contact form submissions, please try again later.'

    # Security headers
    SECURITY_HEADERS = {
        'X-Content-Type-Options': 'nosniff',
        'X-Frame-Options': 'DENY',
        'X-XSS-Protection': '0',
        'Strict-Transport-Security': 'max-age=31536000; includeSubDomains',
        'Content-Security-Policy': "default-src 'none'; frame-ancestors 'none'",
        'Referrer-Policy': 'no-referrer',
        'Cross-Origin-Resource-Policy': 'same-origin',
        'Permissions-Policy': 'camera=(), microphone=(), geolocation=()'
    }

    # CORS
    CORS_ALLOW_HEADERS = ['Content-Type', 'Authorization']
    CORS_SUPPORTS_CREDENTIALS = True

    # Optional callable(request) -> bool guarding the admin endpoints
    ADMIN_AUTHORIZER = None
