# api/contact.py
"""
Public contact form API
"""

from flask import Blueprint, current_app, jsonify, request
import logging

from middleware.security import (
    contact_rate_limit, contact_rate_limit_message, get_client_ip, limiter
)

contact_bp = Blueprint('contact', __name__)
logger = logging.getLogger(__name__)


@contact_bp.route('/contact', methods=['POST'])
@limiter.limit(contact_rate_limit, error_message=contact_rate_limit_message)
async def submit_contact():
    """
    Accept a contact form submission (JSON or urlencoded form body)

    200: {success, message, data: {id, timestamp}}
    400: {error, details} for validation failures
    500: {error, details[, debug]}
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = request.form.to_dict()

    handler = current_app.extensions['contact_handler']
    status_code, body = await handler.handle(payload, get_client_ip())
    return jsonify(body), status_code
