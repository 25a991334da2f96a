# api/admin.py
"""
Admin API for reviewing stored contact messages

Authorization is delegated to the ADMIN_AUTHORIZER hook; see
middleware.security.require_admin.
"""

from flask import Blueprint, current_app, jsonify
import logging

from core.exceptions import DatabaseError
from middleware.security import require_admin

admin_bp = Blueprint('admin', __name__)
logger = logging.getLogger(__name__)


@admin_bp.route('/admin/messages', methods=['GET'])
@require_admin
def list_messages():
    """All contact messages, newest first"""
    try:
        messages = current_app.extensions['contact_store'].list_all()
    except DatabaseError as e:
        logger.error(f"Admin messages error: {e}", exc_info=True)
        return jsonify({
            'error': 'Server error',
            'details': 'Failed to fetch messages.'
        }), 500

    return jsonify({
        'success': True,
        'data': messages,
        'count': len(messages)
    })
