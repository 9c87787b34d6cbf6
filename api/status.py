# api/status.py
"""
Read-only status endpoints
"""

from flask import Blueprint, jsonify

status_bp = Blueprint('status', __name__)


@status_bp.route('/', methods=['GET'])
def index():
    return 'Backend is running 🚀'


@status_bp.route('/api/hello', methods=['GET'])
def hello():
    return 'API is working 🚀'


@status_bp.route('/api/health', methods=['GET'])
def health_check():
    """Liveness check, independent of the mail transport"""
    return jsonify({'ok': True})
