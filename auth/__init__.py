"""
Auth Module for the Split Payments MCP service
Domain: Inbound API key check

Callers present the shared key as `Authorization: Bearer <key>` (or the
X-API-Key header). Enforcement is off unless MCP_AUTH_ENABLED is set.
"""

import sys
import secrets
from flask import request, jsonify, current_app, g

# Only tool-protocol POSTs are gated; health checks stay public
PROTECTED_PREFIXES = ('/mcp',)


def extract_api_key():
    """Pull the caller's key from the request headers (None if absent)."""
    auth_header = request.headers.get('Authorization', '')
    if auth_header.startswith('Bearer '):
        return auth_header[7:].strip() or None
    return request.headers.get('X-API-Key') or None


def verify_api_key(provided: str, expected: str) -> bool:
    """Constant-time comparison; an unconfigured key never matches."""
    if not expected:
        print('[AUTH] MCP_API_KEY not configured', file=sys.stderr)
        return False
    if not provided:
        return False
    return secrets.compare_digest(provided.encode(), expected.encode())


def check_mcp_auth():
    """
    before_request hook.
    Returns None if OK, or (response, status) if denied.
    """
    if not current_app.config.get('MCP_AUTH_ENABLED'):
        g.mcp_auth = {'source': 'disabled'}
        return None

    if request.method != 'POST' or not request.path.startswith(PROTECTED_PREFIXES):
        return None

    if verify_api_key(extract_api_key(), current_app.config.get('MCP_API_KEY')):
        g.mcp_auth = {'source': 'api_key'}
        return None

    print(f'[AUTH] Rejected {request.method} {request.path} from {request.remote_addr}', file=sys.stderr)
    return jsonify({
        'error': 'unauthorized',
        'error_description': 'Valid API key required'
    }), 401
