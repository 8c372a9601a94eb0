"""
Runtime configuration for the Split Payments MCP service.

All values come from the environment (Railway / Vercel style). create_app()
copies them into app.config, so tests can override any of them.
"""

import os

# Upstream merchant-onboarding API
SPLIT_API_URL = os.environ.get('SPLIT_API_URL', 'https://www.ccsplit.org/api')
SPLIT_API_KEY = os.environ.get('SPLIT_API_KEY', '')
SPLIT_API_TIMEOUT = float(os.environ.get('SPLIT_API_TIMEOUT', 30))

# Inbound auth for the tool endpoint (off by default, like the ChatGPT connector)
MCP_AUTH_ENABLED = os.environ.get('MCP_AUTH_ENABLED', 'false').lower() == 'true'
MCP_API_KEY = os.environ.get('MCP_API_KEY') or SPLIT_API_KEY

# Built widget HTML (auth.html, business-info.html, ...)
WIDGETS_DIR = os.environ.get(
    'WIDGETS_DIR',
    os.path.join(os.path.dirname(os.path.abspath(__file__)), 'static', 'widgets')
)

PORT = int(os.environ.get('PORT', 8080))


def as_dict() -> dict:
    """Snapshot of every setting, keyed the way app.config expects."""
    return {
        'SPLIT_API_URL': SPLIT_API_URL,
        'SPLIT_API_KEY': SPLIT_API_KEY,
        'SPLIT_API_TIMEOUT': SPLIT_API_TIMEOUT,
        'MCP_AUTH_ENABLED': MCP_AUTH_ENABLED,
        'MCP_API_KEY': MCP_API_KEY,
        'WIDGETS_DIR': WIDGETS_DIR,
    }
