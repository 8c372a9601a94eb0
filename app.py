#!/usr/bin/env python3
"""
Split Payments MCP API - Conversational Merchant Onboarding
Serves the ChatGPT tool protocol and forwards each onboarding step
to the Split Payments application API.
"""

import sys
from flask import Flask, jsonify
from flask_cors import CORS

import config
from auth import check_mcp_auth
from onboarding.routes import init_onboarding, MCP_SERVER_NAME, MCP_SERVER_VERSION
from onboarding.sessions import InMemorySessionStore
from split_client import SplitClient


def create_app(config_overrides=None, session_store=None, split_client=None):
    """
    Build the Flask app.

    session_store / split_client default to the in-memory store and a
    client for SPLIT_API_URL; tests pass their own.
    """
    app = Flask(__name__)
    CORS(app)

    app.config.update(config.as_dict())
    if config_overrides:
        app.config.update(config_overrides)

    if session_store is None:
        session_store = InMemorySessionStore()
    if split_client is None:
        split_client = SplitClient(
            app.config['SPLIT_API_URL'],
            app.config['SPLIT_API_KEY'],
            timeout=app.config['SPLIT_API_TIMEOUT'],
        )

    print(f"[STARTUP] Upstream: {app.config['SPLIT_API_URL']} "
          f"key set: {bool(app.config['SPLIT_API_KEY'])} "
          f"auth enabled: {app.config['MCP_AUTH_ENABLED']}", file=sys.stderr)

    app.extensions['session_store'] = session_store
    app.extensions['split_client'] = split_client

    app.before_request(check_mcp_auth)

    app.register_blueprint(init_onboarding(session_store, split_client))

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({
            "status": "ok",
            "server": MCP_SERVER_NAME,
            "version": MCP_SERVER_VERSION
        })

    return app


app = create_app()


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=config.PORT, debug=False)
