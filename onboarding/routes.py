"""
Split Payments MCP Routes

POST /mcp   - JSON-RPC 2.0 tool protocol (initialize, tools/list, tools/call,
              resources/list, resources/read, ping)
GET  /mcp   - health check

Tool execution errors come back as tool *results* (HTTP 200) so the widget
can render them; only an unreadable body is an HTTP 500.
"""

import os
import sys
import time
import uuid
from flask import Blueprint, request, jsonify, current_app

from onboarding.catalog import MCP_TOOLS, MCP_RESOURCES, WIDGET_MIME_TYPE, widget_filename
from onboarding.sessions import OnboardingSession
from onboarding.steps import STEP_HANDLERS

MCP_PROTOCOL_VERSION = "2024-11-05"
MCP_SERVER_NAME = "split-payments-chatgpt-mcp"
MCP_SERVER_VERSION = "1.0.0"

MCP_INSTRUCTIONS = """Split Payments merchant onboarding.

Call split_start_onboarding first. Each widget calls the next tool itself:
authenticate, then business info, owner info, business address, bank account,
processing details, and finally submit. Steps must be completed in order."""

# JSON-RPC error codes
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
RESOURCE_NOT_FOUND = -32002


def mcp_error_response(req_id, code, message):
    """Build JSON-RPC error response."""
    return {
        "jsonrpc": "2.0",
        "id": req_id,
        "error": {"code": code, "message": message}
    }


def mcp_success_response(req_id, result):
    """Build JSON-RPC success response."""
    return {
        "jsonrpc": "2.0",
        "id": req_id,
        "result": result
    }


def resolve_session_id(params):
    """
    Session key for a tool call: the ChatGPT subject when the host sends one,
    otherwise a fresh id (the call then runs against a new step-0 session).
    """
    meta = params.get("_meta")
    if isinstance(meta, dict) and meta.get("openai/subject"):
        return str(meta["openai/subject"])
    return f"session_{uuid.uuid4().hex}"


def handle_tool_call(req_id, params, session_store, split_client):
    """Route a tools/call to its step handler under the session's lock."""
    tool_name = params.get("name")
    tool_args = params.get("arguments") or {}

    if not tool_name:
        return mcp_error_response(req_id, INVALID_PARAMS, "Missing tool name")

    handler = STEP_HANDLERS.get(tool_name) if isinstance(tool_name, str) else None
    if handler is None:
        return mcp_error_response(req_id, METHOD_NOT_FOUND, f"Tool not found: {tool_name}")

    session_id = resolve_session_id(params)
    start_time = time.time()

    with session_store.lock(session_id):
        session = session_store.get(session_id) or OnboardingSession()
        try:
            outcome = handler(session, tool_args, split_client)
        except Exception as e:
            print(f"[MCP] tool={tool_name} session={session_id} raised {type(e).__name__}: {e}", file=sys.stderr)
            result = {
                "content": [{"type": "text", "text": f"Error: {e}"}],
                "structuredContent": {"type": "tool_error", "error": str(e)},
                "isError": True
            }
        else:
            if outcome.delete:
                session_store.delete(session_id)
            elif outcome.session is not None:
                session_store.set(session_id, outcome.session)
            result = outcome.result

    duration_ms = int((time.time() - start_time) * 1000)
    result_type = result.get("structuredContent", {}).get("type")
    print(f"[MCP] tool={tool_name} session={session_id} type={result_type} duration={duration_ms}ms",
          file=sys.stderr)

    return mcp_success_response(req_id, result)


def read_widget(req_id, params, widgets_dir):
    uri = params.get("uri")
    filename = widget_filename(uri)
    path = os.path.join(widgets_dir, filename) if filename and widgets_dir else None

    if not path or not os.path.isfile(path):
        return mcp_error_response(req_id, RESOURCE_NOT_FOUND, f"Resource not found: {uri}")

    with open(path, encoding="utf-8") as f:
        html = f.read()

    return mcp_success_response(req_id, {
        "contents": [{"uri": uri, "mimeType": WIDGET_MIME_TYPE, "text": html}]
    })


def handle_mcp_request(data, session_store, split_client, widgets_dir=None):
    """
    Dispatch one JSON-RPC request.
    Returns (body, status_code); body is None for notifications.
    """
    req_id = data.get("id")
    method = data.get("method")
    params = data.get("params") or {}

    print(f"[MCP] method={method} id={req_id}", file=sys.stderr)

    # tools/call and resources/read read named params; other methods ignore them
    if method in ("tools/call", "resources/read") and not isinstance(params, dict):
        return mcp_error_response(req_id, INVALID_PARAMS, "params must be an object"), 200

    # ===== NOTIFICATIONS (no response body) =====
    if isinstance(method, str) and method.startswith("notifications/"):
        return None, 202

    # ===== INITIALIZE =====
    if method == "initialize":
        result = {
            "protocolVersion": MCP_PROTOCOL_VERSION,
            "serverInfo": {
                "name": MCP_SERVER_NAME,
                "version": MCP_SERVER_VERSION
            },
            "capabilities": {
                "tools": {"listChanged": False},
                "resources": {"listChanged": False}
            },
            "instructions": MCP_INSTRUCTIONS
        }
        return mcp_success_response(req_id, result), 200

    elif method == "ping":
        return mcp_success_response(req_id, {}), 200

    # ===== TOOLS =====
    elif method == "tools/list":
        return mcp_success_response(req_id, {"tools": MCP_TOOLS}), 200

    elif method == "tools/call":
        return handle_tool_call(req_id, params, session_store, split_client), 200

    # ===== RESOURCES =====
    elif method == "resources/list":
        return mcp_success_response(req_id, {"resources": MCP_RESOURCES}), 200

    elif method == "resources/read":
        return read_widget(req_id, params, widgets_dir), 200

    # ===== UNKNOWN METHOD =====
    else:
        return mcp_error_response(req_id, METHOD_NOT_FOUND, f"Method not found: {method}"), 200


def init_onboarding(session_store, split_client):
    """Build the MCP blueprint around a session store and upstream client."""
    onboarding_bp = Blueprint('onboarding', __name__, url_prefix='/mcp')

    @onboarding_bp.route('', methods=['POST'])
    def mcp_handler():
        """
        MCP Streamable HTTP endpoint.

        Request body:
            {"jsonrpc": "2.0", "id": 1, "method": "tools/call",
             "params": {"name": "split_authenticate",
                        "arguments": {"email": "...", "password": "..."},
                        "_meta": {"openai/subject": "<session id>"}}}
        """
        try:
            data = request.get_json(force=True)
            if not isinstance(data, dict):
                raise ValueError("request body must be a JSON object")
            body, status_code = handle_mcp_request(
                data, session_store, split_client, current_app.config.get('WIDGETS_DIR')
            )
        except Exception as e:
            print(f"[MCP] Error: {e}", file=sys.stderr)
            return jsonify({'error': 'Internal server error'}), 500

        if body is None:
            return '', status_code
        return jsonify(body), status_code

    @onboarding_bp.route('', methods=['GET'])
    def mcp_health():
        """Health check for MCP endpoint."""
        return jsonify({
            "status": "ok",
            "server": MCP_SERVER_NAME,
            "version": MCP_SERVER_VERSION,
            "protocol": MCP_PROTOCOL_VERSION,
            "tools_count": len(MCP_TOOLS)
        })

    return onboarding_bp
