"""
Split Payments Upstream Client

Thin wrapper over the merchant-onboarding REST API:

POST  /auth                                 - sign up / sign in
POST  /portal/application                   - create application
PATCH /portal/application/<id>              - save one profile section
POST  /portal/application/<id>/submit       - submit for review

Every request carries the X-API-Key header. No retries, no backoff:
a failed call surfaces as SplitAPIError and the caller decides.
"""

import sys
from typing import Optional, Dict, Any

import requests

DEFAULT_TIMEOUT = 30


class SplitAPIError(RuntimeError):
    """Upstream call failed (non-2xx status or network error)."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class SplitClient:

    def __init__(self, base_url: str, api_key: str, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key or ''
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        headers = {'X-API-Key': self.api_key}

        try:
            resp = self.session.request(method, url, json=payload, headers=headers,
                                        timeout=self.timeout)
        except requests.RequestException as e:
            print(f"[SPLIT] {method} {path} network error: {e}", file=sys.stderr)
            raise SplitAPIError(f"Upstream request failed: {e}") from e

        try:
            data = resp.json() if resp.content else {}
        except ValueError:
            data = {}

        if not 200 <= resp.status_code < 300:
            message = None
            if isinstance(data, dict):
                message = data.get('error') or data.get('message')
            message = message or f"Upstream returned HTTP {resp.status_code}"
            print(f"[SPLIT] {method} {path} status={resp.status_code} error={message}", file=sys.stderr)
            raise SplitAPIError(message, status_code=resp.status_code, payload=data)

        return data if isinstance(data, dict) else {'data': data}

    def authenticate(self, email: str, password: str, is_sign_up: bool = False,
                     name: Optional[str] = None) -> Dict[str, Any]:
        """Sign a user up or in. Returns {"userId", "email", ...}."""
        return self._request('POST', '/auth', {
            'email': email,
            'password': password,
            'isSignUp': is_sign_up,
            'name': name,
        })

    def create_application(self, user_id: str, email: str) -> Dict[str, Any]:
        """Open a merchant application. Returns {"applicationId", ...}."""
        return self._request('POST', '/portal/application', {
            'userId': user_id,
            'email': email,
        })

    def update_application(self, application_id: str, section: str,
                           data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request('PATCH', f'/portal/application/{application_id}', {section: data})

    def submit_application(self, application_id: str, terms_accepted: bool,
                           electronic_signature: str) -> Dict[str, Any]:
        return self._request('POST', f'/portal/application/{application_id}/submit', {
            'termsAccepted': terms_accepted,
            'electronicSignature': electronic_signature,
        })

    def close(self):
        self.session.close()
