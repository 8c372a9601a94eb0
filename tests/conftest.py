from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from split_client import SplitAPIError


class FakeSplitClient:
    """Stands in for SplitClient; records calls and fails on demand."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.failures: Dict[str, SplitAPIError] = {}
        self.application_id: Optional[str] = "app_123"

    def fail(self, method: str, status_code: int = 500, message: str = "upstream down") -> None:
        self.failures[method] = SplitAPIError(message, status_code=status_code)

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method,) + args)
        if method in self.failures:
            raise self.failures[method]

    def methods_called(self) -> List[str]:
        return [c[0] for c in self.calls]

    def authenticate(self, email, password, is_sign_up=False, name=None):
        self._record("authenticate", email, is_sign_up, name)
        return {"userId": "user_1", "email": email}

    def create_application(self, user_id, email):
        self._record("create_application", user_id, email)
        return {"applicationId": self.application_id}

    def update_application(self, application_id, section, data):
        self._record("update_application", application_id, section, dict(data))
        return {}

    def submit_application(self, application_id, terms_accepted, electronic_signature):
        self._record("submit_application", application_id, terms_accepted, electronic_signature)
        return {"applicationId": application_id, "status": "submitted"}


BUSINESS_INFO = {
    "legalBusinessName": "Acme Coffee LLC",
    "dbaName": "Acme Coffee",
    "ein": "12-3456789",
    "businessType": "llc",
    "phoneNumber": "555-0100",
}
OWNER_INFO = {
    "firstName": "Sam",
    "lastName": "Rivera",
    "ssn": "123-45-6789",
    "dateOfBirth": "1985-04-12",
    "ownershipPercentage": 100,
}
BUSINESS_ADDRESS = {
    "streetAddress": "1 Main St",
    "city": "Austin",
    "state": "TX",
    "zipCode": "78701",
}
BANK_ACCOUNT = {
    "bankName": "First Bank",
    "accountType": "checking",
    "routingNumber": "021000021",
    "accountNumber": "123456789",
    "accountHolderName": "Acme Coffee LLC",
}
PROCESSING_DETAILS = {
    "averageTicketSize": 12.5,
    "monthlyVolume": 40000,
    "businessDescription": "Coffee shop",
    "salesMethod": "in_person",
}

# (tool, arguments) in onboarding order, after authentication
PROFILE_STEPS = [
    ("split_save_business_info", BUSINESS_INFO),
    ("split_save_owner_info", OWNER_INFO),
    ("split_save_business_address", BUSINESS_ADDRESS),
    ("split_save_bank_account", BANK_ACCOUNT),
    ("split_save_processing_details", PROCESSING_DETAILS),
]


@pytest.fixture
def split_client() -> FakeSplitClient:
    return FakeSplitClient()


@pytest.fixture
def session_store():
    from onboarding.sessions import InMemorySessionStore

    return InMemorySessionStore()


@pytest.fixture
def app(split_client, session_store):
    from app import create_app

    return create_app(
        config_overrides={"MCP_AUTH_ENABLED": False, "TESTING": True},
        session_store=session_store,
        split_client=split_client,
    )


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def call_tool(client):
    """POST a tools/call for one subject and return the JSON-RPC body."""
    counter = {"id": 0}

    def _call(name: str, arguments: Optional[Dict[str, Any]] = None, subject: Optional[str] = "user-abc"):
        counter["id"] += 1
        params: Dict[str, Any] = {"name": name, "arguments": arguments or {}}
        if subject is not None:
            params["_meta"] = {"openai/subject": subject}
        resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": counter["id"], "method": "tools/call", "params": params})
        assert resp.status_code == 200
        return resp.get_json()

    return _call
