"""
Onboarding Step Handlers

One handler per tool. Each takes (session, arguments, split_client) and
returns a StepOutcome: the structured tool result plus what to do with
the session record. Handlers never write the store themselves and never
raise on upstream failure; a failed step leaves the session at its prior
step so the widget can retry.

Step sequence:
    0 unauthenticated -> 1 authenticated -> 2 business info -> 3 owner info
    -> 4 business address -> 5 bank account -> 6 processing details
    -> submit (record deleted)
"""

import sys
from dataclasses import dataclass
from typing import Optional, Dict, Any, Callable

from split_client import SplitAPIError
from onboarding.catalog import (
    WIDGET_AUTH, WIDGET_BUSINESS_INFO, WIDGET_OWNER_INFO, WIDGET_BUSINESS_ADDRESS,
    WIDGET_BANK_ACCOUNT, WIDGET_PROCESSING_DETAILS, WIDGET_CONFIRMATION,
)
from onboarding.sessions import OnboardingSession, STEP_COMPLETE

# Reported to the widgets' progress bar (profile sections only)
TOTAL_STEPS = 5


@dataclass
class StepOutcome:
    result: Dict[str, Any]
    session: Optional[OnboardingSession] = None  # replacement record to store
    delete: bool = False


def tool_result(structured: Dict[str, Any], text: str, template: Optional[str] = None) -> Dict[str, Any]:
    """Build an MCP tool result carrying structuredContent for the widget."""
    result = {
        "content": [{"type": "text", "text": text}],
        "structuredContent": structured,
    }
    if template:
        result["_meta"] = {"openai/outputTemplate": template}
    return result


def mask_account_number(account_number) -> str:
    """Keep only the last 4 digits: 123456789 -> ****6789."""
    return f"****{str(account_number)[-4:]}"


def _log_failure(tool: str, e: SplitAPIError):
    print(f"[ONBOARD] {tool} failed: status={e.status_code} error={e}", file=sys.stderr)


# ------------------------------------------------------------------
# split_start_onboarding
# ------------------------------------------------------------------

def start_onboarding(session, args, client):
    return StepOutcome(tool_result(
        {
            "type": "start_auth",
            "isAuthenticated": session.authenticated,
            "currentStep": session.current_step,
            "message": "Welcome to Split Payments!",
        },
        "Welcome to Split Payments! Sign in or create an account to begin.",
        WIDGET_AUTH,
    ))


# ------------------------------------------------------------------
# split_authenticate
# POST /auth, then POST /portal/application (sequential)
# ------------------------------------------------------------------

def _auth_error(message):
    return StepOutcome(tool_result(
        {"type": "auth_error", "error": message},
        f"Error: {message}",
        WIDGET_AUTH,
    ))


def authenticate(session, args, client):
    if session.authenticated:
        return _auth_error("Already authenticated for this session")

    email = args.get("email")
    try:
        auth_data = client.authenticate(
            email,
            args.get("password"),
            is_sign_up=bool(args.get("isSignUp", False)),
            name=args.get("name"),
        )
    except SplitAPIError as e:
        _log_failure("split_authenticate", e)
        return _auth_error("Authentication failed")

    try:
        app_data = client.create_application(auth_data.get("userId"), email)
    except SplitAPIError as e:
        _log_failure("split_authenticate", e)
        return _auth_error("Failed to create application")

    application_id = app_data.get("applicationId")
    if not application_id:
        print("[ONBOARD] split_authenticate: upstream returned no applicationId", file=sys.stderr)
        return _auth_error("Failed to create application")

    updated = session.copy()
    updated.authenticated = True
    updated.email = email
    updated.user_id = auth_data.get("userId")
    updated.application_id = application_id
    updated.current_step = 1

    return StepOutcome(
        tool_result(
            {"type": "auth_success", "step": 1, "totalSteps": TOTAL_STEPS},
            "Signed in. Next: business information.",
            WIDGET_BUSINESS_INFO,
        ),
        session=updated,
    )


# ------------------------------------------------------------------
# Profile sections: PATCH /portal/application/<id>
# ------------------------------------------------------------------

@dataclass(frozen=True)
class ProfileSection:
    key: str          # profile key and PATCH body key
    step: int         # currentStep after a successful save
    saved_type: str
    label: str
    next_view: str


BUSINESS_INFO = ProfileSection("businessInfo", 2, "business_info_saved", "business info", WIDGET_OWNER_INFO)
OWNER_INFO = ProfileSection("ownerInfo", 3, "owner_info_saved", "owner info", WIDGET_BUSINESS_ADDRESS)
BUSINESS_ADDRESS = ProfileSection("businessAddress", 4, "address_saved", "address", WIDGET_BANK_ACCOUNT)
BANK_ACCOUNT = ProfileSection("bankAccount", 5, "bank_saved", "bank account", WIDGET_PROCESSING_DETAILS)
PROCESSING_DETAILS = ProfileSection(
    "processingDetails", 6, "ready_for_review", "processing details", WIDGET_CONFIRMATION
)


def _precondition_error(session, required_step, action):
    """None when the session may move to the next step, else a message."""
    if not session.application_id:
        return f"Sign in before {action}"
    if session.current_step != required_step:
        return f"Onboarding is at step {session.current_step}; {action} requires step {required_step}"
    return None


def _save_error(message, session):
    return StepOutcome(tool_result(
        {"type": "save_error", "error": message, "currentStep": session.current_step},
        f"Error: {message}",
    ))


def _save_section(section: ProfileSection, session, args, client,
                  stored: Optional[Dict[str, Any]] = None):
    """
    PATCH one section upstream and advance the session.

    stored: what to keep in the profile if it differs from what was sent
    (the bank account keeps a masked number).
    """
    problem = _precondition_error(session, section.step - 1, f"saving {section.label}")
    if problem:
        return _save_error(problem, session)

    try:
        client.update_application(session.application_id, section.key, dict(args))
    except SplitAPIError as e:
        _log_failure(f"save {section.key}", e)
        return _save_error(f"Failed to save {section.label}", session)

    updated = session.copy()
    updated.profile[section.key] = dict(stored if stored is not None else args)
    updated.current_step = section.step

    if section.step == STEP_COMPLETE:
        structured = {"type": section.saved_type, "allComplete": True, "profile": updated.to_dict()["profile"]}
        text = "All sections saved. Review and submit your application."
    else:
        structured = {"type": section.saved_type, "step": section.step, "totalSteps": TOTAL_STEPS}
        text = f"Saved {section.label}."

    return StepOutcome(tool_result(structured, text, section.next_view), session=updated)


def save_business_info(session, args, client):
    return _save_section(BUSINESS_INFO, session, args, client)


def save_owner_info(session, args, client):
    return _save_section(OWNER_INFO, session, args, client)


def save_business_address(session, args, client):
    return _save_section(BUSINESS_ADDRESS, session, args, client)


def save_bank_account(session, args, client):
    # Upstream gets the full number; the session only ever holds the last 4
    masked = dict(args)
    if masked.get("accountNumber") is not None:
        masked["accountNumber"] = mask_account_number(masked["accountNumber"])
    return _save_section(BANK_ACCOUNT, session, args, client, stored=masked)


def save_processing_details(session, args, client):
    return _save_section(PROCESSING_DETAILS, session, args, client)


# ------------------------------------------------------------------
# split_submit_application
# POST /portal/application/<id>/submit, then drop the session
# ------------------------------------------------------------------

def submit_application(session, args, client):
    def submit_error(message):
        return StepOutcome(tool_result(
            {"type": "submit_error", "error": message, "currentStep": session.current_step},
            f"Error: {message}",
        ))

    problem = _precondition_error(session, STEP_COMPLETE, "submitting the application")
    if problem:
        return submit_error(problem)

    try:
        data = client.submit_application(
            session.application_id,
            args.get("termsAccepted"),
            args.get("electronicSignature"),
        )
    except SplitAPIError as e:
        _log_failure("split_submit_application", e)
        return submit_error("Failed to submit application")

    return StepOutcome(
        tool_result(
            {
                "type": "application_submitted",
                "applicationId": data.get("applicationId") or session.application_id,
                "status": data.get("status"),
            },
            "Application submitted. We'll be in touch about next steps.",
        ),
        delete=True,
    )


STEP_HANDLERS: Dict[str, Callable] = {
    "split_start_onboarding": start_onboarding,
    "split_authenticate": authenticate,
    "split_save_business_info": save_business_info,
    "split_save_owner_info": save_owner_info,
    "split_save_business_address": save_business_address,
    "split_save_bank_account": save_bank_account,
    "split_save_processing_details": save_processing_details,
    "split_submit_application": submit_application,
}
