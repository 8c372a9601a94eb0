# ============================================================
# Tool + Resource Catalogs
# ============================================================
# Fixed lists served by tools/list and resources/list.
# One widget per onboarding view, built to WIDGETS_DIR/<view>.html

WIDGET_MIME_TYPE = "text/html+skybridge"

WIDGET_AUTH = "ui://widget/auth.html"
WIDGET_BUSINESS_INFO = "ui://widget/business-info.html"
WIDGET_OWNER_INFO = "ui://widget/owner-info.html"
WIDGET_BUSINESS_ADDRESS = "ui://widget/business-address.html"
WIDGET_BANK_ACCOUNT = "ui://widget/bank-account.html"
WIDGET_PROCESSING_DETAILS = "ui://widget/processing-details.html"
WIDGET_CONFIRMATION = "ui://widget/confirmation.html"

MCP_RESOURCES = [
    {"uri": WIDGET_AUTH, "name": "Auth Widget", "mimeType": WIDGET_MIME_TYPE},
    {"uri": WIDGET_BUSINESS_INFO, "name": "Business Info Widget", "mimeType": WIDGET_MIME_TYPE},
    {"uri": WIDGET_OWNER_INFO, "name": "Owner Info Widget", "mimeType": WIDGET_MIME_TYPE},
    {"uri": WIDGET_BUSINESS_ADDRESS, "name": "Business Address Widget", "mimeType": WIDGET_MIME_TYPE},
    {"uri": WIDGET_BANK_ACCOUNT, "name": "Bank Account Widget", "mimeType": WIDGET_MIME_TYPE},
    {"uri": WIDGET_PROCESSING_DETAILS, "name": "Processing Details Widget", "mimeType": WIDGET_MIME_TYPE},
    {"uri": WIDGET_CONFIRMATION, "name": "Confirmation Widget", "mimeType": WIDGET_MIME_TYPE},
]


def widget_filename(uri):
    """ui://widget/bank-account.html -> bank-account.html (None if not a known widget)."""
    if not isinstance(uri, str) or uri not in {r["uri"] for r in MCP_RESOURCES}:
        return None
    return uri.rsplit("/", 1)[-1]


def _template(uri):
    return {"openai/outputTemplate": uri}


MCP_TOOLS = [
    {
        "name": "split_start_onboarding",
        "description": "Start the Split Payments merchant onboarding process",
        "inputSchema": {"type": "object", "properties": {}},
        "_meta": _template(WIDGET_AUTH)
    },
    {
        "name": "split_authenticate",
        "description": "Authenticate user for Split Payments",
        "inputSchema": {
            "type": "object",
            "properties": {
                "email": {"type": "string"},
                "password": {"type": "string"},
                "isSignUp": {"type": "boolean"},
                "name": {"type": "string"}
            },
            "required": ["email", "password"]
        },
        "_meta": _template(WIDGET_BUSINESS_INFO)
    },
    {
        "name": "split_save_business_info",
        "description": "Save business information",
        "inputSchema": {
            "type": "object",
            "properties": {
                "legalBusinessName": {"type": "string"},
                "dbaName": {"type": "string"},
                "ein": {"type": "string"},
                "businessType": {"type": "string"},
                "phoneNumber": {"type": "string"}
            },
            "required": ["legalBusinessName", "ein", "businessType", "phoneNumber"]
        },
        "_meta": _template(WIDGET_OWNER_INFO)
    },
    {
        "name": "split_save_owner_info",
        "description": "Save owner information",
        "inputSchema": {
            "type": "object",
            "properties": {
                "firstName": {"type": "string"},
                "lastName": {"type": "string"},
                "ssn": {"type": "string"},
                "dateOfBirth": {"type": "string"},
                "ownershipPercentage": {"type": "number"}
            },
            "required": ["firstName", "lastName", "ssn", "dateOfBirth", "ownershipPercentage"]
        },
        "_meta": _template(WIDGET_BUSINESS_ADDRESS)
    },
    {
        "name": "split_save_business_address",
        "description": "Save business address",
        "inputSchema": {
            "type": "object",
            "properties": {
                "streetAddress": {"type": "string"},
                "city": {"type": "string"},
                "state": {"type": "string"},
                "zipCode": {"type": "string"}
            },
            "required": ["streetAddress", "city", "state", "zipCode"]
        },
        "_meta": _template(WIDGET_BANK_ACCOUNT)
    },
    {
        "name": "split_save_bank_account",
        "description": "Save bank account for deposits",
        "inputSchema": {
            "type": "object",
            "properties": {
                "bankName": {"type": "string"},
                "accountType": {"type": "string"},
                "routingNumber": {"type": "string"},
                "accountNumber": {"type": "string"},
                "accountHolderName": {"type": "string"}
            },
            "required": ["bankName", "accountType", "routingNumber", "accountNumber", "accountHolderName"]
        },
        "_meta": _template(WIDGET_PROCESSING_DETAILS)
    },
    {
        "name": "split_save_processing_details",
        "description": "Save processing details",
        "inputSchema": {
            "type": "object",
            "properties": {
                "averageTicketSize": {"type": "number"},
                "monthlyVolume": {"type": "number"},
                "businessDescription": {"type": "string"},
                "salesMethod": {"type": "string"}
            },
            "required": ["averageTicketSize", "monthlyVolume", "businessDescription", "salesMethod"]
        },
        "_meta": _template(WIDGET_CONFIRMATION)
    },
    {
        "name": "split_submit_application",
        "description": "Submit the completed merchant application",
        "inputSchema": {
            "type": "object",
            "properties": {
                "termsAccepted": {"type": "boolean"},
                "electronicSignature": {"type": "string"}
            },
            "required": ["termsAccepted", "electronicSignature"]
        }
    },
]
