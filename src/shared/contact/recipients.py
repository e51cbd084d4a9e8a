"""
Recipient directory for contact forms.

Each key is a form type sent by the front-end; the value is the mailbox that
receives inquiries from that form. Set RECIPIENTS_FILE to a JSON object of the
same shape to replace the built-in table without a code change.
"""

import json
import logging
import os
from typing import Dict, Optional

# Last resort when neither the form type nor "general" is in the directory
DEFAULT_RECIPIENT = "info@themahalaxmigroup.com"

DEFAULT_RECIPIENTS: Dict[str, str] = {
    # Main contact page tabs
    "general": "info@themahalaxmigroup.com",
    "product": "sales@themahalaxmigroup.com",
    "dist": "distributors@themahalaxmigroup.com",
    "oem": "oem@themahalaxmigroup.com",
    # Division page forms
    "chemicals": "chemicals@themahalaxmigroup.com",
    "millennium": "info@themahalaxmigroup.com",
    "shiv": "info@themahalaxmigroup.com",
    "transport": "logistics@themahalaxmigroup.com",
    "infra": "info@themahalaxmigroup.com",
    # Other forms
    "callback": "info@themahalaxmigroup.com",
    "inquiry": "sales@themahalaxmigroup.com",
}

FORM_LABELS: Dict[str, str] = {
    "general": "General Inquiry",
    "product": "Product Sales",
    "dist": "Distributor Inquiry",
    "oem": "OEM Partnership",
    "chemicals": "Chemicals Division",
    "millennium": "Millennium Division",
    "shiv": "Shiv Minerals",
    "transport": "Transport & Logistics",
    "infra": "Infrastructure",
    "callback": "Callback Request",
    "inquiry": "Product Inquiry",
}
DEFAULT_FORM_LABEL = "Website Inquiry"


class RecipientDirectoryError(Exception):
    """The configured recipient directory is missing or malformed."""


def load_recipient_directory(path: Optional[str] = None) -> Dict[str, str]:
    """
    Load the form-type to mailbox mapping.

    Args:
        path: JSON file to load; None means the built-in table

    Raises:
        RecipientDirectoryError if the file is missing, unreadable or not a
        flat object of strings
    """
    if not path:
        return dict(DEFAULT_RECIPIENTS)

    if not os.path.isfile(path):
        logging.error(f"Missing recipient directory file: {path}")
        raise RecipientDirectoryError(f"Missing config file: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logging.error(f"Unreadable recipient directory file {path}: {str(e)}")
        raise RecipientDirectoryError(str(e)) from e

    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        logging.error(f"Recipient directory file {path} must map form types to email addresses")
        raise RecipientDirectoryError(f"Malformed config file: {path}")

    return data


def resolve_recipient(directory: Dict[str, str], form_type: str) -> str:
    """Mailbox for a form type, falling back to "general" and then the default address."""
    return directory.get(form_type) or directory.get("general") or DEFAULT_RECIPIENT


def form_label(form_type: str) -> str:
    return FORM_LABELS.get(form_type, DEFAULT_FORM_LABEL)
