import json

import pytest

from src.shared.contact.recipients import (
    DEFAULT_RECIPIENT,
    DEFAULT_RECIPIENTS,
    RecipientDirectoryError,
    form_label,
    load_recipient_directory,
    resolve_recipient,
)


def test_known_form_type_maps_to_its_mailbox():
    assert resolve_recipient(DEFAULT_RECIPIENTS, "transport") == "logistics@themahalaxmigroup.com"
    assert resolve_recipient(DEFAULT_RECIPIENTS, "dist") == "distributors@themahalaxmigroup.com"


def test_unknown_form_type_falls_back_to_general():
    directory = {"general": "desk@example.com"}
    assert resolve_recipient(directory, "careers") == "desk@example.com"


def test_missing_general_falls_back_to_default():
    assert resolve_recipient({"oem": "oem@example.com"}, "careers") == DEFAULT_RECIPIENT


def test_form_labels():
    assert form_label("chemicals") == "Chemicals Division"
    assert form_label("transport") == "Transport & Logistics"
    assert form_label("something-new") == "Website Inquiry"


def test_builtin_directory_when_no_file_configured():
    directory = load_recipient_directory(None)
    assert directory == DEFAULT_RECIPIENTS
    # A copy; callers cannot change the built-in table
    directory["general"] = "changed@example.com"
    assert DEFAULT_RECIPIENTS["general"] == "info@themahalaxmigroup.com"


def test_directory_file_replaces_builtin_table(tmp_path):
    path = tmp_path / "emails.json"
    path.write_text(json.dumps({"general": "desk@example.com"}))

    assert load_recipient_directory(str(path)) == {"general": "desk@example.com"}


def test_missing_directory_file(tmp_path):
    with pytest.raises(RecipientDirectoryError):
        load_recipient_directory(str(tmp_path / "nope.json"))


@pytest.mark.parametrize("content", ["{not json", "[\"a\"]", "{\"general\": 5}"])
def test_malformed_directory_file(tmp_path, content):
    path = tmp_path / "emails.json"
    path.write_text(content)

    with pytest.raises(RecipientDirectoryError):
        load_recipient_directory(str(path))
