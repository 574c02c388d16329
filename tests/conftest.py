"""Shared fixtures: an in-memory contact backend and recording prompts."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from contact_manager.config import Settings
from contact_manager.contact_list import same_id
from contact_manager.errors import ContactsAPIError
from contact_manager.models import Contact
from contact_manager.prompts import ScriptedPrompt


class FakeContactsClient:
    """Stands in for ContactsClient, keeping contacts in a list of dicts."""

    def __init__(self, contacts: Optional[List[Dict[str, Any]]] = None) -> None:
        self.store: List[Dict[str, Any]] = [dict(c) for c in contacts or []]
        self.calls: List[tuple] = []
        self.fail_on: set[str] = set()
        ids = [c["id"] for c in self.store if isinstance(c.get("id"), int)]
        self._next_id = max(ids, default=0) + 1

    @property
    def methods(self) -> List[str]:
        return [call[0] for call in self.calls]

    def _maybe_fail(self, method: str) -> None:
        if method in self.fail_on:
            raise ContactsAPIError(f"{method} failed with status 500", status=500)

    def list_contacts(self) -> List[Contact]:
        self.calls.append(("GET",))
        self._maybe_fail("GET")
        return [Contact.model_validate(item) for item in self.store]

    def create_contact(self, contact: Contact) -> Dict[str, Any]:
        payload = contact.to_payload()
        payload.pop("id", None)
        self.calls.append(("POST", dict(payload)))
        self._maybe_fail("POST")
        payload["id"] = self._next_id
        self._next_id += 1
        self.store.append(payload)
        return payload

    def update_contact(self, contact: Contact) -> Dict[str, Any]:
        payload = contact.to_payload()
        self.calls.append(("PUT", contact.id, dict(payload)))
        self._maybe_fail("PUT")
        for idx, item in enumerate(self.store):
            if same_id(item.get("id"), contact.id):
                self.store[idx] = payload
                return payload
        raise ContactsAPIError(f"Contact {contact.id} not found", status=404)

    def delete_contact(self, contact_id: Any) -> None:
        self.calls.append(("DELETE", contact_id))
        self._maybe_fail("DELETE")
        before = len(self.store)
        self.store = [c for c in self.store if not same_id(c.get("id"), contact_id)]
        if len(self.store) == before:
            raise ContactsAPIError(f"Contact {contact_id} not found", status=404)


SAMPLE_CONTACTS = [
    {
        "id": 1,
        "name": "Charlie Brown",
        "phone_number": "555-0101",
        "email": "charlie@example.com",
        "createdAt": "2024-03-01T09:00:00.000Z",
    },
    {
        "id": 2,
        "name": "alice Smith",
        "phone_number": "555-0102",
        "email": "zed@example.com",
        "createdAt": "2024-05-10T12:30:00.000Z",
    },
    {
        "id": 3,
        "name": "Bob Alison",
        "phone_number": "555-0103",
        "email": "bob@example.com",
        "createdAt": "2024-04-20T18:15:00.000Z",
        "lastUpdated": "2024-06-01T08:00:00.000Z",
    },
]


@pytest.fixture
def settings():
    return Settings(backend_url="http://contacts.test/api/", timeout_seconds=5, environment="test")


@pytest.fixture
def fake_client():
    return FakeContactsClient(SAMPLE_CONTACTS)


@pytest.fixture
def confirm_prompt():
    return ScriptedPrompt(answer=True)


@pytest.fixture
def decline_prompt():
    return ScriptedPrompt(answer=False)


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point configuration at an empty directory and clear CONTACTS_* vars."""
    for var in (
        "CONTACTS_BACKEND_URL",
        "CONTACTS_TIMEOUT",
        "CONTACTS_EDIT_MODE",
        "CONTACTS_DEFAULT_SORT",
        "CONTACTS_ENV",
        "CONTACTS_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("CONTACTS_CONFIG", str(tmp_path / "missing.yml"))
    monkeypatch.chdir(tmp_path)
    return tmp_path
