"""Draft fields for the "new contact" form."""
from __future__ import annotations

import logging
import re
from typing import Dict, List

from .contact_list import ContactListState
from .errors import ContactsAPIError, FormValidationError
from .models import EDITABLE_FIELDS, Contact, now_iso
from .prompts import ConfirmationPrompt, PromptKind

logger = logging.getLogger(__name__)

# Same acceptance rule as a browser email input: something@something, no spaces.
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")


class FormController:
    """Holds the new-contact draft and submits it to the backend."""

    def __init__(self, contact_list: ContactListState, prompt: ConfirmationPrompt) -> None:
        self.contact_list = contact_list
        self.prompt = prompt
        self.fields: Dict[str, str] = {key: "" for key in EDITABLE_FIELDS}

    def update_field(self, key: str, value: str) -> None:
        if key not in self.fields:
            raise KeyError(f"Unknown form field: {key}")
        self.fields[key] = value

    def clear(self) -> None:
        self.fields = {key: "" for key in EDITABLE_FIELDS}

    def validate(self) -> List[str]:
        """Return the names of fields that would block submission."""
        problems = [key for key in EDITABLE_FIELDS if not self.fields[key].strip()]
        email = self.fields["email"].strip()
        if email and not _EMAIL_RE.match(email):
            problems.append("email")
        return problems

    def submit(self) -> bool:
        """Create a contact from the draft.

        Returns ``True`` when the backend accepted it. On failure the draft is
        kept so the user can retry.

        Raises:
            FormValidationError: if a field is empty or the email is malformed.
        """
        problems = self.validate()
        if problems:
            raise FormValidationError(
                f"Please fill in a valid value for: {', '.join(problems)}", fields=problems
            )

        contact = Contact(**dict(self.fields), created_at=now_iso())
        try:
            self.contact_list.client.create_contact(contact)
        except ContactsAPIError as exc:
            logger.error(f"[create] {exc}")
            self.prompt.notify(
                "Error", "An error occurred while adding the contact.", PromptKind.ERROR
            )
            return False

        self.clear()
        self.contact_list.refresh()
        self.prompt.notify("Success", "Contact added successfully!", PromptKind.SUCCESS)
        return True
