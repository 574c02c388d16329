"""Confirmed destructive actions."""
from __future__ import annotations

import logging
from typing import Optional

from .contact_list import ContactListState
from .editing import EditSession
from .errors import ContactsAPIError
from .models import ContactId
from .prompts import ConfirmationPrompt, PromptKind

logger = logging.getLogger(__name__)


def delete_contact(
    contact_list: ContactListState,
    contact_id: ContactId,
    prompt: ConfirmationPrompt,
    *,
    session: Optional[EditSession] = None,
) -> bool:
    """Delete a contact after the user confirms.

    Both outcomes are reported through ``prompt``. Returns ``True`` when the
    backend deleted the contact.
    """
    confirmed = prompt.ask(
        "Confirm Deletion",
        "Are you sure you want to delete this contact?",
        PromptKind.WARNING,
        confirmable=True,
        confirm_label="Delete",
        cancel_label="Cancel",
    )
    if not confirmed:
        return False

    try:
        contact_list.client.delete_contact(contact_id)
    except ContactsAPIError as exc:
        logger.error(f"[delete] {exc}")
        prompt.notify("Error", "An error occurred while deleting the contact.", PromptKind.ERROR)
        return False

    if session is not None and session.is_editing(contact_id):
        session.cancel()
    contact_list.refresh()
    prompt.notify("Deleted!", "Contact has been deleted.", PromptKind.SUCCESS)
    return True
