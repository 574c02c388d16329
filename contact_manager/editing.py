"""Single-contact edit session."""
from __future__ import annotations

import logging
from typing import Optional

from .contact_list import ContactListState, same_id
from .errors import ContactsAPIError, EditSessionError
from .models import EDITABLE_FIELDS, Contact, ContactId, now_iso
from .prompts import ConfirmationPrompt, PromptKind

logger = logging.getLogger(__name__)


class EditSession:
    """Tracks the one contact being edited, if any.

    In ``draft`` mode edits are kept in a private copy until saved and
    :meth:`cancel` throws them away. In ``in_place`` mode edits go straight
    into the contact list, so they stay visible after a cancel until the next
    refresh.
    """

    def __init__(
        self,
        contact_list: ContactListState,
        prompt: ConfirmationPrompt,
        *,
        mode: str = "draft",
    ) -> None:
        if mode not in ("draft", "in_place"):
            raise ValueError(f"Unknown edit mode: {mode}")
        self.contact_list = contact_list
        self.prompt = prompt
        self.mode = mode
        self.active_id: Optional[ContactId] = None
        self._draft: Optional[Contact] = None

    def is_editing(self, contact_id: ContactId) -> bool:
        return same_id(self.active_id, contact_id)

    def begin(self, contact_id: ContactId) -> None:
        """Start editing ``contact_id``, dropping any other active edit."""
        contact = self.contact_list.get(contact_id)
        if contact is None:
            raise EditSessionError(f"Contact {contact_id} is not in the current list.")
        if self.active_id is not None and not self.is_editing(contact.id):
            logger.debug(f"[edit] Switching from {self.active_id} to {contact.id} without saving")
        self.active_id = contact.id
        self._draft = contact.model_copy() if self.mode == "draft" else None

    def update_field(self, contact_id: ContactId, key: str, value: str) -> None:
        if key not in EDITABLE_FIELDS:
            raise KeyError(f"Field {key!r} cannot be edited")
        if not self.is_editing(contact_id):
            raise EditSessionError(f"Contact {contact_id} is not being edited.")

        if self.mode == "in_place":
            self.contact_list.replace_fields(self.active_id, **{key: value})
        else:
            self._draft = self._draft.with_fields(**{key: value})

    def current(self, contact: Contact) -> Contact:
        """The version of ``contact`` to display, with unsaved edits applied."""
        if not self.is_editing(contact.id):
            return contact
        if self._draft is not None:
            return self._draft
        return self.contact_list.get(contact.id) or contact

    def cancel(self) -> None:
        self.active_id = None
        self._draft = None

    def save(self, contact: Contact) -> bool:
        """Ask for confirmation, then write the edited contact to the backend.

        Returns ``True`` once the backend accepted the update. A declined
        prompt or a failed request leaves the session active.
        """
        confirmed = self.prompt.ask(
            "Confirm Save",
            "Are you sure you want to save the changes?",
            PromptKind.QUESTION,
            confirmable=True,
            confirm_label="Save",
            cancel_label="Cancel",
        )
        if not confirmed:
            return False

        updated = self.current(contact).with_fields(last_updated=now_iso())
        try:
            self.contact_list.client.update_contact(updated)
        except ContactsAPIError as exc:
            logger.error(f"[save] {exc}")
            self.prompt.notify(
                "Error", "An error occurred while saving the changes.", PromptKind.ERROR
            )
            return False

        self.cancel()
        self.contact_list.refresh()
        return True
