"""In-memory mirror of the backend contact collection."""
from __future__ import annotations

import logging
from typing import Any, List, Optional

from .contacts_client import ContactsClient
from .errors import ContactsAPIError
from .models import Contact, ContactId

logger = logging.getLogger(__name__)


def same_id(left: Any, right: Any) -> bool:
    """Compare ids loosely so ``1`` typed on a terminal matches a numeric id."""
    if left is None or right is None:
        return False
    return left == right or str(left) == str(right)


class ContactListState:
    """Ordered contacts as last fetched from the backend.

    Every refresh overwrites the whole list. Refreshes carry a sequence
    number and a response older than one already applied is dropped.
    """

    def __init__(self, client: ContactsClient) -> None:
        self.client = client
        self._contacts: List[Contact] = []
        self._issued = 0
        self._applied = 0

    @property
    def contacts(self) -> List[Contact]:
        return list(self._contacts)

    def __len__(self) -> int:
        return len(self._contacts)

    def refresh(self) -> bool:
        """Reload the list from the backend.

        Returns ``True`` when the response was applied. Failures are logged
        and leave the previous list in place.
        """
        self._issued += 1
        ticket = self._issued
        try:
            contacts = self.client.list_contacts()
        except ContactsAPIError as exc:
            logger.error(f"[refresh] Failed to load contacts: {exc}")
            return False

        if ticket < self._applied:
            logger.debug(f"[refresh] Dropping stale response #{ticket} (applied #{self._applied})")
            return False

        self._contacts = list(contacts)
        self._applied = ticket
        logger.debug(f"[refresh] Loaded {len(self._contacts)} contacts (#{ticket})")
        return True

    def get(self, contact_id: ContactId) -> Optional[Contact]:
        return next((c for c in self._contacts if same_id(c.id, contact_id)), None)

    def replace_fields(self, contact_id: ContactId, **fields: Any) -> None:
        """Replace fields on the one contact matching ``contact_id``."""
        self._contacts = [
            contact.with_fields(**fields) if same_id(contact.id, contact_id) else contact
            for contact in self._contacts
        ]
