"""Application state shared by the terminal session and CLI commands."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .actions import delete_contact
from .config import Settings
from .contact_list import ContactListState
from .contacts_client import ContactsClient
from .editing import EditSession
from .form import FormController
from .models import Contact, ContactId
from .prompts import ConfirmationPrompt
from .view import SortKey, derive_view


@dataclass
class AppState:
    """Everything one contact-manager screen owns.

    Interfaces receive an ``AppState`` explicitly; nothing here is global.
    """

    contact_list: ContactListState
    form: FormController
    session: EditSession
    prompt: ConfirmationPrompt
    search_term: str = ""
    sort_by: SortKey = SortKey.NONE

    @classmethod
    def build(
        cls,
        client: ContactsClient,
        prompt: ConfirmationPrompt,
        *,
        edit_mode: str = "draft",
        sort_by: SortKey = SortKey.NONE,
    ) -> "AppState":
        contact_list = ContactListState(client)
        return cls(
            contact_list=contact_list,
            form=FormController(contact_list, prompt),
            session=EditSession(contact_list, prompt, mode=edit_mode),
            prompt=prompt,
            sort_by=sort_by,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        prompt: ConfirmationPrompt,
        *,
        client: Optional[ContactsClient] = None,
    ) -> "AppState":
        return cls.build(
            client or ContactsClient(settings),
            prompt,
            edit_mode=settings.edit_mode,
            sort_by=SortKey.parse(settings.default_sort),
        )

    def refresh(self) -> bool:
        return self.contact_list.refresh()

    def set_search(self, term: str) -> None:
        self.search_term = term

    def set_sort(self, sort_by: SortKey) -> None:
        self.sort_by = sort_by

    def visible_contacts(self) -> List[Contact]:
        """Filtered, sorted contacts with any unsaved edits overlaid."""
        shown = [self.session.current(c) for c in self.contact_list.contacts]
        return derive_view(shown, self.search_term, self.sort_by)

    def delete(self, contact_id: ContactId) -> bool:
        return delete_contact(self.contact_list, contact_id, self.prompt, session=self.session)
