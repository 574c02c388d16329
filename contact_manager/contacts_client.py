"""REST connector for the contact collection backend."""
from __future__ import annotations

import http.client
import json
import logging
from typing import Any, Dict, List, Optional
from urllib import error as urlerror
from urllib import parse as urlparse
from urllib import request as urlrequest

from pydantic import ValidationError

from .config import Settings
from .errors import ContactsAPIError
from .models import Contact, ContactId

logger = logging.getLogger(__name__)


class ContactsClient:
    """Very small REST wrapper for a contact collection.

    The collection lives at ``settings.backend_url``; single contacts live at
    the collection URL followed by their id.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.timeout_seconds = settings.timeout_seconds

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def list_contacts(self) -> List[Contact]:
        """Return every contact in server order."""
        payload = self._request("GET", "", expect_json=True)
        if not isinstance(payload, list):
            raise ContactsAPIError(
                f"Expected a JSON array from GET {self.settings.backend_url}, "
                f"got {type(payload).__name__}"
            )
        contacts: List[Contact] = []
        for item in payload:
            if not isinstance(item, dict):
                raise ContactsAPIError(f"Unexpected contact entry in list response: {item!r}")
            try:
                contacts.append(Contact.model_validate(item))
            except ValidationError as exc:
                raise ContactsAPIError(f"Malformed contact in list response: {exc}") from exc
        return contacts

    def create_contact(self, contact: Contact) -> Optional[Dict[str, Any]]:
        """Create a contact; the backend assigns its id."""
        body = contact.to_payload()
        body.pop("id", None)
        try:
            return self._request("POST", "", body=body)
        except ContactsAPIError as exc:
            raise ContactsAPIError(f"Failed to create contact: {exc}", status=exc.status) from exc

    def update_contact(self, contact: Contact) -> Optional[Dict[str, Any]]:
        """Replace the stored contact with ``contact`` (full replace)."""
        if contact.id is None:
            raise ValueError("Cannot update a contact without an id")
        try:
            return self._request("PUT", self._item_path(contact.id), body=contact.to_payload())
        except ContactsAPIError as exc:
            raise ContactsAPIError(
                f"Failed to update contact {contact.id}: {exc}", status=exc.status
            ) from exc

    def delete_contact(self, contact_id: ContactId) -> None:
        try:
            self._request("DELETE", self._item_path(contact_id))
        except ContactsAPIError as exc:
            raise ContactsAPIError(
                f"Failed to delete contact {contact_id}: {exc}", status=exc.status
            ) from exc

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _item_path(self, contact_id: ContactId) -> str:
        return urlparse.quote(str(contact_id), safe="")

    def _request(
        self,
        method: str,
        path: str,
        *,
        body: Optional[Dict[str, Any]] = None,
        expect_json: bool = False,
    ) -> Any:
        url = f"{self.settings.backend_url}{path}"

        data: Optional[bytes] = None
        headers = {"Accept": "application/json"}

        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"

        req = urlrequest.Request(url, data=data, method=method, headers=headers)
        logger.debug(f"{method} {url}")

        try:
            with urlrequest.urlopen(req, timeout=self.timeout_seconds) as resp:
                raw_bytes = resp.read()
        except urlerror.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if exc.fp else ""
            raise ContactsAPIError(
                f"{method} {url} failed with status {exc.code}: {detail or exc.reason}",
                status=exc.code,
            ) from exc
        except urlerror.URLError as exc:
            raise ContactsAPIError(f"Network error calling {url}: {exc.reason}") from exc
        except TimeoutError as exc:
            raise ContactsAPIError(
                f"{method} {url} timed out after {self.timeout_seconds}s"
            ) from exc
        except (http.client.HTTPException, OSError) as exc:
            raise ContactsAPIError(f"Connection error calling {method} {url}: {exc!r}") from exc

        try:
            raw = raw_bytes.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ContactsAPIError(f"{method} {url} returned a body that is not UTF-8: {exc}") from exc

        if not raw.strip():
            if expect_json:
                raise ContactsAPIError(f"{method} {url} returned an empty body")
            return None

        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            if expect_json:
                raise ContactsAPIError(f"{method} {url} returned invalid JSON: {exc}") from exc
            logger.debug(f"Ignoring non-JSON body from {method} {url}")
            return None
