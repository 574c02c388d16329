"""Contact record model shared by the client, state and views."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

ContactId = Union[int, str]

# Fields a user may type into, in display order.
EDITABLE_FIELDS = ("name", "phone_number", "email")


class Contact(BaseModel):
    """A contact as stored by the backend.

    Unknown keys returned by the backend are kept so a full-replace update
    sends them back untouched.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[ContactId] = None
    name: str = ""
    phone_number: str = ""
    email: str = ""
    created_at: Optional[str] = Field(None, alias="createdAt")
    last_updated: Optional[str] = Field(None, alias="lastUpdated")

    def to_payload(self) -> Dict[str, Any]:
        """Serialize with wire names, dropping unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def with_fields(self, **fields: Any) -> "Contact":
        """Return a copy with the given fields replaced."""
        return self.model_copy(update=fields)


def now_iso() -> str:
    """UTC timestamp in the ``2026-10-19T17:48:00.123Z`` form."""
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string into an aware datetime, or ``None``."""
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
