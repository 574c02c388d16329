"""Search/sort derivation and text rendering of contacts."""
from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Iterable, List, Optional

from .models import Contact, parse_timestamp


class SortKey(str, Enum):
    NONE = ""
    NAME = "name"
    EMAIL = "email"
    TIME = "time"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortKey":
        text = (value or "").strip().lower()
        if text == "none":
            return cls.NONE
        try:
            return cls(text)
        except ValueError as exc:
            choices = ", ".join(key.value or "none" for key in cls)
            raise ValueError(f"Unknown sort key {value!r}. Expected one of: {choices}") from exc

    @property
    def label(self) -> str:
        return _SORT_LABELS[self]


_SORT_LABELS = {
    SortKey.NONE: "Sort by",
    SortKey.NAME: "Name",
    SortKey.EMAIL: "Email",
    SortKey.TIME: "Time",
}

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def filter_contacts(contacts: Iterable[Contact], search_term: str) -> List[Contact]:
    """Keep contacts whose name contains ``search_term``, ignoring case."""
    needle = (search_term or "").lower()
    if not needle:
        return list(contacts)
    return [contact for contact in contacts if needle in contact.name.lower()]


def _text_key(value: str):
    # Case-folded first so "alice" sorts next to "Alice"; the raw value breaks ties.
    return (value.casefold(), value)


def sort_contacts(contacts: Iterable[Contact], sort_by: SortKey) -> List[Contact]:
    """Return a sorted copy. ``SortKey.NONE`` keeps the input order."""
    items = list(contacts)
    if sort_by is SortKey.NAME:
        return sorted(items, key=lambda c: _text_key(c.name))
    if sort_by is SortKey.EMAIL:
        return sorted(items, key=lambda c: _text_key(c.email))
    if sort_by is SortKey.TIME:
        # Missing or unparseable creation times sort after everything else.
        return sorted(
            items,
            key=lambda c: parse_timestamp(c.created_at) or _OLDEST,
            reverse=True,
        )
    return items


def derive_view(
    contacts: Iterable[Contact], search_term: str, sort_by: SortKey
) -> List[Contact]:
    return sort_contacts(filter_contacts(contacts, search_term), sort_by)


def format_timestamp(value: Optional[str], *, tz: Optional[tzinfo] = None) -> str:
    """Render ``value`` as ``October 19, 2026, 5:48:00 PM``.

    Converts to ``tz`` (local time when omitted). Returns ``"Invalid Date"``
    for missing or malformed input.
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        return "Invalid Date"
    local = parsed.astimezone(tz)
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return (
        f"{local:%B} {local.day}, {local.year}, "
        f"{hour}:{local:%M}:{local:%S} {meridiem}"
    )


def render_contact(contact: Contact, *, tz: Optional[tzinfo] = None) -> str:
    lines = [
        f"Name: {contact.name}",
        f"Phone: {contact.phone_number}",
        f"Email: {contact.email}",
        f"Time: {format_timestamp(contact.created_at, tz=tz)}",
    ]
    if contact.last_updated:
        lines.append(f"Last Updated: {format_timestamp(contact.last_updated, tz=tz)}")
    return "\n".join(lines)
