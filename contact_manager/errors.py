"""Exception types shared across the contact manager."""
from __future__ import annotations

from typing import Optional


class ContactManagerError(RuntimeError):
    """Base class for contact manager failures."""


class ContactsAPIError(ContactManagerError):
    """Raised when the contact backend fails or returns an error response."""

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class FormValidationError(ContactManagerError):
    """Raised when the new-contact form is submitted with missing or bad fields."""

    def __init__(self, message: str, *, fields: Optional[list[str]] = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class EditSessionError(ContactManagerError):
    """Raised when an edit targets a contact that is not being edited."""
