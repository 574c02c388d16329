"""User-facing interfaces for the contact manager."""
