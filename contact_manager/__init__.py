"""Contact Manager client package."""
