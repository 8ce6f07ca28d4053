"""Domain value objects."""

from app.domain.value_objects.core import EmailAddress, Identity, normalize_email

__all__ = ["EmailAddress", "Identity", "normalize_email"]
