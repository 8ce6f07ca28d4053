"""Service interfaces (ports) for the application layer.

Protocols define contracts for capabilities the services consume (DIP).
"""

from __future__ import annotations

from typing import Protocol


class IPasswordHasher(Protocol):
    """Protocol for password hashing. The algorithm is an infrastructure detail."""

    def hash(self, password: str) -> str:
        """Return a hash suitable for storage."""

    def verify(self, password: str, password_hash: str) -> bool:
        """Return True if password matches password_hash. Never raises on malformed hashes."""
