"""Shared utilities: logging, request context and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.utils import (
    InputSanitizer,
    ensure_utc,
    generate_cuid,
    generate_session_token,
    utc_now,
)

__all__ = [
    "InputSanitizer",
    "generate_cuid",
    "generate_session_token",
    "utc_now",
    "ensure_utc",
]
