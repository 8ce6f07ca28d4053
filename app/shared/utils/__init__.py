"""Shared utilities: datetime, generators, sanitization."""

from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_cuid, generate_session_token
from app.shared.utils.sanitization import InputSanitizer

__all__ = [
    "generate_cuid",
    "generate_session_token",
    "utc_now",
    "ensure_utc",
    "InputSanitizer",
]
