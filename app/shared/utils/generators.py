"""ID and token generators (CUID for primary keys, opaque session and invitation tokens)."""

import secrets

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

SESSION_TOKEN_BYTES = 32


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_session_token() -> str:
    """Return a URL-safe random session token (256 bits of entropy)."""
    return secrets.token_hex(SESSION_TOKEN_BYTES)


def generate_invitation_token() -> str:
    """Return an opaque invitation token (same strength as a session token)."""
    return secrets.token_hex(SESSION_TOKEN_BYTES)
