"""Process-local identifier generation.

Identifiers produced here are only fresh within the running process. They
key conditions in an editing session and seed the strategy id of a brand
new form; they carry no cross-session uniqueness guarantee.
"""

import uuid


def generate_id(prefix: str | None = None) -> str:
    """Generate a short random identifier.

    Args:
        prefix: Optional prefix joined with a hyphen (e.g., "user").

    Returns:
        Nine hex characters, optionally prefixed.
    """
    token = uuid.uuid4().hex[:9]
    if prefix:
        return f"{prefix}-{token}"
    return token
