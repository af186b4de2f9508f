"""Storage key (public filename) generation.

Keys look like ``k3f9x0ab.png``: a random base-36 token followed by a
normalized extension. No existence check is made against the store, so a
collision overwrites the earlier record.
"""

import secrets

from core.utils.constants import (
    DEFAULT_EXTENSION,
    KEY_ALPHABET,
    KEY_RANDOM_LENGTH,
    MAX_EXTENSION_LENGTH,
)


def resolve_extension(hint: str | None) -> str:
    """Derive a key extension from a filename or remote file path.

    The last ``.``-separated segment is lowercased; empty, overlong or
    non-alphanumeric extensions fall back to ``jpg``.
    """
    if not hint or "." not in hint:
        return DEFAULT_EXTENSION

    extension = hint.rsplit(".", 1)[-1].strip().lower()

    if (
        not extension
        or len(extension) > MAX_EXTENSION_LENGTH
        or not extension.isascii()
        or not extension.isalnum()
    ):
        return DEFAULT_EXTENSION

    return extension


def random_token(length: int = KEY_RANDOM_LENGTH) -> str:
    """Return a random lowercase base-36 token."""
    return "".join(secrets.choice(KEY_ALPHABET) for _ in range(length))


def generate_key(extension_hint: str | None) -> str:
    """Generate a new storage key for an image."""
    return f"{random_token()}.{resolve_extension(extension_hint)}"
