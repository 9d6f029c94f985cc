"""Password hashing helpers.

Digests are produced by werkzeug's salted key-derivation functions, so two
hashes of the same password never compare equal as strings. Always verify
through :func:`verify_password`.
"""

from __future__ import annotations

from flask import current_app, has_app_context
from werkzeug.security import check_password_hash, generate_password_hash

DEFAULT_METHOD = "scrypt"


def _method() -> str:
    if has_app_context():
        return str(current_app.config.get("PASSWORD_HASH_METHOD") or DEFAULT_METHOD)
    return DEFAULT_METHOD


def hash_password(plaintext: str) -> str:
    """
    Derive a salted one-way digest from ``plaintext``.

    :param plaintext: Raw password.
    :type plaintext: str
    :returns: Self-describing digest (``method$salt$hash``).
    :rtype: str
    :raises ValueError: If the password is empty or not a string.
    """
    if not isinstance(plaintext, str) or not plaintext:
        raise ValueError("Password must be a non-empty string.")
    return generate_password_hash(plaintext, method=_method())


def verify_password(plaintext: str, digest: str | None) -> bool:
    """
    Check ``plaintext`` against a digest produced by :func:`hash_password`.

    :param plaintext: Candidate password.
    :param digest: Stored digest; empty or malformed digests never verify.
    :returns: ``True`` on match.
    :rtype: bool
    """
    if not digest or not isinstance(plaintext, str):
        return False
    try:
        return bool(check_password_hash(digest, plaintext))
    except ValueError:
        # Unknown hashing method prefix in the stored digest
        return False
