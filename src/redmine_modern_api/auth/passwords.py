"""
redmine_modern_api.auth.passwords

Password verification compatible with the host's stored hashes.

The host stores `hashed_password = sha1(salt + sha1(password))` as hex.
"""

from __future__ import annotations

import hashlib
import hmac


def _sha1(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


def hash_password(password: str, salt: str) -> str:
    return _sha1(salt + _sha1(password))


def check_password(password: str, *, salt: str | None, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return hmac.compare_digest(hash_password(password, salt or ""), hashed_password)
