"""
API key hashing utilities.

Security notes:
  • SHA-256 is used for key hashing — acceptable for API keys because
    they are high-entropy random strings (not low-entropy passwords).
    bcrypt/argon2 would add latency to every gateway request.
  • Raw keys use the ck_live_ prefix (convention, not security).
  • generate_api_key() returns the raw key exactly once — the caller
    must display it immediately. It is never stored.
"""

import hashlib
import secrets


_KEY_PREFIX = "ck_live_"

# Characters of the raw key kept for display (e.g. "ck_live_3fa9").
DISPLAY_PREFIX_LENGTH = 12


def hash_api_key(raw_key: str) -> str:
    """
    Hash a raw API key using SHA-256.

    Returns the hex digest string for storage/lookup.
    """
    return hashlib.sha256(raw_key.encode("utf-8")).hexdigest()


def key_display_prefix(raw_key: str) -> str:
    """Non-secret leading slice of a raw key, safe for logs and listings."""
    return raw_key[:DISPLAY_PREFIX_LENGTH]


def generate_api_key() -> tuple[str, str]:
    """
    Generate a new API key.

    Returns:
        (raw_key, key_hash) — raw_key is shown once, key_hash is stored.
    """
    random_part = secrets.token_hex(32)  # 64 hex chars = 256 bits
    raw_key = f"{_KEY_PREFIX}{random_part}"
    key_hash = hash_api_key(raw_key)
    return raw_key, key_hash
