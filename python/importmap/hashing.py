"""Content fingerprints used for change detection."""

import hashlib

from .protocols import HashFunction

# Hex characters kept from the SHA-256 digest
FINGERPRINT_LENGTH = 16


def compute_hash(content: bytes) -> str:
    """Return a short, deterministic fingerprint of ``content``."""
    return hashlib.sha256(content).hexdigest()[:FINGERPRINT_LENGTH]


def get_hash_function() -> HashFunction:
    return compute_hash
