"""
Cryptographic primitives for BallotLedger.

This module provides the SHA-256 hashing used for the event audit trail.
"""

from .hashing import Hash, SHA256Hasher

__all__ = [
    "Hash",
    "SHA256Hasher",
]
