"""
Stable hashing for seed derivation.

Both functions are pure and process-independent; the builtin hash() is
salted per interpreter and must never feed a seed.
"""

import hashlib

MASK64 = (1 << 64) - 1


def mix64(k: int) -> int:
    """
    MurmurHash3 64-bit finalizer (fmix64).

    Args:
        k: Any integer; reduced modulo 2**64 first

    Returns:
        Well-mixed unsigned 64-bit integer
    """
    k &= MASK64
    k ^= k >> 33
    k = (k * 0xFF51AFD7ED558CCD) & MASK64
    k ^= k >> 33
    k = (k * 0xC4CEB9FE1A85EC53) & MASK64
    k ^= k >> 33
    return k


def name_hash(name: str) -> int:
    """
    Unsigned 64-bit hash of a name (first 8 bytes of SHA-256, big-endian).

    Example:
        name_hash("testFoo") -> same value in every process
    """
    digest = hashlib.sha256(name.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")
