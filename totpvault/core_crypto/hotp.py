"""
HOTP Value Generation (RFC 4226)

Computes the numeric one-time value for a key and a counter:

1. Counter serialized as an 8-byte big-endian message
2. HMAC-SHA1(key, message) -> 20-byte digest
3. Dynamic truncation: the low 4 bits of the last digest byte select an
   offset, the 4 bytes at that offset are read big-endian and the top bit
   is cleared, giving a 31-bit value
4. Reduction modulo 10^digits

TOTP (RFC 6238) is this same computation with the counter derived from
the clock (see counter.py).

The HMAC primitive comes from the ``cryptography`` package.
"""

import struct

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.backends import default_backend


COUNTER_SIZE = 8            # 64-bit moving factor
MAX_COUNTER = (1 << 64) - 1
TRUNCATION_MASK = 0x7FFFFFFF  # Clear sign bit of the 4-byte slice
OFFSET_MASK = 0x0F


class CryptoUnavailableError(RuntimeError):
    """Raised when the HMAC-SHA1 primitive cannot be initialized."""
    pass


def hmac_sha1(key: bytes, message: bytes) -> bytes:
    """
    Compute HMAC-SHA1 of ``message`` under ``key``.

    Raises:
        CryptoUnavailableError: If the platform's crypto backend does not
            provide HMAC-SHA1
    """
    try:
        mac = hmac.HMAC(key, hashes.SHA1(), backend=default_backend())
    except UnsupportedAlgorithm as e:
        raise CryptoUnavailableError(f"HMAC-SHA1 is not available: {e}") from e
    mac.update(message)
    return mac.finalize()


def dynamic_truncate(digest: bytes) -> int:
    """
    Extract a 31-bit integer from an HMAC digest (RFC 4226 Section 5.3).

    Args:
        digest: HMAC output (20 bytes for SHA-1)

    Returns:
        Truncated value in [0, 2^31)
    """
    offset = digest[-1] & OFFSET_MASK
    truncated = struct.unpack('>I', digest[offset:offset + 4])[0]
    return truncated & TRUNCATION_MASK


def generate_number(key: bytes, counter: int, digits: int) -> int:
    """
    Generate the HOTP value for a key and counter.

    No upper bound is placed on ``digits``: once 10^digits exceeds the
    31-bit truncated range the full truncated value is returned.

    Args:
        key: Raw shared secret bytes
        counter: Moving factor in [0, 2^64)
        digits: Number of decimal digits to keep (positive)

    Returns:
        OTP value in [0, 10^digits)

    Raises:
        ValueError: If counter or digits are out of range
        CryptoUnavailableError: If HMAC-SHA1 cannot be used
    """
    if digits <= 0:
        raise ValueError("Number of digits must be positive")
    if counter < 0 or counter > MAX_COUNTER:
        raise ValueError("Counter must fit in an unsigned 64-bit integer")

    message = struct.pack('>Q', counter)
    digest = hmac_sha1(key, message)
    return dynamic_truncate(digest) % (10 ** digits)
