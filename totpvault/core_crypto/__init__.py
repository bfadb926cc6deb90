# Core OTP Module
"""
Core one-time password engine:
- Secret decoding (base-32, hexadecimal) - secret_codec.py
- Time counter derivation (RFC 6238) - counter.py
- HOTP value generation with dynamic truncation (RFC 4226) - hotp.py
- Drift-tolerant validation - validation.py
- Zero-padded formatting - formatting.py

Every function is pure: time, time step and digit count are always passed
in explicitly. Defaults and the system clock live in totpvault.auth.
"""

from .secret_codec import (
    Encoding,
    InvalidCharacterError,
    decode_base32,
    decode_hex,
    decode_secret,
)

from .counter import (
    counter_for,
    millis_until_next_step,
)

from .hotp import (
    CryptoUnavailableError,
    generate_number,
    dynamic_truncate,
    hmac_sha1,
)

from .validation import validate_number

from .formatting import zero_pad

__all__ = [
    # Decoding
    'Encoding',
    'InvalidCharacterError',
    'decode_base32',
    'decode_hex',
    'decode_secret',
    # Counter
    'counter_for',
    'millis_until_next_step',
    # HOTP
    'CryptoUnavailableError',
    'generate_number',
    'dynamic_truncate',
    'hmac_sha1',
    # Validation
    'validate_number',
    # Formatting
    'zero_pad',
]
