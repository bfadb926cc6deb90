# totpvault
"""
Time-based One-Time Passwords (RFC 6238 / RFC 4226).

Subpackages:
- core_crypto: pure OTP engine (decoding, counters, HOTP, validation)
- auth: caller-facing API with defaults, secret generation, provisioning
- integration: security event log and logging setup
"""

from .core_crypto import (
    Encoding,
    InvalidCharacterError,
    CryptoUnavailableError,
    zero_pad,
)

from .auth import (
    TOTPGenerator,
    generate_base32_secret,
    generate_hex_secret,
    generate_number,
    generate_number_string,
    current_code,
    validate_current_number,
    generate_otp_auth_url,
)

__version__ = "1.0.0"

__all__ = [
    'Encoding',
    'InvalidCharacterError',
    'CryptoUnavailableError',
    'zero_pad',
    'TOTPGenerator',
    'generate_base32_secret',
    'generate_hex_secret',
    'generate_number',
    'generate_number_string',
    'current_code',
    'validate_current_number',
    'generate_otp_auth_url',
]
