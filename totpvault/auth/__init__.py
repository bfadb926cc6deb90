# Authentication Module
"""
Caller-facing two-factor authentication API:
- TOTP generation and validation with defaults (RFC 6238) - totp.py
- Secret generation from a CSPRNG - totp.py
- otpauth:// provisioning URI and QR codes - provisioning.py

Security features:
- Cryptographically secure random secrets
- Drift-tolerant validation that snaps to whole time steps
- No secrets or codes written to logs
"""

from .totp import (
    TOTPGenerator,
    DEFAULT_TIME_STEP_SECONDS,
    DEFAULT_OTP_LENGTH,
    current_time_millis,
    generate_base32_secret,
    generate_hex_secret,
    secret_to_base32,
    generate_number,
    generate_number_string,
    current_code,
    validate_current_number,
    get_remaining_seconds,
    issue_secret,
)

from .provisioning import (
    generate_otp_auth_url,
    qr_image_url,
    render_qr_code,
)

__all__ = [
    # TOTP
    'TOTPGenerator',
    'DEFAULT_TIME_STEP_SECONDS',
    'DEFAULT_OTP_LENGTH',
    'current_time_millis',
    'generate_base32_secret',
    'generate_hex_secret',
    'secret_to_base32',
    'generate_number',
    'generate_number_string',
    'current_code',
    'validate_current_number',
    'get_remaining_seconds',
    'issue_secret',
    # Provisioning
    'generate_otp_auth_url',
    'qr_image_url',
    'render_qr_code',
]
