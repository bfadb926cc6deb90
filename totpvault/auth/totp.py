"""
TOTP (Time-based One-Time Password) API

Caller-facing layer over totpvault.core_crypto implementing RFC 6238
two-factor authentication.

Features:
- Base-32 and hex secret generation (CSPRNG)
- Current code generation as number and zero-padded string
- Code validation with a millisecond clock-drift window
- Provisioning URI / QR code for authenticator apps

This module owns the defaults (30 second step, 6 digits) and is the only
place the system clock is read; the core functions it calls take every
parameter explicitly.

Works with:
- Google Authenticator
- Authy
- Microsoft Authenticator
- Any RFC 6238 compliant authenticator
"""

import base64
import logging
import secrets
import time
from typing import Optional, Tuple, Union

from ..core_crypto.secret_codec import Encoding, decode_secret
from ..core_crypto.counter import counter_for, millis_until_next_step
from ..core_crypto import hotp
from ..core_crypto.validation import validate_number
from ..core_crypto.formatting import zero_pad
from ..integration.event_logger import EventLogger
from .provisioning import (
    DEFAULT_OTP_LENGTH, generate_otp_auth_url, qr_image_url, render_qr_code,
)


logger = logging.getLogger(__name__)


# TOTP configuration (RFC 6238 defaults, digits shared with provisioning)
DEFAULT_TIME_STEP_SECONDS = 30     # Time step in seconds
DEFAULT_BASE32_SECRET_LENGTH = 16  # 16 chars = 80-bit key
DEFAULT_HEX_SECRET_LENGTH = 32     # 32 chars = 128-bit key

BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
HEX_ALPHABET = "0123456789ABCDEF"

Candidate = Union[int, str]


def current_time_millis() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


# ============================================================================
# Secret Generation
# ============================================================================

def generate_base32_secret(length: int = DEFAULT_BASE32_SECRET_LENGTH) -> str:
    """
    Generate a random base-32 secret for a new user.

    Args:
        length: Number of base-32 characters (5 bits each)

    Returns:
        Upper-case base-32 string without padding
    """
    return ''.join(secrets.choice(BASE32_ALPHABET) for _ in range(length))


def generate_hex_secret(length: int = DEFAULT_HEX_SECRET_LENGTH) -> str:
    """
    Generate a random hexadecimal secret.

    Args:
        length: Number of hex characters (4 bits each)

    Returns:
        Upper-case hex string
    """
    return ''.join(secrets.choice(HEX_ALPHABET) for _ in range(length))


def secret_to_base32(key: bytes) -> str:
    """Encode raw key bytes as unpadded base-32 (the otpauth secret format)."""
    return base64.b32encode(key).decode('ascii').rstrip('=')


# ============================================================================
# Generation
# ============================================================================

def generate_number(secret: str,
                    time_millis: Optional[int] = None,
                    time_step: int = DEFAULT_TIME_STEP_SECONDS,
                    digits: int = DEFAULT_OTP_LENGTH,
                    encoding: Encoding = Encoding.BASE32) -> int:
    """
    Generate the OTP value for a secret at a point in time.

    Args:
        secret: Encoded shared secret
        time_millis: Unix time in milliseconds (uses current time if None)
        time_step: Time step in seconds
        digits: Number of digits in the OTP
        encoding: Encoding of ``secret``

    Returns:
        OTP as an integer in [0, 10^digits)

    Raises:
        InvalidCharacterError: If the secret does not decode
        CryptoUnavailableError: If HMAC-SHA1 is unavailable
    """
    if time_millis is None:
        time_millis = current_time_millis()
    key = decode_secret(secret, encoding)
    counter = counter_for(time_millis, time_step)
    return hotp.generate_number(key, counter, digits)


def generate_number_string(secret: str,
                           time_millis: Optional[int] = None,
                           time_step: int = DEFAULT_TIME_STEP_SECONDS,
                           digits: int = DEFAULT_OTP_LENGTH,
                           encoding: Encoding = Encoding.BASE32) -> str:
    """Same as generate_number, zero-padded to ``digits`` characters."""
    number = generate_number(secret, time_millis, time_step, digits, encoding)
    return zero_pad(number, digits)


def current_code(secret: str,
                 time_millis: Optional[int] = None,
                 time_step: int = DEFAULT_TIME_STEP_SECONDS,
                 digits: int = DEFAULT_OTP_LENGTH,
                 encoding: Encoding = Encoding.BASE32) -> Tuple[int, str]:
    """
    Compute the current code as both number and display string.

    Returns:
        Tuple of (number, zero-padded string)
    """
    number = generate_number(secret, time_millis, time_step, digits, encoding)
    return number, zero_pad(number, digits)


# ============================================================================
# Validation
# ============================================================================

def normalize_candidate(candidate: Candidate, digits: int) -> Optional[int]:
    """
    Turn user input into an OTP value.

    Integers are taken as-is. Strings may contain spaces ("123 456") but
    must otherwise be exactly ``digits`` ASCII digits.

    Returns:
        The candidate value, or None if the input cannot be a code
    """
    if isinstance(candidate, bool):
        return None
    if isinstance(candidate, int):
        return candidate

    code = str(candidate).replace(' ', '').strip()
    if len(code) != digits or not (code.isascii() and code.isdigit()):
        return None
    return int(code)


def _check_code(key: bytes, candidate: Candidate, window_millis: int,
                time_millis: int, time_step: int, digits: int) -> bool:
    """Normalize, validate and log the outcome for one verification attempt."""
    value = normalize_candidate(candidate, digits)
    if value is None:
        logger.debug("Rejected malformed %d-digit code", digits)
        return False

    valid = validate_number(key, value, window_millis, time_millis,
                            time_step, digits)
    logger.debug("Code validation %s (window=%dms, step=%ds)",
                 "succeeded" if valid else "failed", window_millis, time_step)
    return valid


def validate_current_number(secret: str, candidate: Candidate,
                            window_millis: int,
                            time_millis: Optional[int] = None,
                            time_step: int = DEFAULT_TIME_STEP_SECONDS,
                            digits: int = DEFAULT_OTP_LENGTH,
                            encoding: Encoding = Encoding.BASE32) -> bool:
    """
    Validate a code against the secret, allowing for clock drift.

    Args:
        secret: Encoded shared secret
        candidate: Code entered by the user (int or digit string)
        window_millis: Accepted drift in milliseconds (0 = current step only)
        time_millis: Unix time in milliseconds (uses current time if None)
        time_step: Time step in seconds
        digits: Number of digits in the OTP
        encoding: Encoding of ``secret``

    Returns:
        True if the code matches a time step inside the window

    Raises:
        InvalidCharacterError: If the secret does not decode
        CryptoUnavailableError: If HMAC-SHA1 is unavailable
    """
    if time_millis is None:
        time_millis = current_time_millis()
    key = decode_secret(secret, encoding)
    return _check_code(key, candidate, window_millis, time_millis,
                       time_step, digits)


def get_remaining_seconds(time_step: int = DEFAULT_TIME_STEP_SECONDS,
                          time_millis: Optional[int] = None) -> int:
    """
    Get seconds remaining until next TOTP code.

    Args:
        time_step: Time step in seconds
        time_millis: Unix time in milliseconds (uses current time if None)

    Returns:
        Whole seconds until the code changes, rounded up
    """
    if time_millis is None:
        time_millis = current_time_millis()
    return -(-millis_until_next_step(time_millis, time_step) // 1000)


# ============================================================================
# Generator
# ============================================================================

class TOTPGenerator:
    """
    TOTP generator and verifier for a specific secret.

    Example:
        >>> gen = TOTPGenerator("NY4A5CPJZ46LXZCP")
        >>> gen.generate(time_millis=7451000)
        '325893'
        >>> gen.verify('325893', time_millis=7455000)
        True
    """

    def __init__(self, secret: Optional[str] = None,
                 encoding: Encoding = Encoding.BASE32,
                 digits: int = DEFAULT_OTP_LENGTH,
                 time_step: int = DEFAULT_TIME_STEP_SECONDS,
                 window_millis: Optional[int] = None,
                 issuer: str = "totpvault",
                 account_name: str = "user",
                 event_logger: Optional[EventLogger] = None):
        """
        Initialize TOTP generator.

        Args:
            secret: Encoded shared secret (generated if None)
            encoding: Encoding of ``secret``
            digits: Number of digits in OTP
            time_step: Time step in seconds
            window_millis: Accepted drift when verifying (one step if None)
            issuer: Service name for authenticator apps
            account_name: Account identifier
            event_logger: Optional audit log for verification attempts

        Raises:
            InvalidCharacterError: If the secret does not decode
            ValueError: If digits or time_step are not positive
        """
        if digits <= 0:
            raise ValueError("Number of digits must be positive")
        if time_step <= 0:
            raise ValueError("Time step must be a positive number of seconds")

        if secret is None:
            secret = (generate_hex_secret() if encoding == Encoding.HEX
                      else generate_base32_secret())
        self._secret = secret
        self._key = decode_secret(secret, encoding)
        self._encoding = encoding
        self._digits = digits
        self._time_step = time_step
        self._window_millis = (time_step * 1000 if window_millis is None
                               else window_millis)
        self._issuer = issuer
        self._account_name = account_name
        self._event_logger = event_logger

    @property
    def secret(self) -> str:
        """Secret in the encoding it was supplied in."""
        return self._secret

    @property
    def secret_base32(self) -> str:
        """Base-32 form of the decoded key, as authenticator apps expect it."""
        return secret_to_base32(self._key)

    @property
    def encoding(self) -> Encoding:
        return self._encoding

    @property
    def digits(self) -> int:
        """Number of digits in OTP."""
        return self._digits

    @property
    def time_step(self) -> int:
        """Time step in seconds."""
        return self._time_step

    @property
    def window_millis(self) -> int:
        return self._window_millis

    @property
    def key_id(self) -> str:
        """Label shown by authenticator apps."""
        if self._issuer:
            return f"{self._issuer}:{self._account_name}"
        return self._account_name

    def generate_number(self, time_millis: Optional[int] = None) -> int:
        """Generate the OTP value for current or specified time."""
        if time_millis is None:
            time_millis = current_time_millis()
        counter = counter_for(time_millis, self._time_step)
        return hotp.generate_number(self._key, counter, self._digits)

    def generate(self, time_millis: Optional[int] = None) -> str:
        """
        Generate TOTP code for current or specified time.

        Args:
            time_millis: Unix time in milliseconds (uses current time if None)

        Returns:
            Zero-padded TOTP code string
        """
        return zero_pad(self.generate_number(time_millis), self._digits)

    def verify(self, code: Candidate, time_millis: Optional[int] = None) -> bool:
        """
        Verify a TOTP code.

        Args:
            code: OTP code to verify (int or digit string)
            time_millis: Unix time in milliseconds (uses current time if None)

        Returns:
            True if code is valid
        """
        if time_millis is None:
            time_millis = current_time_millis()

        valid = _check_code(self._key, code, self._window_millis, time_millis,
                            self._time_step, self._digits)

        if self._event_logger is not None:
            self._event_logger.log_totp(self._account_name, valid,
                                        self._window_millis)
        return valid

    def remaining_seconds(self, time_millis: Optional[int] = None) -> int:
        """Get seconds until next code."""
        return get_remaining_seconds(self._time_step, time_millis)

    def get_provisioning_uri(self) -> str:
        """
        Generate otpauth:// URI for QR code.

        This URI can be encoded as a QR code and scanned by
        authenticator apps like Google Authenticator.
        """
        return generate_otp_auth_url(self.key_id, self.secret_base32, self._digits)

    def qr_image_url(self, dimension: int = 200) -> str:
        """URL of a QR image of the provisioning URI."""
        return qr_image_url(self.key_id, self.secret_base32, self._digits,
                            dimension)

    def generate_qr_code(self, filename: Optional[str] = None) -> Optional[str]:
        """
        Generate QR code for authenticator app setup.

        Args:
            filename: Optional filename to save QR code image

        Returns:
            ASCII QR code string if no filename, else None
        """
        return render_qr_code(self.get_provisioning_uri(), filename)

    def __repr__(self) -> str:
        return (f"TOTPGenerator(issuer='{self._issuer}', "
                f"account='{self._account_name}', digits={self._digits})")


def issue_secret(account_name: str,
                 issuer: str = "totpvault",
                 encoding: Encoding = Encoding.BASE32,
                 digits: int = DEFAULT_OTP_LENGTH,
                 time_step: int = DEFAULT_TIME_STEP_SECONDS,
                 event_logger: Optional[EventLogger] = None) -> Tuple[str, str]:
    """
    Create a new secret for an account and its provisioning URI.

    Storing the secret is up to the caller.

    Args:
        account_name: Account name (usually email)
        issuer: Service name shown in authenticator apps
        encoding: Encoding of the generated secret
        digits: Number of digits in OTP
        time_step: Time step in seconds
        event_logger: Optional audit log

    Returns:
        Tuple of (encoded_secret, provisioning_uri)
    """
    generator = TOTPGenerator(
        encoding=encoding,
        digits=digits,
        time_step=time_step,
        issuer=issuer,
        account_name=account_name,
    )
    if event_logger is not None:
        event_logger.log_secret_issued(account_name, encoding.value,
                                       digits, time_step)
    return generator.secret, generator.get_provisioning_uri()
