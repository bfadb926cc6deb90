"""
Authenticator App Provisioning

Builds the otpauth:// URI that authenticator apps import, a QR image URL
for it, and (with the optional ``qrcode`` package) the QR code itself.

URI format:
    otpauth://totp/{label}?secret={secret}&digits={digits}
"""

from io import StringIO
from typing import Optional
from urllib.parse import quote

# Try to import qrcode for QR generation
try:
    import qrcode
    from qrcode.constants import ERROR_CORRECT_M
    HAS_QRCODE = True
except ImportError:
    HAS_QRCODE = False


OTPAUTH_PREFIX = "otpauth://totp/"
DEFAULT_OTP_LENGTH = 6          # Number of digits in OTP
DEFAULT_QR_DIMENSION = 200      # Width/height of the chart image in pixels
QR_CHART_URL = "https://chart.googleapis.com/chart"


def generate_otp_auth_url(key_id: str, secret: str,
                          digits: int = DEFAULT_OTP_LENGTH) -> str:
    """
    Build the otpauth:// URI for a secret.

    Args:
        key_id: Account label shown in the app (e.g. "user@example.com")
        secret: Base-32 encoded secret
        digits: Number of digits the app should display

    Returns:
        otpauth:// URI string
    """
    return f"{OTPAUTH_PREFIX}{quote(key_id)}?secret={secret}&digits={digits}"


def qr_image_url(key_id: str, secret: str,
                 digits: int = DEFAULT_OTP_LENGTH,
                 dimension: int = DEFAULT_QR_DIMENSION) -> str:
    """
    Build a Google Charts URL rendering the otpauth:// URI as a QR image.

    The otpauth URI is fully URL-escaped so that its own query string is
    carried inside the ``chl`` parameter.
    """
    otpauth = generate_otp_auth_url(key_id, secret, digits)
    return (
        f"{QR_CHART_URL}?chs={dimension}x{dimension}"
        f"&cht=qr&chld=M|0&chl={quote(otpauth, safe='')}"
    )


def render_qr_code(uri: str, filename: Optional[str] = None) -> Optional[str]:
    """
    Render a provisioning URI as a QR code.

    Args:
        uri: otpauth:// URI to encode
        filename: Optional filename to save a PNG image to

    Returns:
        ASCII QR code string if no filename, else None

    Raises:
        ImportError: If the qrcode package is not installed
    """
    if not HAS_QRCODE:
        raise ImportError("qrcode library required for QR generation")

    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(uri)
    qr.make(fit=True)

    if filename:
        img = qr.make_image(fill_color="black", back_color="white")
        img.save(filename)
        return None

    out = StringIO()
    qr.print_ascii(out=out)
    return out.getvalue()
