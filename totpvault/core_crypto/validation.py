"""
TOTP validation with a clock-drift window.
"""

import hmac

from .counter import counter_for
from .formatting import zero_pad
from .hotp import generate_number


def _matches(expected: int, candidate: int, digits: int) -> bool:
    """Constant-time comparison of two OTP values as zero-padded strings."""
    return hmac.compare_digest(zero_pad(expected, digits),
                               zero_pad(candidate, digits))


def validate_number(key: bytes, candidate: int, window_millis: int,
                    now_millis: int, time_step_seconds: int,
                    digits: int) -> bool:
    """
    Check whether ``candidate`` is the OTP for any time within the window.

    With a non-positive window only the counter for ``now_millis`` is
    checked. Otherwise every counter from the one covering
    ``now - window`` to the one covering ``now + window`` is tried in
    ascending order. The range is counter based, so a window shorter than
    a time step still reaches the neighbouring step when ``now`` lies
    close enough to a step boundary.

    Args:
        key: Raw shared secret bytes
        candidate: OTP value supplied by the user
        window_millis: Allowed clock drift in milliseconds
        now_millis: Verifier's current time in milliseconds
        time_step_seconds: Length of one time step in seconds
        digits: Number of digits in the OTP

    Returns:
        True on the first matching counter, False if none match
    """
    if window_millis <= 0:
        counter = counter_for(now_millis, time_step_seconds)
        return _matches(generate_number(key, counter, digits), candidate, digits)

    # No counters exist before the epoch
    start = counter_for(max(now_millis - window_millis, 0), time_step_seconds)
    end = counter_for(now_millis + window_millis, time_step_seconds)
    for counter in range(start, end + 1):
        if _matches(generate_number(key, counter, digits), candidate, digits):
            return True
    return False
