"""
Time Counter Derivation (RFC 6238 Section 4.2)

Maps a point in time to the moving factor T fed into HOTP:

    T = floor(time_millis / 1000 / time_step_seconds)

Times are Unix epoch milliseconds. The division by 1000 is applied before
the division by the time step, both as integer division.
"""


MILLIS_PER_SECOND = 1000


def _check_time_step(time_step_seconds: int) -> None:
    if time_step_seconds <= 0:
        raise ValueError("Time step must be a positive number of seconds")


def counter_for(time_millis: int, time_step_seconds: int) -> int:
    """
    Get the TOTP counter value for a point in time.

    Args:
        time_millis: Unix time in milliseconds (non-negative)
        time_step_seconds: Length of one time step in seconds

    Returns:
        Counter value (number of whole time steps since the epoch)

    Raises:
        ValueError: If the time is negative or the step is not positive
    """
    _check_time_step(time_step_seconds)
    if time_millis < 0:
        raise ValueError("Time must not be before the Unix epoch")
    return time_millis // MILLIS_PER_SECOND // time_step_seconds


def millis_until_next_step(time_millis: int, time_step_seconds: int) -> int:
    """
    Get the milliseconds left before the counter for ``time_millis`` changes.

    Args:
        time_millis: Unix time in milliseconds (non-negative)
        time_step_seconds: Length of one time step in seconds

    Returns:
        Milliseconds in the range [1, time_step_seconds * 1000]
    """
    next_counter = counter_for(time_millis, time_step_seconds) + 1
    return next_counter * time_step_seconds * MILLIS_PER_SECOND - time_millis
