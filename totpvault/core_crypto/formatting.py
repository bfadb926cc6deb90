"""
OTP display formatting.
"""


def zero_pad(value: int, digits: int) -> str:
    """
    Render an OTP value as a decimal string of at least ``digits`` characters.

    Leading zeros are significant in OTP codes ("064088" is not "64088").
    Values whose decimal form is already ``digits`` long or longer are
    returned unchanged, never truncated.

    Args:
        value: Non-negative OTP value
        digits: Minimum output length

    Returns:
        Zero-padded decimal string
    """
    text = str(value)
    if len(text) >= digits:
        return text
    return '0' * (digits - len(text)) + text
