"""
Shared Secret Decoding (Base-32 / Hexadecimal)

Converts the ASCII form of a TOTP shared secret into the raw key bytes
used as the HMAC key.

Components:
- Base-32 decoder: 5 bits per character, 8-state shift accumulator
- Hex decoder: 4 bits per character, 2-state nibble accumulator
- Encoding selector

Both decoders are explicit state machines over an integer state. Unlike
base64.b32decode / bytes.fromhex they accept unpadded, mixed-case and
odd-length input.
"""

from enum import Enum


# Output buffer sizing: bits per input character
BASE32_BITS_PER_CHAR = 5
HEX_BITS_PER_CHAR = 4

# Base-32 padding character - terminates decoding
BASE32_PAD = '='


class Encoding(Enum):
    """ASCII representations a shared secret can be supplied in."""
    BASE32 = "base32"
    HEX = "hex"


class InvalidCharacterError(ValueError):
    """Raised when a secret contains a character outside its alphabet."""

    def __init__(self, encoding: Encoding, character: str, position: int):
        self.encoding = encoding
        self.character = character
        self.position = position
        super().__init__(
            f"Invalid {encoding.value} character {character!r} at position {position}"
        )


def _base32_value(ch: str, position: int) -> int:
    """Map one base-32 character to its 5-bit value."""
    if 'a' <= ch <= 'z':
        return ord(ch) - ord('a')
    if 'A' <= ch <= 'Z':
        return ord(ch) - ord('A')
    if '2' <= ch <= '7':
        return 26 + (ord(ch) - ord('2'))
    raise InvalidCharacterError(Encoding.BASE32, ch, position)


def _hex_value(ch: str, position: int) -> int:
    """Map one hex character to its 4-bit value."""
    if '0' <= ch <= '9':
        return ord(ch) - ord('0')
    if 'a' <= ch <= 'f':
        return 10 + (ord(ch) - ord('a'))
    if 'A' <= ch <= 'F':
        return 10 + (ord(ch) - ord('A'))
    raise InvalidCharacterError(Encoding.HEX, ch, position)


def decode_base32(text: str) -> bytes:
    """
    Decode a base-32 (RFC 4648 alphabet) secret to raw bytes.

    Every 8 input characters produce 5 output bytes. The decoder state
    (0-7) is the position of the current character inside that 8-character
    group and determines where its 5 bits land in the working byte:

        state 0: all 5 bits -> top of byte
        state 1: top 3 bits finish a byte, low 2 bits start the next
        state 2: all 5 bits -> middle of byte
        state 3: top 1 bit finishes a byte, low 4 bits start the next
        state 4: top 4 bits finish a byte, low 1 bit starts the next
        state 5: all 5 bits -> middle of byte
        state 6: top 2 bits finish a byte, low 3 bits start the next
        state 7: all 5 bits finish a byte

    Decoding is case-insensitive and padding is optional. A '=' stops
    decoding and drops any byte still being assembled. A partial byte
    left at the end of the input (no '=') is kept.

    Args:
        text: Base-32 encoded secret

    Returns:
        Decoded key bytes

    Raises:
        InvalidCharacterError: On any character outside A-Z, a-z, 2-7, '='
    """
    result = bytearray((len(text) * BASE32_BITS_PER_CHAR + 7) // 8)
    index = 0
    which = 0
    working = 0

    for position, ch in enumerate(text):
        if ch == BASE32_PAD:
            which = 0
            break
        val = _base32_value(ch, position)

        if which == 0:
            working = (val & 0x1F) << 3
            which = 1
        elif which == 1:
            working |= (val & 0x1C) >> 2
            result[index] = working
            index += 1
            working = (val & 0x03) << 6
            which = 2
        elif which == 2:
            working |= (val & 0x1F) << 1
            which = 3
        elif which == 3:
            working |= (val & 0x10) >> 4
            result[index] = working
            index += 1
            working = (val & 0x0F) << 4
            which = 4
        elif which == 4:
            working |= (val & 0x1E) >> 1
            result[index] = working
            index += 1
            working = (val & 0x01) << 7
            which = 5
        elif which == 5:
            working |= (val & 0x1F) << 2
            which = 6
        elif which == 6:
            working |= (val & 0x18) >> 3
            result[index] = working
            index += 1
            working = (val & 0x07) << 5
            which = 7
        else:
            working |= (val & 0x1F)
            result[index] = working
            index += 1
            which = 0

    if which != 0:
        result[index] = working
        index += 1

    return bytes(result[:index])


def decode_hex(text: str) -> bytes:
    """
    Decode a hexadecimal secret to raw bytes.

    Nibbles are paired high-then-low. An odd trailing nibble becomes the
    high half of a final byte whose low half is zero.

    Args:
        text: Hex encoded secret (either case)

    Returns:
        Decoded key bytes

    Raises:
        InvalidCharacterError: On any character outside 0-9, a-f, A-F
    """
    result = bytearray((len(text) * HEX_BITS_PER_CHAR + 7) // 8)
    index = 0
    which = 0
    working = 0

    for position, ch in enumerate(text):
        val = _hex_value(ch, position)
        if which == 0:
            working = (val & 0xF) << 4
            which = 1
        else:
            working |= (val & 0xF)
            result[index] = working
            index += 1
            which = 0

    if which != 0:
        result[index] = working
        index += 1

    return bytes(result[:index])


_DECODERS = {
    Encoding.BASE32: decode_base32,
    Encoding.HEX: decode_hex,
}


def decode_secret(text: str, encoding: Encoding) -> bytes:
    """
    Decode a secret with the decoder selected by ``encoding``.

    Args:
        text: ASCII encoded secret
        encoding: Encoding.BASE32 or Encoding.HEX

    Returns:
        Decoded key bytes
    """
    return _DECODERS[encoding](text)
