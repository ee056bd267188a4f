"""
Datalink Character Sets and Text Packing
========================================

The watch has no notion of ASCII. Every text field is a sequence of indices
into one of a few fixed alphabets, and two of those fields are additionally
bit-packed to save EEPROM space.

Alphabets
---------
- ``CHARS``: the general 6-bit alphabet used for alarm messages and zone names
- ``CHARS_PROTOCOL_6``: the alphabet of the later model family
- ``EEPROM_CHARS``: ``CHARS`` without its last symbol; index 0x3F is reserved
  as the end-of-string marker in packed EEPROM text
- ``PHONE_CHARS``: 16 symbols, digits plus the phone-type letters

Input is lower-cased before lookup. A character that is not in the alphabet
becomes the alphabet's space code, and text longer than the field width is
cut off. Neither case is an error: the firmware does exactly the same when
text is entered on the watch.

Packing
-------
EEPROM text is up to 31 six-bit codes plus the terminator; phone numbers are
up to 12 four-bit codes. Code ``i`` is shifted left by ``bits * i`` and summed
into one integer, which is then written least significant byte first using
only as many bytes as the integer needs. 32 codes of 6 bits is 192 bits, well
past a machine word, so Python's unbounded ``int`` does the accumulation.

Usage
-----
    >>> list(encode("Hello", max_len=5))
    [17, 14, 21, 21, 24]
    >>> eeprom_pack("a").hex()
    'ca0f'
"""

from dataclasses import dataclass, field
from typing import Final, Sequence

# =============================================================================
# Alphabets
# =============================================================================

CHARS: Final[str] = (
    "0123456789abcdefghijklmnopqrstuvwxyz !\"#$%&'()*+,-./:\\;=@?_|<>[]"
)

CHARS_PROTOCOL_6: Final[str] = (
    "0123456789 abcdefghijklmnopqrstuvwxyz!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~"
)

EEPROM_CHARS: Final[str] = CHARS[:-1]

PHONE_CHARS: Final[str] = "0123456789cfhpw "

# Code appended to every packed EEPROM string
EEPROM_TERMINATOR: Final[int] = 0x3F

EEPROM_MAX_LENGTH: Final[int] = 31

PHONE_MAX_LENGTH: Final[int] = 12

EEPROM_BITS: Final[int] = 6

PHONE_BITS: Final[int] = 4


def space_code(alphabet: str) -> int:
    """Index of the space character in an alphabet."""
    return alphabet.index(" ")


# Reverse lookup tables, built once per alphabet
_INDEX_CACHE: dict[str, dict[str, int]] = {}


def _index_of(alphabet: str) -> dict[str, int]:
    table = _INDEX_CACHE.get(alphabet)
    if table is None:
        table = {}
        for position, char in enumerate(alphabet):
            table.setdefault(char, position)
        _INDEX_CACHE[alphabet] = table
    return table


# =============================================================================
# Fixed-Width Encoding
# =============================================================================

def encode(
    text: str,
    alphabet: str = CHARS,
    max_len: int = 32,
    pad: bool = False,
) -> bytes:
    """
    Convert text to alphabet codes.

    Args:
        text: Text to encode. Case is ignored.
        alphabet: Alphabet to index into.
        max_len: Number of characters kept; the rest is dropped.
        pad: Fill the remaining positions up to max_len with space codes.

    Returns:
        One byte per character.
    """
    index = _index_of(alphabet)
    blank = space_code(alphabet)
    codes = [index.get(char, blank) for char in text.lower()[:max_len]]
    if pad:
        codes.extend([blank] * (max_len - len(codes)))
    return bytes(codes)


@dataclass(frozen=True)
class CharString:
    """
    Text encoded into a fixed-width field.

    Attributes:
        text: Original text
        max_len: Field width in characters
        pad: Whether unused positions are filled with spaces
        alphabet: Alphabet used for the lookup
    """

    text: str
    max_len: int
    pad: bool = True
    alphabet: str = field(default=CHARS, repr=False)

    @property
    def codes(self) -> bytes:
        """Encoded bytes; exactly max_len long when padded."""
        return encode(self.text, self.alphabet, self.max_len, self.pad)

    @property
    def length(self) -> int:
        """Number of meaningful characters (excluding padding)."""
        return min(len(self.text), self.max_len)

    def __bytes__(self) -> bytes:
        return self.codes

    def __len__(self) -> int:
        return len(self.codes)


# =============================================================================
# Bit Packing
# =============================================================================

def pack_codes(codes: Sequence[int], bits: int) -> bytes:
    """
    Pack codes at a fixed bit width into a minimal little-endian byte string.

    Code ``i`` lands at bit offset ``bits * i``. A zero high-order byte is
    never emitted, and an all-zero input packs to an empty string.
    """
    value = 0
    for position, code in enumerate(codes):
        value |= code << (bits * position)
    return value.to_bytes((value.bit_length() + 7) // 8, "little")


def eeprom_codes(text: str) -> bytes:
    """EEPROM alphabet codes for text, terminator included."""
    codes = encode(text, EEPROM_CHARS, EEPROM_MAX_LENGTH)
    return codes + bytes([EEPROM_TERMINATOR])


def eeprom_pack(text: str) -> bytes:
    """
    Encode text for storage in the watch EEPROM.

    At most 31 characters are kept. The terminator guarantees the packed
    form is never empty.
    """
    return pack_codes(eeprom_codes(text), EEPROM_BITS)


def phone_pack(text: str) -> bytes:
    """
    Encode a phone number (and its type letter) as 4-bit codes.

    At most 12 characters are kept. Characters outside the phone alphabet
    become spaces.
    """
    return pack_codes(encode(text, PHONE_CHARS, PHONE_MAX_LENGTH), PHONE_BITS)


@dataclass(frozen=True)
class EepromString:
    """Text stored in EEPROM as terminated 6-bit codes."""

    text: str

    @property
    def packed(self) -> bytes:
        return eeprom_pack(self.text)

    def __bytes__(self) -> bytes:
        return self.packed


@dataclass(frozen=True)
class PhoneString:
    """Phone number text stored as 4-bit codes."""

    text: str

    @property
    def packed(self) -> bytes:
        return phone_pack(self.text)

    def __bytes__(self) -> bytes:
        return self.packed
