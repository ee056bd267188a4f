"""
Datalink Codec Primitives
=========================

Low-level building blocks shared by every command generator.

Modules
-------
- **charset**: Device alphabets, fixed-width encoding and bit packing
- **crc**: CRC-16/ARC checksum
- **framing**: Length/CRC framing and chunk pagination
"""

from datalink_sdk.codec.charset import (
    CHARS,
    CHARS_PROTOCOL_6,
    EEPROM_CHARS,
    EEPROM_TERMINATOR,
    PHONE_CHARS,
    CharString,
    EepromString,
    PhoneString,
    encode,
    eeprom_pack,
    pack_codes,
    phone_pack,
    space_code,
)
from datalink_sdk.codec.crc import (
    crc16_arc,
    crc_to_bytes,
    bytes_to_crc,
    verify_frame,
)
from datalink_sdk.codec.framing import (
    MAX_PACKET_SIZE,
    chunk_count,
    frame,
    frame_all,
    frame_len,
    paginate,
)

__all__ = [
    # Character sets
    "CHARS",
    "CHARS_PROTOCOL_6",
    "EEPROM_CHARS",
    "EEPROM_TERMINATOR",
    "PHONE_CHARS",
    "CharString",
    "EepromString",
    "PhoneString",
    "encode",
    "eeprom_pack",
    "pack_codes",
    "phone_pack",
    "space_code",
    # CRC
    "crc16_arc",
    "crc_to_bytes",
    "bytes_to_crc",
    "verify_frame",
    # Framing
    "MAX_PACKET_SIZE",
    "chunk_count",
    "frame",
    "frame_all",
    "frame_len",
    "paginate",
]
