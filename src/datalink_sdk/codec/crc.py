"""
CRC-16/ARC Implementation for the Datalink Protocol
===================================================

Every framed Datalink packet ends with a CRC-16/ARC checksum computed over
the length byte and the payload. The watch silently discards packets whose
checksum does not match, so this must be bit-exact.

Technical Details
-----------------
- Polynomial: x^16 + x^15 + x^2 + 1 (0x8005, reflected form 0xA001)
- Initial value: 0x0000
- Input and output reflected, no final XOR
- Check value: CRC("123456789") = 0xBB3D

Usage
-----
    from datalink_sdk.codec.crc import crc16_arc, crc_to_bytes

    checksum = crc16_arc(bytes([0x04, 0x21]))   # 0xD8C2
    footer = crc_to_bytes(checksum)              # b'\\xd8\\xc2'
"""

from typing import Final

# =============================================================================
# CRC-16/ARC Constants
# =============================================================================

CRC_INITIAL: Final[int] = 0x0000

CRC_MASK: Final[int] = 0xFFFF

# Reflected polynomial (0x8005 bit-reversed)
CRC_POLYNOMIAL: Final[int] = 0xA001


# =============================================================================
# Lookup Table Generation
# =============================================================================

def _generate_crc_table() -> tuple[int, ...]:
    """
    Generate the 256-entry CRC lookup table.

    Each entry is the register value after shifting the byte through the
    reflected polynomial eight times, so the main loop only needs one
    table lookup per input byte.

    Returns:
        Tuple of 256 CRC values for each possible byte value.
    """
    table = []
    for byte_val in range(256):
        crc = byte_val
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ CRC_POLYNOMIAL
            else:
                crc >>= 1
        table.append(crc)
    return tuple(table)


# Generated once at import time
CRC_TABLE: Final[tuple[int, ...]] = _generate_crc_table()


# =============================================================================
# CRC Calculation
# =============================================================================

def crc16_arc(data: bytes, initial: int = CRC_INITIAL) -> int:
    """
    Calculate the CRC-16/ARC checksum of data.

    Args:
        data: Input bytes.
        initial: Starting register value. Pass a previous result to
                 continue a checksum over concatenated buffers.

    Returns:
        16-bit CRC value (0x0000 to 0xFFFF).

    Example:
        >>> hex(crc16_arc(b"123456789"))
        '0xbb3d'
    """
    crc = initial & CRC_MASK
    for byte in data:
        crc = (crc >> 8) ^ CRC_TABLE[(crc ^ byte) & 0xFF]
    return crc


def crc16_arc_bitwise(data: bytes, initial: int = CRC_INITIAL) -> int:
    """
    Calculate CRC-16/ARC one bit at a time.

    Slower reference implementation used to cross-check the table.
    """
    crc = initial & CRC_MASK
    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ CRC_POLYNOMIAL
            else:
                crc >>= 1
    return crc


# =============================================================================
# Utility Functions
# =============================================================================

def crc_to_bytes(crc: int) -> bytes:
    """
    Convert a CRC value to the two footer bytes the watch expects.

    The Datalink firmware reads the footer high byte first.

    Args:
        crc: 16-bit CRC value.

    Returns:
        2-byte sequence (high byte, low byte).
    """
    return bytes([(crc >> 8) & 0xFF, crc & 0xFF])


def bytes_to_crc(data: bytes) -> int:
    """
    Convert two footer bytes back to a CRC value.

    Args:
        data: At least 2 bytes (high byte, low byte).

    Returns:
        16-bit CRC value.

    Raises:
        ValueError: If data is shorter than 2 bytes.
    """
    if len(data) < 2:
        raise ValueError(f"Need at least 2 bytes for CRC, got {len(data)}")
    return (data[0] << 8) | data[1]


def verify_frame(packet: bytes) -> bool:
    """
    Check that a framed packet's footer matches its contents.

    Args:
        packet: Complete framed packet (length byte, payload, footer).

    Returns:
        True if the length byte and checksum are both consistent.
    """
    if len(packet) < 3 or packet[0] != len(packet):
        return False
    return crc16_arc(packet[:-2]) == bytes_to_crc(packet[-2:])
