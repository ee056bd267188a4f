"""
Packet Framing and Pagination
=============================

Three small building blocks shared by every command generator:

- ``frame``: length byte + payload + CRC footer (a complete wire packet)
- ``frame_len``: length byte + payload (an EEPROM sub-record)
- ``paginate``: split a payload into numbered chunks behind a 2-byte header

Packet Layout
-------------
Framed packet::

    +--------+-----------------+---------+---------+
    | LENGTH | PAYLOAD (0-252) | CRC_HI  | CRC_LO  |
    +--------+-----------------+---------+---------+

LENGTH counts the whole packet, itself and the footer included, so a
receiver can resynchronise on the first byte of any packet. The checksum
covers LENGTH and PAYLOAD.

Length-framed record::

    +--------+-----------------+
    | LENGTH | PAYLOAD (0-254) |
    +--------+-----------------+

Paginated chunk (before framing)::

    +----------+----------+-------+-----------------------+
    | HEADER_0 | HEADER_1 | INDEX | CHUNK (<= chunk_size) |
    +----------+----------+-------+-----------------------+

INDEX starts at 1.
"""

from typing import Final, Iterable, Sequence

from datalink_sdk.codec.crc import crc16_arc, crc_to_bytes
from datalink_sdk.errors import PacketSizeError

# =============================================================================
# Constants
# =============================================================================

# A length byte can describe at most this many bytes
MAX_PACKET_SIZE: Final[int] = 255

# Length byte + 2-byte CRC footer
FRAME_OVERHEAD: Final[int] = 3

MAX_FRAMED_PAYLOAD: Final[int] = MAX_PACKET_SIZE - FRAME_OVERHEAD


# =============================================================================
# Framing
# =============================================================================

def frame(payload: bytes) -> bytes:
    """
    Wrap a payload with its length header and CRC-16/ARC footer.

    Args:
        payload: Packet body, opcode first.

    Returns:
        The complete packet as it is written to the transport.

    Raises:
        PacketSizeError: If the framed packet would exceed 255 bytes.

    Example:
        >>> list(frame(bytes([0x21])))
        [4, 33, 216, 194]
    """
    size = len(payload) + FRAME_OVERHEAD
    if size > MAX_PACKET_SIZE:
        raise PacketSizeError(size)

    body = bytes([size]) + bytes(payload)
    return body + crc_to_bytes(crc16_arc(body))


def frame_len(payload: bytes) -> bytes:
    """
    Prefix a payload with a length byte that counts itself.

    Used for EEPROM records, which are concatenated and then framed
    as a whole.

    Raises:
        PacketSizeError: If the record would exceed 255 bytes.
    """
    size = len(payload) + 1
    if size > MAX_PACKET_SIZE:
        raise PacketSizeError(size)
    return bytes([size]) + bytes(payload)


def frame_all(payloads: Iterable[bytes]) -> list[bytes]:
    """Frame each payload independently, preserving order."""
    return [frame(p) for p in payloads]


# =============================================================================
# Pagination
# =============================================================================

def paginate(header: Sequence[int], chunk_size: int, data: bytes) -> list[bytes]:
    """
    Split data into numbered chunk payloads.

    Packet ``i`` (1-based) is ``header + [i] + chunk_i``. Empty data still
    produces one packet with an empty chunk, so a section header that
    announces the chunk count always agrees with the packets that follow.

    Args:
        header: Two command bytes prefixed to every chunk.
        chunk_size: Maximum bytes of data per chunk (>= 1).
        data: Bytes to split.

    Returns:
        Unframed chunk payloads in order.

    Raises:
        ValueError: If chunk_size is less than 1 or header is not 2 bytes.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")
    if len(header) != 2:
        raise ValueError(f"paginator header must be 2 bytes, got {len(header)}")

    data = bytes(data)
    prefix = bytes(header)
    chunks = [data[i:i + chunk_size] for i in range(0, len(data), chunk_size)]
    if not chunks:
        chunks = [b""]

    return [
        prefix + bytes([index]) + chunk
        for index, chunk in enumerate(chunks, start=1)
    ]


def chunk_count(chunk_size: int, data: bytes) -> int:
    """Number of packets ``paginate`` produces for data."""
    return max(1, -(-len(data) // chunk_size))
