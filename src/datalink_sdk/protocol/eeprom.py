"""
EEPROM Records and Aggregator
=============================

Appointments, anniversaries, phone numbers and to-do lists all live in the
watch's EEPROM. They are sent as one block: every record is serialised and
length-framed, the four sections are concatenated, and a header packet tells
the firmware where each section starts and how many records it holds.

Record Layouts
--------------
All records are length-framed (first byte counts the whole record)::

    Appointment   LEN MM DD QQ <packed message>     QQ = hour*4 + minute//15
    Anniversary   LEN MM DD <packed text>
    List          LEN PP <packed entry>             PP = priority, 0 = none
    PhoneNumber   LEN <phone-packed "number type"> <packed name>

Packed text is terminated 6-bit codes (see ``codec.charset``).

Block Layout
------------
Sections are written in the order appointments, lists, phone numbers,
anniversaries. Section ``k`` starts at ``0x0236`` plus the sizes of the
sections before it. Header payload::

    90 01 NC A0h A0l A1h A1l A2h A2l A3h A3l C0 C1 C2 C3 YY NN

- NC: number of data chunks that follow
- An: big-endian start address of section n
- Cn: record count of section n
- YY: earliest appointment year, last two digits (0 without appointments)
- NN: notification lead time code, 0xFF for none
"""

import datetime
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Final, Optional, Sequence, Union

from datalink_sdk.codec.charset import eeprom_pack, phone_pack
from datalink_sdk.codec.framing import frame, frame_all, frame_len, paginate
from datalink_sdk.errors import InvalidNotificationError, InvalidPriorityError
from datalink_sdk.protocol.base import PacketGenerator

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

CPACKET_CLEAR: Final[bytes] = bytes([0x93, 0x01])
CPACKET_SECT: Final[bytes] = bytes([0x90, 0x01])
CPACKET_DATA: Final[bytes] = bytes([0x91, 0x01])
CPACKET_END: Final[bytes] = bytes([0x92, 0x01])

CPACKET_DATA_LENGTH: Final[int] = 32

# EEPROM address of the first record
START_ADDRESS: Final[int] = 0x0236

# Lead times the firmware offers, in minutes; the code is the list index
NOTIFICATION_MINUTES: Final[tuple[int, ...]] = (0, 5, 10, 15, 20, 25, 30)

NO_NOTIFICATION: Final[int] = 0xFF

PRIORITY_RANGE: Final[range] = range(1, 6)


def notification_code(minutes: Optional[int]) -> int:
    """
    Encode an appointment notification lead time.

    Args:
        minutes: One of 0, 5, ..., 30, or None to disable notifications.

    Raises:
        InvalidNotificationError: For any other value.
    """
    if minutes is None:
        return NO_NOTIFICATION
    if minutes not in NOTIFICATION_MINUTES:
        raise InvalidNotificationError(minutes)
    return NOTIFICATION_MINUTES.index(minutes)


# =============================================================================
# Records
# =============================================================================

@dataclass(frozen=True)
class Appointment:
    """
    A dated reminder.

    Times are stored at quarter-hour resolution; minutes are rounded down.
    """

    time: datetime.datetime
    message: str

    @property
    def quarter_hour(self) -> int:
        return self.time.hour * 4 + self.time.minute // 15

    def packet(self) -> bytes:
        content = bytes([self.time.month, self.time.day, self.quarter_hour])
        return frame_len(content + eeprom_pack(self.message))


@dataclass(frozen=True)
class Anniversary:
    """A yearly recurring date."""

    time: datetime.date
    anniversary: str

    def packet(self) -> bytes:
        content = bytes([self.time.month, self.time.day])
        return frame_len(content + eeprom_pack(self.anniversary))


class PhoneType(str, Enum):
    """Letter shown next to a phone number."""

    CELL = "c"
    FAX = "f"
    HOME = "h"
    PAGER = "p"
    WORK = "w"
    NONE = " "


@dataclass(frozen=True)
class PhoneNumber:
    """
    A phone directory entry.

    The number and type letter share one 12-character phone field, so long
    numbers push the type letter out.

    Attributes:
        name: Contact name
        number: Digits to store
        type: Type letter (c, f, h, p, w) or a PhoneType; blank by default
    """

    name: str
    number: str
    type: Union[PhoneType, str] = PhoneType.NONE

    @property
    def type_char(self) -> str:
        if isinstance(self.type, PhoneType):
            return self.type.value
        return self.type[:1] or " "

    def packet(self) -> bytes:
        phone = phone_pack(f"{self.number} {self.type_char}")
        return frame_len(phone + eeprom_pack(self.name))


@dataclass(frozen=True)
class ListItem:
    """
    A to-do list entry.

    Attributes:
        list_entry: Entry text
        priority: 1 (highest) to 5, or None
    """

    list_entry: str
    priority: Optional[int] = None

    def __post_init__(self) -> None:
        if self.priority is not None and self.priority not in PRIORITY_RANGE:
            raise InvalidPriorityError(self.priority)

    @property
    def priority_value(self) -> int:
        return self.priority if self.priority is not None else 0

    def packet(self) -> bytes:
        return frame_len(bytes([self.priority_value]) + eeprom_pack(self.list_entry))


Record = Union[Appointment, Anniversary, PhoneNumber, ListItem]


# =============================================================================
# Aggregator
# =============================================================================

@dataclass(frozen=True)
class Eeprom(PacketGenerator):
    """
    Sends all organizer records as one EEPROM image.

    The watch's previous EEPROM contents are cleared first, so the
    collections passed here become the complete new data set.

    Attributes:
        appointments: Appointment records
        anniversaries: Anniversary records
        phone_numbers: PhoneNumber records
        lists: ListItem records
        appointment_notification_minutes: Lead time in minutes, or None
    """

    appointments: Sequence[Appointment] = ()
    anniversaries: Sequence[Anniversary] = ()
    phone_numbers: Sequence[PhoneNumber] = ()
    lists: Sequence[ListItem] = ()
    appointment_notification_minutes: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("appointments", "anniversaries", "phone_numbers", "lists"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        notification_code(self.appointment_notification_minutes)

    @property
    def sections(self) -> tuple[Sequence[Record], ...]:
        """Record collections in the order they are stored."""
        return (self.appointments, self.lists, self.phone_numbers, self.anniversaries)

    @property
    def record_count(self) -> int:
        return sum(len(section) for section in self.sections)

    @property
    def earliest_appointment_year(self) -> int:
        if not self.appointments:
            return 0
        return min(a.time.year for a in self.appointments) % 100

    def section_bytes(self) -> list[bytes]:
        """Serialised records of each section, in storage order."""
        return [
            b"".join(record.packet() for record in section)
            for section in self.sections
        ]

    def addresses(self) -> list[int]:
        """Start address of each section."""
        addresses = []
        address = START_ADDRESS
        for data in self.section_bytes():
            addresses.append(address)
            address += len(data)
        return addresses

    def header(self, chunk_count: int) -> bytes:
        """Section header payload announcing chunk_count data packets."""
        payload = bytearray(CPACKET_SECT)
        payload.append(chunk_count)
        for address in self.addresses():
            payload += address.to_bytes(2, "big")
        payload += bytes(len(section) for section in self.sections)
        payload.append(self.earliest_appointment_year)
        payload.append(notification_code(self.appointment_notification_minutes))
        return bytes(payload)

    def packets(self) -> list[bytes]:
        data = b"".join(self.section_bytes())
        chunks = paginate(CPACKET_DATA, CPACKET_DATA_LENGTH, data)

        logger.debug(
            "EEPROM: %d records, %d bytes in %d chunks",
            self.record_count, len(data), len(chunks),
        )

        return [
            frame(CPACKET_CLEAR),
            frame(self.header(len(chunks))),
            *frame_all(chunks),
            frame(CPACKET_END),
        ]
