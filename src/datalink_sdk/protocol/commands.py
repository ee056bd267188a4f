"""
Datalink Command Generators
===========================

One class per device command. Each is a frozen dataclass holding the
command's fields; ``packets()`` returns the framed wire packets.

Commands
--------
- **Sync**: unframed preamble the watch uses to lock onto the signal
- **Start** / **End**: open and close a transfer
- **Time**: set one of the two time zones
- **Alarm**: program one of the five alarms
- **SoundOptions**: hourly chime and button beep flags
- **SoundTheme**: alarm sound data from an SPC file
- **WristApp**: downloadable program from a ZAP file
- **Beep**: make the watch beep once the transfer has started

Packet Layouts
--------------
All payloads below are wrapped by ``frame`` (length byte + CRC footer)
except Sync.

    Start        20 00 00 VV             VV = protocol version
    End          21
    Time         32 ZZ ss hh mm MM DD YY n1 n2 n3 WD HF DF
    Alarm        50 NN hh mm 00 00 m1..m8 AU
    SoundOptions 71 CH BB

Multi-packet commands (SoundTheme, WristApp) send a section header
announcing the chunk count, 32-byte data chunks and an end marker.
"""

import datetime
import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Final, Optional

from datalink_sdk.codec.charset import CharString
from datalink_sdk.codec.framing import chunk_count, frame, frame_all, paginate
from datalink_sdk.errors import (
    InvalidAlarmNumberError,
    InvalidZoneError,
    PreconditionError,
    SoundThemeFormatError,
)
from datalink_sdk.protocol.base import PacketGenerator
from datalink_sdk.protocol.variant import DEFAULT_VARIANT, ProtocolVariant

logger = logging.getLogger(__name__)


# =============================================================================
# Opcodes
# =============================================================================

PING_BYTE: Final[int] = 0x78
SYNC_1_BYTE: Final[int] = 0x55
SYNC_2_BYTE: Final[int] = 0xAA
SYNC_2_LENGTH: Final[int] = 40

CPACKET_START: Final[bytes] = bytes([0x20, 0x00, 0x00])
CPACKET_END: Final[bytes] = bytes([0x21])
CPACKET_TIME: Final[int] = 0x32
CPACKET_ALARM: Final[int] = 0x50
CPACKET_SOUND_OPTIONS: Final[int] = 0x71

CPACKET_SOUND_THEME_SECT: Final[bytes] = bytes([0x90, 0x03])
CPACKET_SOUND_THEME_DATA: Final[bytes] = bytes([0x91, 0x03])
CPACKET_SOUND_THEME_END: Final[bytes] = bytes([0x92, 0x03])

CPACKET_WRIST_APP_CLEAR: Final[bytes] = bytes([0x93, 0x02])
CPACKET_WRIST_APP_SECT: Final[bytes] = bytes([0x90, 0x02])
CPACKET_WRIST_APP_DATA: Final[bytes] = bytes([0x91, 0x02])
CPACKET_WRIST_APP_END: Final[bytes] = bytes([0x92, 0x02])

# Wrist app section headers always carry this marker instead of an offset
WRIST_APP_SECT_MARKER: Final[int] = 1

# Undocumented payload that makes the watch beep
CPACKET_BEEP: Final[bytes] = bytes([0x23, 0x04, 0x3E, 0xA6, 0x01, 0xC7, 0x00, 0x28, 0x81])

CPACKET_DATA_LENGTH: Final[int] = 32

ALARM_MESSAGE_LENGTH: Final[int] = 8
ALARM_COUNT: Final[int] = 5

# The sound buffer is 256 bytes; the header offset is 256 - len(data)
SOUND_THEME_MAX_LENGTH: Final[int] = 256

ZONE_NAME_LENGTH: Final[int] = 3
VALID_ZONES: Final[tuple[int, ...]] = (1, 2)


# =============================================================================
# Sync / Start / End
# =============================================================================

@dataclass(frozen=True)
class Sync(PacketGenerator):
    """
    Preamble sent before anything else.

    The watch uses the long run of 0x55 to recover the bit clock. This is
    the only packet that is not framed.

    Attributes:
        length: Number of sync-1 bytes; None uses the variant default
        variant: Protocol generation
    """

    length: Optional[int] = None
    variant: ProtocolVariant = DEFAULT_VARIANT

    @property
    def sync_length(self) -> int:
        if self.length is None:
            return self.variant.default_sync_length
        return self.length

    def packets(self) -> list[bytes]:
        packet = (
            bytes([PING_BYTE])
            + bytes([SYNC_1_BYTE]) * self.sync_length
            + bytes([SYNC_2_BYTE]) * SYNC_2_LENGTH
        )
        return [packet]


@dataclass(frozen=True)
class Start(PacketGenerator):
    """Opens a transfer and announces the protocol version."""

    variant: ProtocolVariant = DEFAULT_VARIANT

    def packets(self) -> list[bytes]:
        return [frame(CPACKET_START + bytes([self.variant.version]))]


@dataclass(frozen=True)
class End(PacketGenerator):
    """Closes a transfer; the watch commits everything it received."""

    def packets(self) -> list[bytes]:
        return [frame(CPACKET_END)]


@dataclass(frozen=True)
class Beep(PacketGenerator):
    """Makes the watch beep, confirming it is receiving."""

    def packets(self) -> list[bytes]:
        return [frame(CPACKET_BEEP)]


# =============================================================================
# Time
# =============================================================================

class DateFormat(IntEnum):
    """
    Date display order on the watch face.

    Code 3 does not exist in the firmware table.
    """

    MONTH_DASH_DAY_DASH_YEAR = 0
    DAY_DASH_MONTH_DASH_YEAR = 1
    YEAR_DASH_MONTH_DASH_DAY = 2
    MONTH_DOT_DAY_DOT_YEAR = 4
    DAY_DOT_MONTH_DOT_YEAR = 5
    YEAR_DOT_MONTH_DOT_DAY = 6


@dataclass(frozen=True)
class Time(PacketGenerator):
    """
    Sets the clock of one time zone.

    Attributes:
        zone: Time zone slot, 1 or 2
        time: Local wall-clock time to set
        is_24h: Show 24-hour time instead of 12-hour
        date_format: Date display order
        name: Zone label, 3 characters shown on the watch (None for blank)
    """

    zone: int
    time: datetime.datetime
    is_24h: bool = False
    date_format: DateFormat = DateFormat.MONTH_DASH_DAY_DASH_YEAR
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.zone not in VALID_ZONES:
            raise InvalidZoneError(self.zone)

    @property
    def weekday(self) -> int:
        """Day of week with Monday as 0."""
        return (self.time.isoweekday() + 6) % 7

    @property
    def name_codes(self) -> bytes:
        return CharString(self.name or "", ZONE_NAME_LENGTH, pad=True).codes

    def packets(self) -> list[bytes]:
        t = self.time
        payload = bytes([
            CPACKET_TIME,
            self.zone,
            t.second,
            t.hour,
            t.minute,
            t.month,
            t.day,
            t.year % 100,
        ]) + self.name_codes + bytes([
            self.weekday,
            2 if self.is_24h else 1,
            int(self.date_format),
        ])
        return [frame(payload)]


# =============================================================================
# Alarm
# =============================================================================

@dataclass(frozen=True)
class Alarm(PacketGenerator):
    """
    Programs one alarm slot.

    Attributes:
        number: Alarm slot, 1 to 5
        audible: Sound the alarm (otherwise it only shows the message)
        hour: Hour, 0-23
        minute: Minute, 0-59
        message: Up to 8 characters
        pad: Pad the message to 8 characters with spaces
    """

    number: int
    audible: bool
    hour: int
    minute: int
    message: str = ""
    pad: bool = True

    def __post_init__(self) -> None:
        if not 1 <= self.number <= ALARM_COUNT:
            raise InvalidAlarmNumberError(self.number)
        if not 0 <= self.hour <= 23:
            raise PreconditionError("alarm hour", self.hour, "between 0 and 23")
        if not 0 <= self.minute <= 59:
            raise PreconditionError("alarm minute", self.minute, "between 0 and 59")

    def packets(self) -> list[bytes]:
        message = CharString(self.message, ALARM_MESSAGE_LENGTH, pad=self.pad)
        payload = (
            bytes([CPACKET_ALARM, self.number, self.hour, self.minute, 0, 0])
            + message.codes
            + bytes([int(self.audible)])
        )
        return [frame(payload)]


# =============================================================================
# Sound Options
# =============================================================================

@dataclass(frozen=True)
class SoundOptions(PacketGenerator):
    """Hourly chime and key-press beep settings."""

    hourly_chime: bool = False
    button_beep: bool = False

    def packets(self) -> list[bytes]:
        payload = bytes([
            CPACKET_SOUND_OPTIONS,
            int(self.hourly_chime),
            int(self.button_beep),
        ])
        return [frame(payload)]


# =============================================================================
# Sound Theme and Wrist App
# =============================================================================

@dataclass(frozen=True)
class SoundTheme(PacketGenerator):
    """
    Replaces the alarm and chime sounds.

    The section header carries ``256 - len(data)``, the offset at which
    the firmware places the theme in its sound buffer.

    Attributes:
        data: Raw theme bytes (SPC file without its header), at most
            256 bytes

    Raises:
        SoundThemeFormatError: If data does not fit the sound buffer.
    """

    data: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if len(self.data) > SOUND_THEME_MAX_LENGTH:
            raise SoundThemeFormatError(
                f"sound theme is {len(self.data)} bytes, "
                f"at most {SOUND_THEME_MAX_LENGTH} fit"
            )

    @property
    def offset(self) -> int:
        # A full 256-byte theme starts at offset 0
        return (SOUND_THEME_MAX_LENGTH - len(self.data)) % 256

    def packets(self) -> list[bytes]:
        chunks = paginate(CPACKET_SOUND_THEME_DATA, CPACKET_DATA_LENGTH, self.data)
        logger.debug(
            "Sound theme: %d bytes in %d chunks, offset %d",
            len(self.data), len(chunks), self.offset,
        )
        payloads = [
            CPACKET_SOUND_THEME_SECT + bytes([len(chunks), self.offset]),
            *chunks,
            CPACKET_SOUND_THEME_END,
        ]
        return frame_all(payloads)


@dataclass(frozen=True)
class WristApp(PacketGenerator):
    """
    Installs a wrist application.

    The existing application is cleared first.

    Attributes:
        data: Decoded program bytes (code section of a ZAP file)
    """

    data: bytes = field(repr=False)

    @property
    def chunk_count(self) -> int:
        return chunk_count(CPACKET_DATA_LENGTH, self.data)

    def packets(self) -> list[bytes]:
        chunks = paginate(CPACKET_WRIST_APP_DATA, CPACKET_DATA_LENGTH, self.data)
        logger.debug("Wrist app: %d bytes in %d chunks", len(self.data), len(chunks))
        payloads = [
            CPACKET_WRIST_APP_CLEAR,
            CPACKET_WRIST_APP_SECT + bytes([len(chunks), WRIST_APP_SECT_MARKER]),
            *chunks,
            CPACKET_WRIST_APP_END,
        ]
        return frame_all(payloads)
