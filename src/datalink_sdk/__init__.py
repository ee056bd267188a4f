"""
Datalink SDK - Packet Toolkit for Timex Datalink Watches
========================================================

This package converts organizer data (time zones, alarms, appointments,
anniversaries, phone numbers, to-do lists, sound themes and wrist
applications) into the byte stream a Timex Datalink watch expects over
its one-way optical link, and sends it.

Main Components
---------------
- **codec**: Device character sets, CRC-16/ARC framing, pagination
- **protocol**: One generator per watch command, the EEPROM aggregator
  and the Session that orders them
- **files**: SPC sound theme and ZAP wrist app extraction
- **datafile**: JSON organizer data loading
- **comms**: Paced serial and LED transmission (tdlink)

Quick Start
-----------
Build and send a session:
    >>> import datetime
    >>> from datalink_sdk import Session, Sync, Start, Time, Alarm, End
    >>> from datalink_sdk.comms import NotebookAdapter
    >>> session = Session([
    ...     Sync(),
    ...     Start(),
    ...     Time(zone=1, time=datetime.datetime.now(), is_24h=True, name="HOM"),
    ...     Alarm(number=1, audible=True, hour=7, minute=0, message="Wake up"),
    ...     End(),
    ... ])
    >>> NotebookAdapter("/dev/ttyACM0").write(session.packets())

Or use the command-line tool:
    $ tdlink send organizer.json --sound-theme DEFHIGH.SPC

Version History
---------------
1.0.0 - Initial release with protocol 3/4 codec, serial and LED adapters
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from datalink_sdk.errors import (
    DatalinkError,
    CodecError,
    PreconditionError,
    InvalidZoneError,
    InvalidAlarmNumberError,
    InvalidPriorityError,
    InvalidNotificationError,
    PacketSizeError,
    ContainerError,
    SoundThemeFormatError,
    WristAppFormatError,
    DataFileError,
    CommsError,
    ConnectionError,
    TransferError,
)
from datalink_sdk.codec import (
    encode,
    eeprom_pack,
    phone_pack,
    frame,
    frame_len,
    paginate,
    crc16_arc,
)
from datalink_sdk.protocol import (
    PacketGenerator,
    ProtocolVariant,
    Sync,
    Start,
    End,
    Beep,
    Time,
    DateFormat,
    Alarm,
    SoundOptions,
    SoundTheme,
    WristApp,
    Appointment,
    Anniversary,
    PhoneNumber,
    PhoneType,
    ListItem,
    Eeprom,
    Session,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "DatalinkError",
    "CodecError",
    "PreconditionError",
    "InvalidZoneError",
    "InvalidAlarmNumberError",
    "InvalidPriorityError",
    "InvalidNotificationError",
    "PacketSizeError",
    "ContainerError",
    "SoundThemeFormatError",
    "WristAppFormatError",
    "DataFileError",
    "CommsError",
    "ConnectionError",
    "TransferError",
    # Codec
    "encode",
    "eeprom_pack",
    "phone_pack",
    "frame",
    "frame_len",
    "paginate",
    "crc16_arc",
    # Protocol
    "PacketGenerator",
    "ProtocolVariant",
    "Sync",
    "Start",
    "End",
    "Beep",
    "Time",
    "DateFormat",
    "Alarm",
    "SoundOptions",
    "SoundTheme",
    "WristApp",
    "Appointment",
    "Anniversary",
    "PhoneNumber",
    "PhoneType",
    "ListItem",
    "Eeprom",
    "Session",
]
