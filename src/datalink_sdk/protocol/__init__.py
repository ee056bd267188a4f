"""
Datalink Protocol Commands
==========================

Command generators for every packet the watch accepts, the EEPROM
aggregator, and the Session that strings them together.

Example
-------
    >>> from datalink_sdk.protocol import Session, Sync, Start, End, SoundOptions
    >>> session = Session([Sync(), Start(), SoundOptions(hourly_chime=True), End()])
    >>> len(session.packets())
    4
"""

from datalink_sdk.protocol.base import PacketGenerator
from datalink_sdk.protocol.commands import (
    Alarm,
    Beep,
    DateFormat,
    End,
    SoundOptions,
    SoundTheme,
    Start,
    Sync,
    Time,
    WristApp,
)
from datalink_sdk.protocol.eeprom import (
    Anniversary,
    Appointment,
    Eeprom,
    ListItem,
    PhoneNumber,
    PhoneType,
    notification_code,
)
from datalink_sdk.protocol.session import Session
from datalink_sdk.protocol.variant import DEFAULT_VARIANT, ProtocolVariant

__all__ = [
    # Base
    "PacketGenerator",
    "ProtocolVariant",
    "DEFAULT_VARIANT",
    # Commands
    "Alarm",
    "Beep",
    "DateFormat",
    "End",
    "SoundOptions",
    "SoundTheme",
    "Start",
    "Sync",
    "Time",
    "WristApp",
    # EEPROM
    "Anniversary",
    "Appointment",
    "Eeprom",
    "ListItem",
    "PhoneNumber",
    "PhoneType",
    "notification_code",
    # Session
    "Session",
]
