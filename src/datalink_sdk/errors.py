"""
Datalink SDK Error Hierarchy
============================

This module defines the exception hierarchy for the entire Datalink SDK.
All exceptions inherit from DatalinkError, allowing callers to catch all
SDK-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
DatalinkError (base)
├── CodecError (packet generation)
│   ├── PreconditionError - invalid field value supplied by the caller
│   │   ├── InvalidZoneError - time zone not 1 or 2
│   │   ├── InvalidAlarmNumberError - alarm number not 1-5
│   │   ├── InvalidPriorityError - list priority not 1-5
│   │   └── InvalidNotificationError - appointment notification not 0-30/5
│   └── PacketSizeError - framed packet does not fit a one-byte length
├── ContainerError (theme/app container files)
│   ├── SoundThemeFormatError - unusable SPC sound theme
│   └── WristAppFormatError - unusable ZAP wrist app
├── DataFileError - malformed JSON organizer data
└── CommsError (transmission)
    ├── ConnectionError - cannot open the transport
    └── TransferError - write failed mid-transmission

Error Classes
-------------
Precondition errors are raised when a command or record is constructed, so
an invalid value never produces a partial packet stream. Text encoding never
raises: characters outside the device alphabet degrade to a space and long
strings are truncated to the field width, which is what the watch firmware
itself tolerates.

Container, data file and transport errors are recoverable. The underlying
cause (OSError, serial.SerialException, json.JSONDecodeError) is chained
with ``raise ... from`` so it remains available to the caller.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class DatalinkError(Exception):
    """
    Base exception for all Datalink SDK errors.

    All exceptions in the SDK inherit from this class, allowing callers
    to catch all SDK-related errors with a single except clause:

        try:
            adapter.write(session.packets())
        except DatalinkError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Codec Exceptions
# =============================================================================

class CodecError(DatalinkError):
    """Base exception for errors raised while building packets."""
    pass


class PreconditionError(CodecError, ValueError):
    """
    A field value is outside the range the device accepts.

    Also a ValueError so generic callers that validate input with
    ``except ValueError`` keep working.

    Attributes:
        field: Name of the offending field
        value: The rejected value
    """

    def __init__(self, field: str, value: object, allowed: str):
        self.field = field
        self.value = value
        self.allowed = allowed
        super().__init__(f"invalid {field} {value!r}: must be {allowed}")


class InvalidZoneError(PreconditionError):
    """Time zone number is not 1 or 2."""

    def __init__(self, zone: object):
        super().__init__("time zone", zone, "1 or 2")


class InvalidAlarmNumberError(PreconditionError):
    """Alarm number is outside 1-5."""

    def __init__(self, number: object):
        super().__init__("alarm number", number, "between 1 and 5")


class InvalidPriorityError(PreconditionError):
    """List item priority is outside 1-5."""

    def __init__(self, priority: object):
        super().__init__("list priority", priority, "between 1 and 5 or None")


class InvalidNotificationError(PreconditionError):
    """Appointment notification lead time is not one of the device presets."""

    def __init__(self, minutes: object):
        super().__init__(
            "appointment notification", minutes,
            "one of 0, 5, 10, 15, 20, 25, 30 minutes or None",
        )


class PacketSizeError(CodecError):
    """
    A framed packet would exceed the 255 bytes a length byte can describe.

    Attributes:
        size: Total framed size that was requested
    """

    def __init__(self, size: int, limit: int = 255):
        self.size = size
        self.limit = limit
        super().__init__(
            f"framed packet of {size} bytes exceeds the {limit}-byte limit"
        )


# =============================================================================
# Container File Exceptions
# =============================================================================

class ContainerError(DatalinkError):
    """
    A sound theme or wrist app container could not be read or decoded.

    Attributes:
        filename: Source file name (optional)
        reason: Why extraction failed
    """

    def __init__(self, reason: str, filename: Optional[str] = None):
        self.reason = reason
        self.filename = filename
        if filename:
            super().__init__(f"{filename}: {reason}")
        else:
            super().__init__(reason)


class SoundThemeFormatError(ContainerError):
    """SPC sound theme data is unusable."""
    pass


class WristAppFormatError(ContainerError):
    """
    ZAP wrist app data is unusable.

    Raised when the delimited code section is missing or is not valid
    hexadecimal text.
    """
    pass


# =============================================================================
# Data File Exceptions
# =============================================================================

class DataFileError(DatalinkError):
    """
    The JSON organizer data file is malformed.

    Attributes:
        location: Dotted path into the document, e.g. "alarms[2].hour"
    """

    def __init__(self, message: str, location: Optional[str] = None):
        self.location = location
        if location:
            super().__init__(f"{location}: {message}")
        else:
            super().__init__(message)


# =============================================================================
# Communication Exceptions
# =============================================================================

class CommsError(DatalinkError):
    """Base exception for transmission errors."""
    pass


class ConnectionError(CommsError):
    """
    Cannot open the transport.

    Raised when:
    - Serial port doesn't exist
    - Serial port is in use by another process
    - Permission denied accessing the port
    - LED sysfs node is missing
    """
    pass


class TransferError(CommsError):
    """
    Writing to the transport failed part way through a transmission.

    The watch has no back channel, so a failed transfer cannot be resumed;
    the whole session has to be sent again.

    Attributes:
        packet_index: 0-based index of the packet being written (optional)
    """

    def __init__(self, message: str, packet_index: Optional[int] = None):
        self.packet_index = packet_index
        if packet_index is not None:
            super().__init__(f"{message} (packet {packet_index})")
        else:
            super().__init__(message)
