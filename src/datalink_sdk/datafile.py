"""
Organizer Data Files
====================

Loads the JSON document that describes what to send to the watch and
turns it into record and command objects.

File Format
-----------
Every key is optional::

    {
      "appointments":   [{"time": "2022-10-31T19:00:00", "message": "Scare the neighbors"}],
      "anniversaries":  [{"time": "1985-07-03", "anniversary": "Back to the Future"}],
      "phone_numbers":  [{"name": "Marty McFly", "number": "1112223333", "type": "H"}],
      "lists":          [{"list_entry": "Muffler bearings", "priority": 2}],
      "alarms":         [{"number": 1, "audible": true, "hour": 9, "minute": 0,
                          "message": "Wake up"}],
      "sound_options":  {"hourly_chime": true, "button_beep": false},
      "appointment_notification_minutes": 15
    }

Times accept "YYYY-MM-DD", "YYYY-MM-DDTHH:MM[:SS]", "YYYY-MM-DD HH:MM[:SS]"
and RFC 3339 strings with an offset; the offset is dropped and the wall
clock time kept, since the watch has no notion of time zones.
"""

import datetime
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar, Union

from datalink_sdk.errors import DataFileError
from datalink_sdk.protocol.commands import Alarm, SoundOptions
from datalink_sdk.protocol.eeprom import (
    Anniversary,
    Appointment,
    ListItem,
    PhoneNumber,
    notification_code,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class DatalinkData:
    """Everything a data file can describe."""

    appointments: list[Appointment] = field(default_factory=list)
    anniversaries: list[Anniversary] = field(default_factory=list)
    phone_numbers: list[PhoneNumber] = field(default_factory=list)
    lists: list[ListItem] = field(default_factory=list)
    alarms: list[Alarm] = field(default_factory=list)
    sound_options: Optional[SoundOptions] = None
    appointment_notification_minutes: Optional[int] = None

    @property
    def has_eeprom_records(self) -> bool:
        return bool(
            self.appointments or self.anniversaries
            or self.phone_numbers or self.lists
        )


# =============================================================================
# Field Helpers
# =============================================================================

def parse_time(value: str) -> datetime.datetime:
    """
    Parse a timestamp from a data file.

    Raises:
        ValueError: If the string is not a recognised date or date-time.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.datetime.fromisoformat(text)
    return parsed.replace(tzinfo=None)


def _require(obj: dict, key: str, kind: type, where: str) -> Any:
    if key not in obj:
        raise DataFileError(f"missing required field '{key}'", where)
    return _check(obj[key], kind, f"{where}.{key}")


def _optional(obj: dict, key: str, kind: type, where: str, default: Any = None) -> Any:
    value = obj.get(key)
    if value is None:
        return default
    return _check(value, kind, f"{where}.{key}")


def _check(value: Any, kind: type, where: str) -> Any:
    # bool is an int subclass; keep it out of numeric fields
    if kind is int and isinstance(value, bool):
        raise DataFileError("expected an integer, got a boolean", where)
    if not isinstance(value, kind):
        raise DataFileError(
            f"expected {kind.__name__}, got {type(value).__name__}", where
        )
    return value


def _time(obj: dict, where: str) -> datetime.datetime:
    text = _require(obj, "time", str, where)
    try:
        return parse_time(text)
    except ValueError as e:
        raise DataFileError(f"invalid time {text!r}", f"{where}.time") from e


def _items(doc: dict, key: str, build: Callable[[dict, str], T]) -> list[T]:
    entries = doc.get(key) or []
    if not isinstance(entries, list):
        raise DataFileError("expected a list", key)
    result = []
    for index, entry in enumerate(entries):
        where = f"{key}[{index}]"
        if not isinstance(entry, dict):
            raise DataFileError("expected an object", where)
        result.append(build(entry, where))
    return result


# =============================================================================
# Record Builders
# =============================================================================

def _appointment(entry: dict, where: str) -> Appointment:
    return Appointment(
        time=_time(entry, where),
        message=_require(entry, "message", str, where),
    )


def _anniversary(entry: dict, where: str) -> Anniversary:
    return Anniversary(
        time=_time(entry, where).date(),
        anniversary=_require(entry, "anniversary", str, where),
    )


def _phone_number(entry: dict, where: str) -> PhoneNumber:
    return PhoneNumber(
        name=_require(entry, "name", str, where),
        number=_require(entry, "number", str, where),
        type=_optional(entry, "type", str, where, default=" "),
    )


def _list_item(entry: dict, where: str) -> ListItem:
    return ListItem(
        list_entry=_require(entry, "list_entry", str, where),
        priority=_optional(entry, "priority", int, where),
    )


def _alarm(entry: dict, where: str) -> Alarm:
    return Alarm(
        number=_require(entry, "number", int, where),
        audible=_require(entry, "audible", bool, where),
        hour=_require(entry, "hour", int, where),
        minute=_require(entry, "minute", int, where),
        message=_optional(entry, "message", str, where, default=""),
    )


# =============================================================================
# Loading
# =============================================================================

def parse_data(text: str) -> DatalinkData:
    """
    Parse a JSON data document.

    Raises:
        DataFileError: If the document is not valid JSON or a field has
            the wrong type.
        PreconditionError: If a value is outside the range the watch
            accepts (alarm number, priority, notification minutes).
    """
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise DataFileError(f"invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e

    if not isinstance(doc, dict):
        raise DataFileError("top level must be an object")

    data = DatalinkData(
        appointments=_items(doc, "appointments", _appointment),
        anniversaries=_items(doc, "anniversaries", _anniversary),
        phone_numbers=_items(doc, "phone_numbers", _phone_number),
        lists=_items(doc, "lists", _list_item),
        alarms=_items(doc, "alarms", _alarm),
    )

    options = doc.get("sound_options")
    if options is not None:
        _check(options, dict, "sound_options")
        data.sound_options = SoundOptions(
            hourly_chime=_optional(options, "hourly_chime", bool, "sound_options", False),
            button_beep=_optional(options, "button_beep", bool, "sound_options", False),
        )

    minutes = _optional(doc, "appointment_notification_minutes", int, "document")
    notification_code(minutes)
    data.appointment_notification_minutes = minutes

    logger.debug(
        "Parsed data: %d appointments, %d anniversaries, %d phone numbers, "
        "%d list items, %d alarms",
        len(data.appointments), len(data.anniversaries), len(data.phone_numbers),
        len(data.lists), len(data.alarms),
    )
    return data


def load_data(path: Union[str, Path]) -> DatalinkData:
    """
    Read and parse a JSON data file.

    Raises:
        DataFileError: If the file cannot be read or parsed.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DataFileError(f"cannot read data file: {e}", str(path)) from e
    logger.info("Loading data file %s", path)
    return parse_data(text)
