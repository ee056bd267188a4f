"""
Tests for JSON Organizer Data Loading
=====================================
"""

import datetime
import json

import pytest

from datalink_sdk.datafile import DatalinkData, load_data, parse_data, parse_time
from datalink_sdk.errors import (
    DataFileError,
    InvalidAlarmNumberError,
    InvalidNotificationError,
    InvalidPriorityError,
    PreconditionError,
)
from datalink_sdk.protocol import Alarm, ListItem, PhoneNumber, SoundOptions

SAMPLE = {
    "appointments": [
        {"time": "2022-10-31T19:00:00", "message": "Scare the neighbors"},
    ],
    "anniversaries": [
        {"time": "1985-07-03", "anniversary": "Release of Back to the Future"},
    ],
    "phone_numbers": [
        {"name": "Marty McFly", "number": "1112223333", "type": "H"},
        {"name": "Doc Brown", "number": "5551212"},
    ],
    "lists": [
        {"list_entry": "Muffler bearings", "priority": 2},
        {"list_entry": "Headlight fluid"},
    ],
    "alarms": [
        {"number": 1, "audible": True, "hour": 9, "minute": 0, "message": "Wake up"},
    ],
    "sound_options": {"hourly_chime": True, "button_beep": False},
    "appointment_notification_minutes": 15,
}


class TestParseTime:
    """Tests for timestamp parsing."""

    @pytest.mark.parametrize("text,expected", [
        ("2022-10-31", datetime.datetime(2022, 10, 31)),
        ("2022-10-31T19:00", datetime.datetime(2022, 10, 31, 19, 0)),
        ("2022-10-31T19:00:30", datetime.datetime(2022, 10, 31, 19, 0, 30)),
        ("2022-10-31 19:00:00", datetime.datetime(2022, 10, 31, 19, 0)),
        ("2022-10-31T19:00:00Z", datetime.datetime(2022, 10, 31, 19, 0)),
        ("2022-10-31T19:00:00+02:00", datetime.datetime(2022, 10, 31, 19, 0)),
    ])
    def test_formats(self, text, expected):
        """Wall-clock time is kept; offsets are dropped."""
        assert parse_time(text) == expected

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_time("next tuesday")


class TestParseData:
    """Tests for parse_data()."""

    def test_sample(self):
        data = parse_data(json.dumps(SAMPLE))

        assert len(data.appointments) == 1
        assert data.appointments[0].time == datetime.datetime(2022, 10, 31, 19, 0)
        assert data.anniversaries[0].time == datetime.date(1985, 7, 3)
        assert data.phone_numbers == [
            PhoneNumber("Marty McFly", "1112223333", "H"),
            PhoneNumber("Doc Brown", "5551212", " "),
        ]
        assert data.lists == [ListItem("Muffler bearings", 2), ListItem("Headlight fluid")]
        assert data.alarms == [Alarm(1, True, 9, 0, "Wake up")]
        assert data.sound_options == SoundOptions(hourly_chime=True, button_beep=False)
        assert data.appointment_notification_minutes == 15
        assert data.has_eeprom_records

    def test_empty_document(self):
        data = parse_data("{}")
        assert data == DatalinkData()
        assert not data.has_eeprom_records
        assert data.sound_options is None

    def test_null_collections(self):
        assert parse_data('{"alarms": null}').alarms == []

    def test_invalid_json(self):
        with pytest.raises(DataFileError) as exc_info:
            parse_data("{not json")
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    def test_top_level_not_object(self):
        with pytest.raises(DataFileError):
            parse_data("[]")

    def test_missing_field(self):
        with pytest.raises(DataFileError) as exc_info:
            parse_data('{"appointments": [{"time": "2022-01-01"}]}')
        assert exc_info.value.location == "appointments[0]"

    def test_wrong_type(self):
        with pytest.raises(DataFileError) as exc_info:
            parse_data('{"alarms": [{"number": "1", "audible": true, "hour": 9, "minute": 0}]}')
        assert exc_info.value.location == "alarms[0].number"

    def test_bool_is_not_int(self):
        with pytest.raises(DataFileError):
            parse_data('{"lists": [{"list_entry": "x", "priority": true}]}')

    def test_bad_time(self):
        with pytest.raises(DataFileError) as exc_info:
            parse_data('{"anniversaries": [{"time": "someday", "anniversary": "x"}]}')
        assert exc_info.value.location == "anniversaries[0].time"

    def test_collection_not_list(self):
        with pytest.raises(DataFileError):
            parse_data('{"lists": {"list_entry": "x"}}')

    def test_entry_not_object(self):
        with pytest.raises(DataFileError):
            parse_data('{"lists": ["x"]}')

    def test_alarm_message_optional(self):
        data = parse_data('{"alarms": [{"number": 2, "audible": false, "hour": 6, "minute": 5}]}')
        assert data.alarms[0].message == ""

    def test_invalid_alarm_number(self):
        with pytest.raises(InvalidAlarmNumberError):
            parse_data('{"alarms": [{"number": 6, "audible": true, "hour": 9, "minute": 0}]}')

    def test_alarm_hour_out_of_range(self):
        with pytest.raises(PreconditionError) as exc_info:
            parse_data('{"alarms": [{"number": 1, "audible": true, "hour": 300, "minute": 0}]}')
        assert exc_info.value.field == "alarm hour"

    def test_invalid_priority(self):
        with pytest.raises(InvalidPriorityError):
            parse_data('{"lists": [{"list_entry": "x", "priority": 9}]}')

    def test_invalid_notification(self):
        with pytest.raises(InvalidNotificationError):
            parse_data('{"appointment_notification_minutes": 12}')


class TestLoadData:
    """Tests for load_data()."""

    def test_load(self, tmp_path):
        path = tmp_path / "organizer.json"
        path.write_text(json.dumps(SAMPLE), encoding="utf-8")
        assert len(load_data(path).alarms) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataFileError) as exc_info:
            load_data(tmp_path / "missing.json")
        assert isinstance(exc_info.value.__cause__, OSError)
