"""
Tests for the Command Generators and Session
============================================

This module tests every single-purpose watch command:
- Sync preamble (unframed)
- Start / End / Beep
- Time (weekday numbering, 12/24h flag, date formats, zone validation)
- Alarm (number validation, message padding)
- SoundOptions
- SoundTheme and WristApp multi-packet groups
- ProtocolVariant lookups
- Session ordering

Expected packets are golden values captured for real watches.
"""

import datetime

import pytest

from datalink_sdk.codec.crc import verify_frame
from datalink_sdk.errors import (
    InvalidAlarmNumberError,
    InvalidZoneError,
    PreconditionError,
    SoundThemeFormatError,
)
from datalink_sdk.protocol import (
    Alarm,
    Beep,
    DateFormat,
    End,
    PacketGenerator,
    ProtocolVariant,
    Session,
    SoundOptions,
    SoundTheme,
    Start,
    Sync,
    Time,
    WristApp,
)

SOUND_THEME_DATA = b"binary sound data that gets sent verbatim"

WRIST_APP_DATA = (
    b"150 data: Lorem ipsum dolor sit amet, consectetur adipiscing elit, "
    b"sed do eiusmod tempor incididunt ut labore et dolore magna aliqua."
)


# =============================================================================
# Sync / Start / End
# =============================================================================

class TestSync:
    """Tests for the sync preamble."""

    def test_default_length(self):
        """Ping, 300 sync-1 bytes, 40 sync-2 bytes."""
        packets = Sync().packets()
        assert len(packets) == 1
        packet = packets[0]
        assert len(packet) == 341
        assert packet[0] == 0x78
        assert packet[1:301] == b"\x55" * 300
        assert packet[301:] == b"\xaa" * 40

    def test_legacy_default_length(self):
        packet = Sync(variant=ProtocolVariant.LEGACY).packets()[0]
        assert len(packet) == 1 + 150 + 40

    def test_explicit_length(self):
        packet = Sync(length=10).packets()[0]
        assert packet == b"\x78" + b"\x55" * 10 + b"\xaa" * 40

    def test_not_framed(self):
        """The first byte is the ping, not a length."""
        assert Sync(length=5).packets()[0][0] == 0x78


class TestStartEnd:
    """Tests for transfer start and end packets."""

    def test_start_current(self):
        assert Start().packets() == [bytes([7, 32, 0, 0, 4, 195, 191])]

    def test_start_legacy(self):
        assert Start(ProtocolVariant.LEGACY).packets() == [bytes([7, 32, 0, 0, 3, 1, 254])]

    def test_end(self):
        assert End().packets() == [bytes([4, 33, 216, 194])]

    def test_beep(self):
        packet = Beep().packets()[0]
        assert packet[0] == 12
        assert packet[1:-2] == bytes([0x23, 0x04, 0x3E, 0xA6, 0x01, 0xC7, 0x00, 0x28, 0x81])
        assert verify_frame(packet)


# =============================================================================
# Time
# =============================================================================

class TestTime:
    """Tests for the Time command."""

    def test_layout(self):
        t = Time(
            zone=1,
            time=datetime.datetime(2022, 10, 15, 19, 42, 7),
            is_24h=True,
            date_format=DateFormat.DAY_DASH_MONTH_DASH_YEAR,
            name="PDT",
        )
        packet = t.packets()[0]
        assert packet[0] == 17
        assert list(packet[1:-2]) == [
            0x32, 1, 7, 19, 42, 10, 15, 22,
            25, 13, 29,          # "pdt"
            5,                   # Saturday
            2,                   # 24h
            1,                   # day-month-year
        ]
        assert verify_frame(packet)

    def test_saturday_is_5(self):
        t = Time(zone=2, time=datetime.datetime(2022, 10, 15))
        assert t.weekday == 5

    def test_friday_is_4(self):
        t = Time(zone=2, time=datetime.datetime(2022, 5, 20))
        assert t.weekday == 4

    def test_monday_is_0(self):
        assert Time(zone=1, time=datetime.datetime(2024, 1, 1)).weekday == 0

    def test_12h_flag(self):
        packet = Time(zone=1, time=datetime.datetime(2022, 1, 1), is_24h=False).packets()[0]
        assert packet[-4] == 1

    def test_name_padded_and_truncated(self):
        """Zone names are exactly three characters."""
        assert list(Time(zone=1, time=datetime.datetime(2022, 1, 1), name="UTC+1").name_codes) == [30, 29, 12]
        assert list(Time(zone=1, time=datetime.datetime(2022, 1, 1), name="X").name_codes) == [33, 36, 36]

    def test_missing_name_is_blank(self):
        assert list(Time(zone=1, time=datetime.datetime(2022, 1, 1)).name_codes) == [36, 36, 36]

    def test_two_digit_year(self):
        packet = Time(zone=1, time=datetime.datetime(1999, 12, 31)).packets()[0]
        assert packet[8] == 99

    @pytest.mark.parametrize("fmt,code", [
        (DateFormat.MONTH_DASH_DAY_DASH_YEAR, 0),
        (DateFormat.DAY_DASH_MONTH_DASH_YEAR, 1),
        (DateFormat.YEAR_DASH_MONTH_DASH_DAY, 2),
        (DateFormat.MONTH_DOT_DAY_DOT_YEAR, 4),
        (DateFormat.DAY_DOT_MONTH_DOT_YEAR, 5),
        (DateFormat.YEAR_DOT_MONTH_DOT_DAY, 6),
    ])
    def test_date_format_codes(self, fmt, code):
        packet = Time(zone=1, time=datetime.datetime(2022, 1, 1), date_format=fmt).packets()[0]
        assert packet[-3] == code

    @pytest.mark.parametrize("zone", [0, 3, -1])
    def test_invalid_zone(self, zone):
        """An invalid zone fails at construction, before any packet exists."""
        with pytest.raises(InvalidZoneError):
            Time(zone=zone, time=datetime.datetime(2022, 1, 1))

    def test_invalid_zone_is_value_error(self):
        with pytest.raises(ValueError):
            Time(zone=3, time=datetime.datetime(2022, 1, 1))


# =============================================================================
# Alarm
# =============================================================================

class TestAlarm:
    """Tests for the Alarm command."""

    def test_audible_alarm(self):
        alarm = Alarm(number=1, audible=True, hour=9, minute=0, message="Wake up")
        assert alarm.packets() == [bytes(
            [18, 80, 1, 9, 0, 0, 0, 32, 10, 20, 14, 36, 30, 25, 36, 1, 32, 240]
        )]

    def test_silent_alarm(self):
        alarm = Alarm(number=3, audible=False, hour=9, minute=10, message="Get up")
        assert alarm.packets() == [bytes(
            [18, 80, 3, 9, 10, 0, 0, 16, 14, 29, 36, 30, 25, 36, 36, 0, 191, 169]
        )]

    def test_unpadded_message(self):
        packet = Alarm(number=2, audible=True, hour=6, minute=30, message="Run", pad=False).packets()[0]
        assert packet[0] == 3 + 6 + 3 + 1
        assert list(packet[7:10]) == [27, 30, 23]
        assert packet[10] == 1
        assert verify_frame(packet)

    def test_long_message_truncated(self):
        packet = Alarm(number=5, audible=True, hour=0, minute=0, message="Wake up now please").packets()[0]
        assert packet[0] == 18

    @pytest.mark.parametrize("number", [0, 6, 99])
    def test_invalid_number(self, number):
        with pytest.raises(InvalidAlarmNumberError) as exc_info:
            Alarm(number=number, audible=True, hour=9, minute=0)
        assert exc_info.value.value == number

    def test_precondition_hierarchy(self):
        with pytest.raises(PreconditionError):
            Alarm(number=6, audible=True, hour=9, minute=0)

    @pytest.mark.parametrize("hour,minute,field", [
        (24, 0, "alarm hour"),
        (300, 0, "alarm hour"),
        (-1, 0, "alarm hour"),
        (9, 60, "alarm minute"),
        (9, -5, "alarm minute"),
    ])
    def test_invalid_time(self, hour, minute, field):
        with pytest.raises(PreconditionError) as exc_info:
            Alarm(number=1, audible=True, hour=hour, minute=minute)
        assert exc_info.value.field == field

    def test_time_bounds_accepted(self):
        assert len(Alarm(number=1, audible=False, hour=23, minute=59).packets()) == 1


# =============================================================================
# Sound Options
# =============================================================================

class TestSoundOptions:
    """Tests for the SoundOptions command."""

    def test_chime_on_beep_off(self):
        assert SoundOptions(hourly_chime=True, button_beep=False).packets() == [
            bytes([6, 113, 1, 0, 3, 81])
        ]

    def test_flags(self):
        packet = SoundOptions(hourly_chime=False, button_beep=True).packets()[0]
        assert list(packet[1:4]) == [0x71, 0, 1]


# =============================================================================
# Sound Theme and Wrist App
# =============================================================================

class TestSoundTheme:
    """Tests for the SoundTheme packet group."""

    def test_golden(self):
        packets = SoundTheme(SOUND_THEME_DATA).packets()
        assert packets == [
            bytes([7, 144, 3, 2, 215, 254, 41]),
            bytes([38, 145, 3, 1]) + SOUND_THEME_DATA[:32] + bytes([28, 235]),
            bytes([15, 145, 3, 2, 32, 118, 101, 114, 98, 97, 116, 105, 109, 75, 236]),
            bytes([5, 146, 3, 96, 61]),
        ]

    def test_offset(self):
        assert SoundTheme(bytes(41)).offset == 215
        assert SoundTheme(bytes(200)).offset == 56
        assert SoundTheme(bytes(256)).offset == 0

    def test_too_long(self):
        with pytest.raises(SoundThemeFormatError):
            SoundTheme(bytes(257))

    def test_all_packets_valid(self):
        for packet in SoundTheme(bytes(range(100))).packets():
            assert verify_frame(packet)


class TestWristApp:
    """Tests for the WristApp packet group."""

    def test_golden(self):
        packets = WristApp(WRIST_APP_DATA).packets()
        footers = [(211, 127), (63, 42), (140, 40), (167, 146)]

        assert len(packets) == 8
        assert packets[0] == bytes([5, 147, 2, 48, 253])
        assert packets[1] == bytes([7, 144, 2, 5, 1, 144, 251])
        for i, footer in enumerate(footers):
            chunk = WRIST_APP_DATA[i * 32:(i + 1) * 32]
            assert packets[2 + i] == bytes([38, 145, 2, i + 1]) + chunk + bytes(footer)
        assert packets[6] == bytes([11, 145, 2, 5, 105, 113, 117, 97, 46, 102, 103])
        assert packets[7] == bytes([5, 146, 2, 160, 252])

    def test_chunk_count(self):
        assert WristApp(WRIST_APP_DATA).chunk_count == 5
        assert WristApp(bytes(32)).chunk_count == 1
        assert WristApp(bytes(33)).chunk_count == 2


# =============================================================================
# Protocol Variants
# =============================================================================

class TestProtocolVariant:
    """Tests for variant lookups."""

    @pytest.mark.parametrize("name,variant", [
        ("legacy", ProtocolVariant.LEGACY),
        ("LEGACY", ProtocolVariant.LEGACY),
        ("3", ProtocolVariant.LEGACY),
        ("current", ProtocolVariant.CURRENT),
        (" 4 ", ProtocolVariant.CURRENT),
    ])
    def test_from_name(self, name, variant):
        assert ProtocolVariant.from_name(name) is variant

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            ProtocolVariant.from_name("9")

    def test_defaults(self):
        assert ProtocolVariant.LEGACY.default_sync_length == 150
        assert ProtocolVariant.CURRENT.default_sync_length == 300
        assert ProtocolVariant.CURRENT.version == 4


# =============================================================================
# Session
# =============================================================================

class TestSession:
    """Tests for the Session composer."""

    def test_concatenates_in_order(self):
        session = Session()
        session.add(Sync(length=3))
        session.add(Start())
        session.add(SoundOptions(hourly_chime=True))
        session.add(End())

        packets = session.packets()
        assert packets[0] == Sync(length=3).packets()[0]
        assert packets[1:] == Start().packets() + SoundOptions(hourly_chime=True).packets() + End().packets()

    def test_flattens_multi_packet_commands(self):
        session = Session([Start(), WristApp(WRIST_APP_DATA), End()])
        assert len(session.packets()) == 1 + 8 + 1

    def test_idempotent(self):
        session = Session([Sync(), Start(), Alarm(1, True, 7, 0, "up"), End()])
        assert session.packets() == session.packets()

    def test_does_not_reorder(self):
        """Ordering is the caller's responsibility."""
        session = Session([End(), Start()])
        assert session.packets() == End().packets() + Start().packets()

    def test_rejects_non_generator(self):
        with pytest.raises(TypeError):
            Session().add(b"\x21")

    def test_constructor_rejects_non_generator(self):
        with pytest.raises(TypeError):
            Session([Start(), "End"])

    def test_extend_and_len(self):
        session = Session()
        session.extend([Start(), End()])
        assert len(session) == 2
        assert [type(c) for c in session] == [Start, End]

    def test_empty(self):
        assert Session().packets() == []

    def test_custom_generator(self):
        """Any PacketGenerator can join a session."""

        class Raw(PacketGenerator):
            def packets(self):
                return [b"\x01\x02"]

        assert Session([Raw()]).packets() == [b"\x01\x02"]
