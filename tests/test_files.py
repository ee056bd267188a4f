"""
Tests for Container File Extraction
===================================

SPC sound themes and ZAP wrist apps, from bytes and from disk.
"""

import pytest

from datalink_sdk.errors import ContainerError, SoundThemeFormatError, WristAppFormatError
from datalink_sdk.files import (
    SOUND_DATA_HEADER,
    WRIST_APP_CODE_INDEX,
    extract_sound_theme,
    extract_wrist_app,
    load_sound_theme,
    load_wrist_app,
)


def make_zap(code_section: bytes, sections: int = WRIST_APP_CODE_INDEX + 2) -> bytes:
    """Build ZAP-like contents with code_section at the code index."""
    parts = [b"TDL ZAP FILE\r\n"]
    for index in range(1, sections):
        parts.append(b"\xac" + f"SECTION {index}".encode() + b"\r\n")
        parts.append(code_section if index == WRIST_APP_CODE_INDEX else b"filler\r\n")
    return b"".join(parts)


# =============================================================================
# Sound Theme Tests
# =============================================================================

class TestSoundTheme:
    """Tests for SPC extraction."""

    def test_strips_header(self):
        assert extract_sound_theme(SOUND_DATA_HEADER + b"\x01\x02") == b"\x01\x02"

    def test_without_header(self):
        assert extract_sound_theme(b"\x01\x02\x03") == b"\x01\x02\x03"

    def test_full_buffer(self):
        assert len(extract_sound_theme(SOUND_DATA_HEADER + bytes(256))) == 256

    def test_too_long(self):
        with pytest.raises(SoundThemeFormatError):
            extract_sound_theme(SOUND_DATA_HEADER + bytes(257))

    def test_partial_header_kept(self):
        assert extract_sound_theme(b"\x25\x04\x00") == b"\x25\x04\x00"

    def test_empty(self):
        with pytest.raises(SoundThemeFormatError):
            extract_sound_theme(SOUND_DATA_HEADER)

    def test_load(self, tmp_path):
        path = tmp_path / "DEFHIGH.SPC"
        path.write_bytes(SOUND_DATA_HEADER + bytes(range(20)))
        assert load_sound_theme(path) == bytes(range(20))

    def test_load_missing(self, tmp_path):
        """Unreadable files surface as ContainerError with the cause kept."""
        with pytest.raises(ContainerError) as exc_info:
            load_sound_theme(tmp_path / "missing.spc")
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_load_empty_names_file(self, tmp_path):
        path = tmp_path / "EMPTY.SPC"
        path.write_bytes(b"")
        with pytest.raises(SoundThemeFormatError) as exc_info:
            load_sound_theme(path)
        assert exc_info.value.filename == str(path)


# =============================================================================
# Wrist App Tests
# =============================================================================

class TestWristApp:
    """Tests for ZAP extraction."""

    def test_decodes_code_section(self):
        assert extract_wrist_app(make_zap(b"3135300A\r\n")) == b"150\n"

    def test_lowercase_and_wrapped_hex(self):
        assert extract_wrist_app(make_zap(b"de ad\r\nbe ef\r\n")) == b"\xde\xad\xbe\xef"

    def test_too_few_sections(self):
        with pytest.raises(WristAppFormatError):
            extract_wrist_app(make_zap(b"00\r\n", sections=WRIST_APP_CODE_INDEX))

    def test_no_delimiters(self):
        with pytest.raises(WristAppFormatError):
            extract_wrist_app(b"just some bytes")

    def test_invalid_hex(self):
        with pytest.raises(WristAppFormatError) as exc_info:
            extract_wrist_app(make_zap(b"zz\r\n"))
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_odd_length_hex(self):
        with pytest.raises(WristAppFormatError):
            extract_wrist_app(make_zap(b"123\r\n"))

    def test_empty_code_section(self):
        with pytest.raises(WristAppFormatError):
            extract_wrist_app(make_zap(b"\r\n"))

    def test_is_container_error(self):
        with pytest.raises(ContainerError):
            extract_wrist_app(b"")

    def test_load(self, tmp_path):
        path = tmp_path / "TIMER.ZAP"
        path.write_bytes(make_zap(b"0102\r\n"))
        assert load_wrist_app(path) == b"\x01\x02"

    def test_load_bad_file_names_file(self, tmp_path):
        path = tmp_path / "BAD.ZAP"
        path.write_bytes(b"garbage")
        with pytest.raises(WristAppFormatError) as exc_info:
            load_wrist_app(path)
        assert str(path) in str(exc_info.value)
