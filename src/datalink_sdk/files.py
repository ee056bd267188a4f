"""
Sound Theme and Wrist App Container Files
=========================================

The original Timex Datalink software distributes sound themes as ``.SPC``
files and wrist applications as ``.ZAP`` files. Only a raw byte payload
from each is sent to the watch; this module extracts it.

SPC Format
----------
Raw theme bytes, optionally preceded by the 4-byte header ``25 04 19 69``.

ZAP Format
----------
A text file whose sections are separated by lines that start with the
byte 0xAC (the Latin-1 "¬" sign) and end in CRLF. Section 18 holds the
program code as hexadecimal text::

    ...¬...\\r\\n
    <section 17>
    ¬...\\r\\n
    3031323334...      <- code section, hex digits
    ¬...\\r\\n
"""

import logging
import re
from pathlib import Path
from typing import Final, Union

from datalink_sdk.errors import ContainerError, SoundThemeFormatError, WristAppFormatError
from datalink_sdk.protocol.commands import SOUND_THEME_MAX_LENGTH

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

SOUND_DATA_HEADER: Final[bytes] = bytes([0x25, 0x04, 0x19, 0x69])

WRIST_APP_DELIMITER: Final[re.Pattern[bytes]] = re.compile(rb"\xac.*?\r\n")

WRIST_APP_CODE_INDEX: Final[int] = 18


# =============================================================================
# Extraction
# =============================================================================

def extract_sound_theme(data: bytes) -> bytes:
    """
    Strip the optional SPC header from sound theme data.

    Raises:
        SoundThemeFormatError: If no theme bytes remain or they do not
            fit the 256-byte sound buffer.
    """
    if data.startswith(SOUND_DATA_HEADER):
        data = data[len(SOUND_DATA_HEADER):]
    if not data:
        raise SoundThemeFormatError("sound theme contains no data")
    if len(data) > SOUND_THEME_MAX_LENGTH:
        raise SoundThemeFormatError(
            f"sound theme is {len(data)} bytes, at most {SOUND_THEME_MAX_LENGTH} fit"
        )
    return bytes(data)


def extract_wrist_app(data: bytes) -> bytes:
    """
    Decode the program code section of ZAP file contents.

    Raises:
        WristAppFormatError: If the code section is missing, empty or
            not hexadecimal text.
    """
    sections = WRIST_APP_DELIMITER.split(data)
    if len(sections) <= WRIST_APP_CODE_INDEX:
        raise WristAppFormatError(
            f"expected at least {WRIST_APP_CODE_INDEX + 1} sections, "
            f"found {len(sections)}"
        )

    code = b"".join(sections[WRIST_APP_CODE_INDEX].split())
    if not code:
        raise WristAppFormatError("code section is empty")

    try:
        return bytes.fromhex(code.decode("ascii"))
    except (UnicodeDecodeError, ValueError) as e:
        raise WristAppFormatError(f"code section is not valid hex: {e}") from e


# =============================================================================
# File Loading
# =============================================================================

def _read(path: Union[str, Path]) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise ContainerError(f"cannot read file: {e.strerror or e}", str(path)) from e


def load_sound_theme(path: Union[str, Path]) -> bytes:
    """
    Read an SPC file and return the theme bytes.

    Raises:
        ContainerError: If the file cannot be read.
        SoundThemeFormatError: If it holds no theme data.
    """
    try:
        theme = extract_sound_theme(_read(path))
    except SoundThemeFormatError as e:
        raise SoundThemeFormatError(e.reason, str(path)) from e
    logger.info("Loaded sound theme %s (%d bytes)", path, len(theme))
    return theme


def load_wrist_app(path: Union[str, Path]) -> bytes:
    """
    Read a ZAP file and return the decoded program bytes.

    Raises:
        ContainerError: If the file cannot be read.
        WristAppFormatError: If the code section cannot be decoded.
    """
    try:
        app = extract_wrist_app(_read(path))
    except WristAppFormatError as e:
        raise WristAppFormatError(e.reason, str(path)) from e
    logger.info("Loaded wrist app %s (%d bytes)", path, len(app))
    return app
