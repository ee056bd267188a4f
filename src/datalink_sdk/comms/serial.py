"""
Serial Port Utilities for Datalink Transmission
===============================================

The watch receives data optically. On a modern computer the light source
is a small microcontroller board (a "notebook adapter") attached over USB
that turns each byte written to its serial port into a flash sequence.

The link runs at 9600 baud, 8N1, with no flow control of any kind: the
watch cannot signal back, so nothing is ever read from the port.
"""

import logging
from dataclasses import dataclass
from typing import Final, Optional

import serial
import serial.tools.list_ports

from datalink_sdk.errors import ConnectionError

logger = logging.getLogger(__name__)


DEFAULT_BAUD_RATE: Final[int] = 9600

# A stalled adapter must not hang the transfer
DEFAULT_WRITE_TIMEOUT: Final[float] = 2.0

# Boards commonly flashed as transmitters
USB_VENDOR_IDS: Final[dict[int, str]] = {
    0x2E8A: "Raspberry Pi",   # RP2040 (ttyACM)
    0x2341: "Arduino",
    0x239A: "Adafruit",
    0x0403: "FTDI",
    0x10C4: "Silicon Labs",
    0x1A86: "QinHeng",        # CH340
}

# Native USB CDC boards, most likely first
PREFERRED_VENDOR_IDS: Final[tuple[int, ...]] = (0x2E8A, 0x2341, 0x239A)

# (substring of the pyserial message, hint shown to the user)
_OPEN_ERROR_HINTS: Final[tuple[tuple[str, str], ...]] = (
    ("permission denied",
     "Permission denied accessing {device}. Add your user to the 'dialout' "
     "group: sudo usermod -a -G dialout $USER"),
    ("no such file",
     "Serial port not found: {device}. Use 'tdlink ports' to list ports."),
    ("not found",
     "Serial port not found: {device}. Use 'tdlink ports' to list ports."),
    ("busy", "Serial port {device} is busy. Close other programs using it."),
    ("in use", "Serial port {device} is busy. Close other programs using it."),
)


@dataclass(frozen=True)
class PortInfo:
    """
    One serial port as reported by the operating system.

    ``vid`` and ``pid`` are None for ports that are not USB devices.
    """

    device: str
    description: str
    manufacturer: Optional[str]
    vid: Optional[int]
    pid: Optional[int]

    @classmethod
    def from_comport(cls, port) -> "PortInfo":
        return cls(
            device=port.device,
            description=port.description or "",
            manufacturer=port.manufacturer,
            vid=port.vid,
            pid=port.pid,
        )

    @property
    def is_usb(self) -> bool:
        return self.vid is not None

    @property
    def vendor_name(self) -> Optional[str]:
        return USB_VENDOR_IDS.get(self.vid) if self.is_usb else None

    @property
    def detection_rank(self) -> int:
        """Lower is a better transmitter candidate."""
        if self.vid in PREFERRED_VENDOR_IDS:
            return PREFERRED_VENDOR_IDS.index(self.vid)
        return len(PREFERRED_VENDOR_IDS)

    def __str__(self) -> str:
        text = self.device
        if self.description:
            text += f" - {self.description}"
        if self.vendor_name:
            text += f" ({self.vendor_name})"
        return text


def list_serial_ports() -> list[PortInfo]:
    """List every serial port the system reports."""
    ports = [PortInfo.from_comport(p) for p in serial.tools.list_ports.comports()]
    for port in ports:
        logger.debug("Found port %s (usb=%s)", port.device, port.is_usb)
    return ports


def find_serial_port() -> Optional[str]:
    """
    Guess which port the transmitter is on.

    USB microcontroller boards win over other USB-serial bridges; among
    equals the first reported port wins. Ports that are not USB are never
    picked.

    Returns:
        Device path, or None when no USB port is present.
    """
    candidates = [p for p in list_serial_ports() if p.is_usb]
    if not candidates:
        logger.debug("No USB serial ports found")
        return None

    best = min(candidates, key=lambda p: p.detection_rank)
    logger.info("Auto-detected port: %s (%s)", best.device, best.vendor_name or best.description)
    return best.device


def _describe_port(port: PortInfo) -> list[str]:
    lines = [f"  {port.device}"]
    if port.description:
        lines.append(f"    Description: {port.description}")
    if port.manufacturer:
        lines.append(f"    Manufacturer: {port.manufacturer}")
    if port.is_usb:
        ids = f"    USB VID:PID: {port.vid:04X}:{port.pid or 0:04X}"
        lines.append(f"{ids} ({port.vendor_name})" if port.vendor_name else ids)
    return lines


def format_port_list(ports: list[PortInfo], verbose: bool = False) -> str:
    """Render ports one per line, or as indented blocks when verbose."""
    if not ports:
        return "No serial ports found."
    if not verbose:
        return "\n".join(f"  {port}" for port in ports)
    return "\n".join(line for port in ports for line in _describe_port(port))


def open_serial_port(
    device: str,
    baud_rate: int = DEFAULT_BAUD_RATE,
    write_timeout: float = DEFAULT_WRITE_TIMEOUT,
) -> serial.Serial:
    """
    Open ``device`` for writing at 8N1 with flow control off.

    The caller owns the returned port and must pass it to
    close_serial_port().

    Raises:
        ConnectionError: If the port cannot be opened. The message carries
            a hint for the common causes and the pyserial error is chained.
    """
    logger.info("Opening serial port: %s at %d baud", device, baud_rate)
    try:
        port = serial.Serial(
            port=device,
            baudrate=baud_rate,
            bytesize=serial.EIGHTBITS,
            parity=serial.PARITY_NONE,
            stopbits=serial.STOPBITS_ONE,
            write_timeout=write_timeout,
            xonxoff=False,
            rtscts=False,
            dsrdtr=False,
        )
    except serial.SerialException as e:
        reason = str(e).lower()
        for fragment, hint in _OPEN_ERROR_HINTS:
            if fragment in reason:
                raise ConnectionError(hint.format(device=device)) from e
        raise ConnectionError(f"Cannot open {device}: {e}") from e

    port.reset_output_buffer()
    return port


def close_serial_port(port: Optional[serial.Serial]) -> None:
    """Drain and close ``port``; failures are logged, not raised."""
    if port is None or not port.is_open:
        return
    try:
        port.flush()
        port.close()
        logger.debug("Serial port closed")
    except (serial.SerialException, OSError) as e:
        logger.warning("Error closing serial port: %s", e)
