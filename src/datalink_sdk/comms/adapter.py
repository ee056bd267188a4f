"""
Transmission Adapters
=====================

Adapters write a packet stream to the watch. The link is one-way and has
no flow control, so pacing is all the receiver gets: one byte, a short
pause, the next byte, and a longer pause after each packet. Writes are
strictly sequential.

Adapters
--------
- **NotebookAdapter**: a transmitter board on a serial port
- **LedAdapter**: a status LED driven through Linux sysfs (e.g. a phone's
  notification LED), blinking each byte most significant bit first

Both take ``byte_sleep`` and ``packet_sleep`` so that slower or faster
receivers can be matched.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Final, Iterable, Optional, Union

import serial

from datalink_sdk.comms.serial import (
    DEFAULT_BAUD_RATE,
    close_serial_port,
    open_serial_port,
)
from datalink_sdk.config import DEFAULT_BYTE_SLEEP, DEFAULT_PACKET_SLEEP, TransmitConfig
from datalink_sdk.errors import ConnectionError, TransferError

logger = logging.getLogger(__name__)

# Progress callback: (packets sent, total packets)
ProgressCallback = Callable[[int, int], None]

DEFAULT_LED_PATH: Final[str] = "/sys/class/leds/rgb:status"

LED_FULL_BRIGHTNESS: Final[int] = 511

# Dark period before the first packet so the receiver sees a clean start
LED_SETTLE_SLEEP: Final[float] = 0.5


def hex_dump(packet: bytes) -> str:
    """Format a packet as space-separated hex bytes."""
    return " ".join(f"{b:02x}" for b in packet)


# =============================================================================
# Serial Adapter
# =============================================================================

class NotebookAdapter:
    """
    Sends packets through a transmitter on a serial port.

    Args:
        serial_device: Port the transmitter is attached to.
        byte_sleep: Seconds to wait after each byte.
        packet_sleep: Seconds to wait after each packet.
        verbose: Log each packet as hex at INFO level.
        baud_rate: Serial baud rate.

    Example:
        >>> adapter = NotebookAdapter("/dev/ttyACM0")
        >>> adapter.write(session.packets())
    """

    def __init__(
        self,
        serial_device: str,
        byte_sleep: float = DEFAULT_BYTE_SLEEP,
        packet_sleep: float = DEFAULT_PACKET_SLEEP,
        verbose: bool = False,
        baud_rate: int = DEFAULT_BAUD_RATE,
    ) -> None:
        self.serial_device = serial_device
        self.byte_sleep = byte_sleep
        self.packet_sleep = packet_sleep
        self.verbose = verbose
        self.baud_rate = baud_rate

    @classmethod
    def from_config(cls, config: TransmitConfig) -> "NotebookAdapter":
        return cls(
            serial_device=config.serial_device,
            byte_sleep=config.byte_sleep,
            packet_sleep=config.packet_sleep,
            verbose=config.verbose,
        )

    def write(
        self,
        packets: Iterable[bytes],
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        """
        Write every packet, one byte at a time.

        Raises:
            ConnectionError: If the serial port cannot be opened.
            TransferError: If a write fails part way through.
        """
        packets = list(packets)
        port = open_serial_port(self.serial_device, baud_rate=self.baud_rate)
        try:
            for index, packet in enumerate(packets):
                self._log_packet(packet)
                try:
                    for byte in packet:
                        port.write(bytes([byte]))
                        time.sleep(self.byte_sleep)
                except serial.SerialException as e:
                    raise TransferError(
                        f"write to {self.serial_device} failed: {e}", index
                    ) from e
                time.sleep(self.packet_sleep)
                if progress:
                    progress(index + 1, len(packets))
        finally:
            close_serial_port(port)

        logger.info("Sent %d packets to %s", len(packets), self.serial_device)

    def _log_packet(self, packet: bytes) -> None:
        level = logging.INFO if self.verbose else logging.DEBUG
        logger.log(level, "%s", hex_dump(packet))


# =============================================================================
# LED Adapter
# =============================================================================

class LedAdapter:
    """
    Blinks packets out of a sysfs LED.

    Each byte is sent most significant bit first: the LED is driven to
    full brightness for a 1 bit and off for a 0 bit, each held for an
    eighth of ``byte_sleep``, and switched off for ``byte_sleep`` after
    the byte. Multi-colour LEDs are set to white first.

    Args:
        led_path: sysfs LED directory containing ``brightness``.
        byte_sleep: Seconds to wait after each byte.
        packet_sleep: Seconds to wait after each packet.
        verbose: Log each packet as hex at INFO level.
    """

    def __init__(
        self,
        led_path: Union[str, Path] = DEFAULT_LED_PATH,
        byte_sleep: float = DEFAULT_BYTE_SLEEP,
        packet_sleep: float = DEFAULT_PACKET_SLEEP,
        verbose: bool = False,
    ) -> None:
        self.led_path = Path(led_path)
        self.byte_sleep = byte_sleep
        self.packet_sleep = packet_sleep
        self.verbose = verbose

    @property
    def brightness_path(self) -> Path:
        return self.led_path / "brightness"

    @property
    def bit_sleep(self) -> float:
        return self.byte_sleep / 8

    def max_brightness(self) -> int:
        """Read the LED's maximum brightness (LED_FULL_BRIGHTNESS if not reported)."""
        try:
            return int((self.led_path / "max_brightness").read_text().strip())
        except (OSError, ValueError):
            return LED_FULL_BRIGHTNESS

    def _init_led(self, on: str) -> None:
        multi_intensity = self.led_path / "multi_intensity"
        if multi_intensity.exists():
            multi_intensity.write_text(f"{on} {on} {on}\n")
        self._set("0")
        time.sleep(LED_SETTLE_SLEEP)

    def write(
        self,
        packets: Iterable[bytes],
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        """
        Blink every packet.

        Raises:
            ConnectionError: If the LED node does not exist.
            TransferError: If writing the brightness fails.
        """
        if not self.brightness_path.exists():
            raise ConnectionError(f"LED not found: {self.brightness_path}")

        packets = list(packets)
        on = str(self.max_brightness())
        try:
            self._init_led(on)
        except OSError as e:
            raise ConnectionError(f"Cannot drive LED {self.led_path}: {e}") from e

        for index, packet in enumerate(packets):
            logger.log(logging.INFO if self.verbose else logging.DEBUG, "%s", hex_dump(packet))
            try:
                for byte in packet:
                    for bit in range(7, -1, -1):
                        self._set(on if byte >> bit & 1 else "0")
                        time.sleep(self.bit_sleep)
                    self._set("0")
                    time.sleep(self.byte_sleep)
            except OSError as e:
                raise TransferError(f"LED write to {self.brightness_path} failed: {e}", index) from e
            time.sleep(self.packet_sleep)
            if progress:
                progress(index + 1, len(packets))

        logger.info("Blinked %d packets on %s", len(packets), self.led_path)

    def _set(self, value: str) -> None:
        self.brightness_path.write_text(value)
