"""
Datalink Transmission Configuration
===================================

Settings for one transmission run. Configuration can come from:
- Default values (defined here)
- Environment variables
- Command-line options (applied on top by the CLI)

Timing values are in seconds. The watch samples the link with no flow
control, so every byte is followed by a fixed pause and every packet by a
longer one:
- 0.025 s per byte
- 0.25 s per packet
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from datalink_sdk.protocol.variant import ProtocolVariant

logger = logging.getLogger(__name__)

DEFAULT_SERIAL_DEVICE = "/dev/ttyACM0"
DEFAULT_BYTE_SLEEP = 0.025
DEFAULT_PACKET_SLEEP = 0.25


@dataclass
class TransmitConfig:
    """
    Configuration for a transmission.

    Attributes:
        serial_device: Serial port the transmitter is attached to
        byte_sleep: Pause after every byte, in seconds
        packet_sleep: Pause after every packet, in seconds
        variant: Protocol generation of the target watch
        sync_length: Sync-1 run length; None uses the variant default
        verbose: Echo every packet as hex while sending
    """

    serial_device: str = DEFAULT_SERIAL_DEVICE
    byte_sleep: float = DEFAULT_BYTE_SLEEP
    packet_sleep: float = DEFAULT_PACKET_SLEEP
    variant: ProtocolVariant = ProtocolVariant.LEGACY
    sync_length: Optional[int] = None
    verbose: bool = False

    @property
    def effective_sync_length(self) -> int:
        if self.sync_length is None:
            return self.variant.default_sync_length
        return self.sync_length

    # ═══════════════════════════════════════════════════════════════════════════
    # FACTORY METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    @classmethod
    def from_env(cls) -> "TransmitConfig":
        """
        Create TransmitConfig from environment variables.

        Environment variables (all optional):
            DATALINK_SERIAL_DEVICE: Serial port path
            DATALINK_BYTE_SLEEP: Seconds after each byte (float)
            DATALINK_PACKET_SLEEP: Seconds after each packet (float)
            DATALINK_PROTOCOL: "legacy", "current", "3" or "4"
            DATALINK_SYNC_LENGTH: Sync-1 run length (integer)

        Invalid values are logged and ignored.

        Returns:
            TransmitConfig with values from environment variables
        """
        config = cls()

        if device := os.environ.get("DATALINK_SERIAL_DEVICE"):
            config.serial_device = device

        if byte_sleep := os.environ.get("DATALINK_BYTE_SLEEP"):
            try:
                config.byte_sleep = float(byte_sleep)
            except ValueError:
                logger.warning("Ignoring invalid DATALINK_BYTE_SLEEP: %r", byte_sleep)

        if packet_sleep := os.environ.get("DATALINK_PACKET_SLEEP"):
            try:
                config.packet_sleep = float(packet_sleep)
            except ValueError:
                logger.warning("Ignoring invalid DATALINK_PACKET_SLEEP: %r", packet_sleep)

        if protocol := os.environ.get("DATALINK_PROTOCOL"):
            try:
                config.variant = ProtocolVariant.from_name(protocol)
            except ValueError:
                logger.warning("Ignoring invalid DATALINK_PROTOCOL: %r", protocol)

        if sync_length := os.environ.get("DATALINK_SYNC_LENGTH"):
            try:
                config.sync_length = int(sync_length)
            except ValueError:
                logger.warning("Ignoring invalid DATALINK_SYNC_LENGTH: %r", sync_length)

        return config
