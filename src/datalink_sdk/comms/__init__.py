"""
Datalink Transmission
=====================

Writes packet streams to the watch.

Modules
-------
- **serial**: Serial port discovery and configuration (pyserial)
- **adapter**: Paced byte-by-byte writers for serial transmitters and
  sysfs LEDs

Example
-------
    >>> from datalink_sdk.comms import NotebookAdapter
    >>> NotebookAdapter("/dev/ttyACM0").write(session.packets())
"""

from datalink_sdk.comms.adapter import (
    DEFAULT_LED_PATH,
    LedAdapter,
    NotebookAdapter,
    hex_dump,
)
from datalink_sdk.comms.serial import (
    DEFAULT_BAUD_RATE,
    PortInfo,
    close_serial_port,
    find_serial_port,
    format_port_list,
    list_serial_ports,
    open_serial_port,
)

__all__ = [
    # Adapters
    "DEFAULT_LED_PATH",
    "LedAdapter",
    "NotebookAdapter",
    "hex_dump",
    # Serial
    "DEFAULT_BAUD_RATE",
    "PortInfo",
    "close_serial_port",
    "find_serial_port",
    "format_port_list",
    "list_serial_ports",
    "open_serial_port",
]
