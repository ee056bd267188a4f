"""
Transmission Session
====================

A Session is the ordered list of commands sent in one transfer. It does
not reorder or validate them: the watch expects Sync and Start first and
End last, and it is up to the caller to add them in that order.

Example
-------
    >>> session = Session()
    >>> session.add(Sync())
    >>> session.add(Start())
    >>> session.add(Alarm(number=1, audible=True, hour=7, minute=30, message="wake"))
    >>> session.add(End())
    >>> packets = session.packets()
"""

import logging
from typing import Iterable, Iterator, Optional

from datalink_sdk.protocol.base import PacketGenerator

logger = logging.getLogger(__name__)


class Session:
    """
    Ordered, append-only collection of commands.

    Args:
        commands: Initial commands, in transmission order.
    """

    def __init__(self, commands: Optional[Iterable[PacketGenerator]] = None) -> None:
        self._commands: list[PacketGenerator] = []
        self.extend(commands or [])

    @property
    def commands(self) -> tuple[PacketGenerator, ...]:
        return tuple(self._commands)

    def add(self, command: PacketGenerator) -> None:
        """Append a command to the end of the session."""
        if not isinstance(command, PacketGenerator):
            raise TypeError(
                f"expected a PacketGenerator, got {type(command).__name__}"
            )
        self._commands.append(command)

    def extend(self, commands: Iterable[PacketGenerator]) -> None:
        """Append several commands in order."""
        for command in commands:
            self.add(command)

    def packets(self) -> list[bytes]:
        """
        Build every command's packets.

        Returns:
            All packets, flattened, in command order.
        """
        packets: list[bytes] = []
        for command in self._commands:
            packets.extend(command.packets())

        logger.debug(
            "Session: %d commands, %d packets, %d bytes",
            len(self._commands), len(packets), sum(len(p) for p in packets),
        )
        return packets

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[PacketGenerator]:
        return iter(self._commands)

    def __repr__(self) -> str:
        names = ", ".join(type(c).__name__ for c in self._commands)
        return f"Session([{names}])"
