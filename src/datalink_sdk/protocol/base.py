"""
Packet Generator Interface
==========================

Every command the watch understands is a small value object that knows how
to turn itself into one or more wire packets. The Session only relies on
this one method.
"""

from abc import ABC, abstractmethod


class PacketGenerator(ABC):
    """
    Abstract base for anything that produces wire packets.

    Implementations are immutable: calling ``packets()`` repeatedly returns
    equal results and never changes the object.
    """

    @abstractmethod
    def packets(self) -> list[bytes]:
        """
        Build the packets for this command.

        Returns:
            Complete packets in transmission order.
        """
        raise NotImplementedError

    def __iter__(self):
        return iter(self.packets())
