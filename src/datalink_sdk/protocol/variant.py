"""
Protocol Variants
=================

The Datalink 150 (protocol 3) and its successor (protocol 4) use the same
packet layouts. They differ only in the version byte announced by the Start
packet and in how long a sync preamble the receiver needs.
"""

from enum import Enum
from typing import Final


class ProtocolVariant(Enum):
    """Datalink protocol generation."""

    LEGACY = 3
    CURRENT = 4

    @property
    def version(self) -> int:
        """Version byte carried in the Start packet."""
        return self.value

    @property
    def default_sync_length(self) -> int:
        """Number of sync-1 bytes sent when no length is given."""
        return _SYNC_LENGTHS[self]

    @classmethod
    def from_name(cls, name: str) -> "ProtocolVariant":
        """
        Look up a variant by name or protocol number.

        Accepts "legacy", "current", "3" or "4" (case-insensitive).

        Raises:
            ValueError: If the name is not recognised.
        """
        key = name.strip().lower()
        for variant in cls:
            if key in (variant.name.lower(), str(variant.value)):
                return variant
        raise ValueError(
            f"Unknown protocol variant: {name!r} (use legacy, current, 3 or 4)"
        )


_SYNC_LENGTHS: Final[dict[ProtocolVariant, int]] = {
    ProtocolVariant.LEGACY: 150,
    ProtocolVariant.CURRENT: 300,
}

DEFAULT_VARIANT: Final[ProtocolVariant] = ProtocolVariant.CURRENT
