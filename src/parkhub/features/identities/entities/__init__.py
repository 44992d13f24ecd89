"""Identity entities."""

from .identity import Identity, Role

__all__ = ["Identity", "Role"]
