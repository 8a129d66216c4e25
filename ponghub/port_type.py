"""Kinds of endpoints a service exposes."""

from __future__ import annotations

from enum import Enum


class PortType(str, Enum):
    """Whether an endpoint is a health check or an API endpoint."""

    HEALTH = "health"
    API = "api"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value

    def is_valid(self) -> bool:
        """Return True for the known endpoint kinds."""
        return self in (PortType.HEALTH, PortType.API)


def parse_port_type(s: str) -> PortType:
    """Parse a string into a PortType, falling back to UNKNOWN."""
    try:
        return PortType(s)
    except ValueError:
        return PortType.UNKNOWN