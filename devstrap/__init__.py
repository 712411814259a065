"""devstrap — bootstrap a developer workstation."""

__version__ = "0.1.0"
