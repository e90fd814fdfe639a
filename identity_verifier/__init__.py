"""Identity document verification client and gateway."""

__version__ = "1.0.0"
