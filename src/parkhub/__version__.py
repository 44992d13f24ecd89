"""Version information for parkhub."""

__version__ = "0.1.0"
