"""eventboard: a small community events board API."""

__version__ = "0.1.0"
