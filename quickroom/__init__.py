"""quickroom: join a LiveKit room and keep a participants view in sync."""

__version__ = "0.1.0"
