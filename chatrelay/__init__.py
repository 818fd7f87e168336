"""Real-time chat relay: named rooms, live rosters, in-memory registry."""

__version__ = "1.0.0"
