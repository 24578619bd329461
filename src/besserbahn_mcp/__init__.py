"""Split-ticket route search for Deutsche Bahn journeys."""

__version__ = "0.1.0"
