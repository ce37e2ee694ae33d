"""Upload the local user roster and question bank to the quiz backend."""

__version__ = "0.1.0"
