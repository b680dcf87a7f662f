"""duenote: personal task reminders with locally scheduled notifications."""

__version__ = "0.1.0"
