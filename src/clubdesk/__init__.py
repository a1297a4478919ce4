"""clubdesk - activity status and participant tracking for student clubs."""

__version__ = "0.1.0"
