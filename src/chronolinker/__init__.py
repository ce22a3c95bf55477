"""chronolinker — chronological links and belonging notes for date-named vaults."""

__version__ = "0.1.0"
