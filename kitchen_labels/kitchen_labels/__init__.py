"""Kitchen label printing: shelf-life expiry, printable labels and a short print history."""

__version__ = "0.3.0"
