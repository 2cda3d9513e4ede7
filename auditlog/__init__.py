"""School back-office audit log: recorder, query/report service, retention purge."""

__version__ = "0.1.0"
