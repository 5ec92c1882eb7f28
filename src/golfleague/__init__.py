"""Golf league roster, tee-time schedule and week-swap service."""

__version__ = "0.1.0"
