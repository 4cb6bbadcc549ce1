"""Remote-control client for a cleaning robot's REST API."""

__version__ = "0.1.0"
