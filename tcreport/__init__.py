"""tcreport - TeamCity service-message reporter for test event streams."""

__version__ = "0.1.0"
