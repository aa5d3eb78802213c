"""taxadvisor — Indian income-tax calculator service."""

__version__ = "0.1.0"
