"""AI study assistant web form."""

__version__ = "0.1.0"
