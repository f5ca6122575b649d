"""PharmaDesk - pharmacy inventory, sales and purchasing service."""

__version__ = "1.0.0"
