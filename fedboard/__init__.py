"""Data selection, status errors, configuration and resource views for a federation dashboard backend."""

__version__ = "0.1.0"