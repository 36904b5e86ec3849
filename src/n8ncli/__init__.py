"""Command-line client for the n8n REST API."""

__version__ = "1.0.0"
