"""Command-oriented client for the GitHub REST v3 API."""

__version__ = "0.1.0"
