"""Fetch MFA-protected AWS session credentials into a local .env file."""

__version__ = "0.1.0"
