"""Durable local storage for the API key."""

from .credentials import CredentialStore

__all__ = ["CredentialStore"]
