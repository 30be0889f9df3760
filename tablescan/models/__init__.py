"""Data models shared by extraction, preview and export."""

from .table import Table

__all__ = ["Table"]
