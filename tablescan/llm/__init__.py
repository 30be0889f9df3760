"""LLM module for extracting tables from document images with Gemini."""

from .client import GeminiTableClient
from .parser import TableParser

__all__ = ["GeminiTableClient", "TableParser"]
