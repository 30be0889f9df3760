"""
Table Scanner - Extract tables from scanned document images.

This package provides functionality for:
- Image upload and camera capture with media-type validation
- Gemini-powered table extraction with structured output
- Excel export of the extracted table
"""

__version__ = "0.1.0"
__author__ = "Table Scanner"
