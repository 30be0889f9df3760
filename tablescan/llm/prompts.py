"""
Prompt and response schema for table extraction.

The schema is sent as the structured-output contract so the model answers
with a JSON array of rows, each row an array of strings.
"""

TABLE_EXTRACTION_PROMPT = '''You are an expert at reading scanned documents and extracting tables.

Analyze this image and extract all tabular data into a two-dimensional array of strings.

IMPORTANT RULES:
1. The first row must be the table header. If the document has no explicit header, write short descriptive column names
2. Every following row is one row of the document, in reading order from top to bottom
3. Keep cell text exactly as printed, including units, currency symbols and decimal separators
4. Use an empty string for a cell that is blank in the document
5. Do not invent rows or columns that are not in the image
6. If the image contains no table, return an empty array

Return ONLY the JSON array, no additional text or markdown formatting.
'''


# Gemini OpenAPI-subset schema: ARRAY of ARRAY of STRING
TABLE_RESPONSE_SCHEMA = {
    "type": "ARRAY",
    "description": "Table rows; the first row is the header.",
    "items": {
        "type": "ARRAY",
        "description": "Cells of one row, left to right.",
        "items": {"type": "STRING"},
    },
}


def get_table_prompt() -> str:
    """
    Get the table extraction prompt.

    Returns:
        Prompt string
    """
    return TABLE_EXTRACTION_PROMPT
