"""
Parser for model responses to the table extraction prompt.

Handles:
- Bare JSON arrays (structured output)
- Arrays wrapped in markdown code blocks
- Non-string cells (numbers, booleans, null)
"""

import json
import logging
import re
from typing import Any, Optional

from tablescan.errors import ResponseFormatError
from tablescan.models.table import Table

logger = logging.getLogger(__name__)


class TableParser:
    """Turns the model's text answer into a Table."""

    CODE_BLOCK_PATTERN = r"```(?:json)?\s*(\[[\s\S]*?\])\s*```"

    def parse_response(self, response: str) -> Table:
        """
        Parse a model response into a table.

        Args:
            response: Raw text of the first candidate

        Returns:
            Table (possibly empty)

        Raises:
            ResponseFormatError: If the text is not a JSON array of arrays
        """
        if response is None or not response.strip():
            return Table()

        json_str = self._extract_json(response)
        if json_str is None:
            logger.warning(f"No JSON array in model response: {response[:200]!r}")
            raise ResponseFormatError(
                "The model response could not be read as a table.",
                details={"response": response[:500]},
            )

        data = json.loads(json_str)
        return self._to_table(data)

    def _extract_json(self, response: str) -> Optional[str]:
        """Extract a JSON array from the response string."""
        text = response.strip()
        try:
            json.loads(text)
            return text
        except json.JSONDecodeError:
            pass

        match = re.search(self.CODE_BLOCK_PATTERN, text)
        if match and self._is_json(match.group(1)):
            return match.group(1)

        # Outermost brackets
        start, end = text.find("["), text.rfind("]")
        if start != -1 and end > start and self._is_json(text[start:end + 1]):
            return text[start:end + 1]

        return None

    @staticmethod
    def _is_json(candidate: str) -> bool:
        try:
            json.loads(candidate)
            return True
        except json.JSONDecodeError:
            return False

    def _to_table(self, data: Any) -> Table:
        if not isinstance(data, list):
            raise ResponseFormatError(
                "The model response is not a list of rows.",
                details={"type": type(data).__name__},
            )

        for index, row in enumerate(data):
            if not isinstance(row, list):
                raise ResponseFormatError(
                    f"Row {index + 1} of the model response is not a list of cells.",
                    details={"row": row},
                )
            for cell in row:
                if isinstance(cell, (list, dict)):
                    raise ResponseFormatError(
                        f"Row {index + 1} of the model response contains a nested value.",
                        details={"row": row},
                    )

        return Table.from_rows(data)


def parse_table_response(response: str) -> Table:
    """
    Convenience function to parse a model response.

    Args:
        response: Raw model text

    Returns:
        Parsed Table
    """
    return TableParser().parse_response(response)
