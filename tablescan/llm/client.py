"""
Gemini client for image-to-table extraction.

Sends one generateContent request with the encoded image and a structured
output schema (array of arrays of strings) and returns the parsed Table.
Failures are classified into the ExtractionError family. There is no retry:
every call to extract() makes exactly one HTTP request.
"""

import logging
from typing import Optional

import requests

from tablescan.config import GeminiConfig, get_config
from tablescan.errors import (
    AuthError,
    EmptyResultError,
    ExtractionError,
    TransportError,
    UnknownExtractionError,
)
from tablescan.image.encoding import EncodedPayload
from tablescan.llm.parser import TableParser
from tablescan.llm.prompts import TABLE_RESPONSE_SCHEMA, get_table_prompt
from tablescan.models.table import Table

logger = logging.getLogger(__name__)

# Text the Gemini API puts in its error message for a rejected key
INVALID_KEY_SIGNAL = "api key not valid"
INVALID_KEY_REASON = "API_KEY_INVALID"


def classify_error(
    message: Optional[str],
    reasons: tuple[str, ...] = (),
    details: Optional[dict] = None,
) -> ExtractionError:
    """
    Map a remote error to the matching ExtractionError subclass.

    Args:
        message: Error text from the remote service, if any
        reasons: Structured reason codes from the error details
        details: Extra context stored on the exception

    Returns:
        AuthError, TransportError or UnknownExtractionError
    """
    if message and INVALID_KEY_SIGNAL in message.lower():
        return AuthError(message, details)
    if INVALID_KEY_REASON in reasons:
        return AuthError(message or "API key not valid.", details)
    if message:
        return TransportError(message, details)
    return UnknownExtractionError("", details)


class GeminiTableClient:
    """Client for the Gemini generateContent endpoint."""

    def __init__(self, config: Optional[GeminiConfig] = None, parser: Optional[TableParser] = None):
        """Initialize the Gemini client."""
        self.config = config or get_config().gemini
        self.base_url = self.config.base_url.rstrip("/")
        self.parser = parser or TableParser()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.config.model}:generateContent"

    def _get_headers(self, api_key: str) -> dict:
        """Get request headers with authentication."""
        return {
            "x-goog-api-key": api_key,
            "Content-Type": "application/json",
        }

    def build_request(self, payload: EncodedPayload) -> dict:
        """Build the generateContent request body."""
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": get_table_prompt()},
                        {
                            "inline_data": {
                                "mime_type": payload.mime_type,
                                "data": payload.data,
                            }
                        },
                    ],
                }
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": TABLE_RESPONSE_SCHEMA,
                "temperature": self.config.temperature,
            },
        }

    def extract(self, payload: EncodedPayload, api_key: str) -> Table:
        """
        Extract a table from an encoded image.

        Args:
            payload: Base64 image and media type
            api_key: Gemini API key

        Returns:
            Non-empty Table

        Raises:
            AuthError: If the key is rejected
            EmptyResultError: If the model found no rows
            TransportError: On network failures or remote errors with a message
            UnknownExtractionError: On failures without a message
        """
        logger.info(
            f"Sending image to Gemini model {self.config.model} "
            f"({payload.mime_type}, {len(payload.data):,} base64 chars)"
        )

        try:
            response = requests.post(
                self.endpoint,
                headers=self._get_headers(api_key),
                json=self.build_request(payload),
                timeout=self.config.timeout,
            )
        except requests.exceptions.ConnectionError as e:
            raise TransportError(f"Failed to connect to Gemini: {e}")
        except requests.exceptions.Timeout:
            raise TransportError("Gemini request timed out")
        except requests.exceptions.RequestException as e:
            raise classify_error(str(e))

        if response.status_code != 200:
            raise self._error_from_response(response)

        try:
            result = response.json()
        except ValueError:
            raise TransportError(
                "Gemini returned a response that is not JSON",
                details={"body": response.text[:500]},
            )

        text = self._candidate_text(result)
        table = self.parser.parse_response(text)

        if table.is_empty:
            raise EmptyResultError("Gemini returned no rows")

        logger.info(f"Extracted {len(table)} rows x {table.column_count} columns")
        return table

    def _error_from_response(self, response: requests.Response) -> ExtractionError:
        """Classify a non-200 reply from its error body."""
        message = None
        reasons: tuple[str, ...] = ()
        try:
            body = response.json()
        except ValueError:
            body = {}
        error = body.get("error", {}) if isinstance(body, dict) else {}

        if isinstance(error, dict):
            message = error.get("message")
            reasons = tuple(
                d.get("reason", "") for d in (error.get("details") or []) if isinstance(d, dict)
            )
        if not message and response.text:
            message = f"Gemini returned status {response.status_code}: {response.text[:500]}"

        logger.warning(f"Gemini error {response.status_code}: {message}")
        return classify_error(message, reasons, details={"status_code": response.status_code})

    @staticmethod
    def _candidate_text(result: dict) -> str:
        """Join the text parts of the first candidate."""
        candidates = result.get("candidates") or []
        if not candidates:
            block_reason = (result.get("promptFeedback") or {}).get("blockReason")
            if block_reason:
                raise TransportError(f"Gemini blocked the request: {block_reason}")
            return ""

        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))


def create_client(config: Optional[GeminiConfig] = None) -> GeminiTableClient:
    """
    Create a Gemini table client.

    Args:
        config: Gemini configuration

    Returns:
        Configured GeminiTableClient instance
    """
    return GeminiTableClient(config=config)
