"""
Configuration module for Table Scanner.

Handles settings for the Gemini extraction endpoint, credential storage,
accepted image types and export naming, with validation helpers.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


DEFAULT_CREDENTIALS_FILE = Path.home() / ".tablescan" / "credentials.env"


@dataclass
class GeminiConfig:
    """Configuration for the Gemini structured-extraction endpoint."""
    base_url: str = field(
        default_factory=lambda: os.getenv(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        )
    )
    model: str = field(default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-2.5-flash"))
    temperature: float = 0.1  # Low temperature for deterministic extraction
    timeout: int = 120  # Seconds

    @staticmethod
    def validate_connection(
        api_key: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
    ) -> tuple[bool, str]:
        """Validate the Gemini API is reachable with the given key."""
        import requests
        try:
            response = requests.get(
                f"{base_url.rstrip('/')}/models",
                headers={"x-goog-api-key": api_key},
                timeout=10,
            )
            if response.status_code == 200:
                models = response.json().get("models", [])
                names = [m.get("name", "unknown").split("/")[-1] for m in models]
                return True, f"Gemini reachable. Models: {', '.join(names[:5])}"
            return False, f"Gemini returned status {response.status_code}: {response.text[:200]}"
        except requests.exceptions.ConnectionError:
            return False, "Cannot connect to the Gemini API. Check your network connection."
        except Exception as e:
            return False, f"Error connecting to Gemini: {str(e)}"


@dataclass
class StorageConfig:
    """Where the API key is persisted between sessions."""
    credentials_file: Path = field(
        default_factory=lambda: Path(
            os.getenv("TABLESCAN_CREDENTIALS_FILE", str(DEFAULT_CREDENTIALS_FILE))
        ).expanduser()
    )
    credential_key: str = "GEMINI_API_KEY"


@dataclass
class AppConfig:
    """Main application configuration."""
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    # Input settings
    accepted_mime_types: tuple[str, ...] = ("image/jpeg", "image/png", "image/jpg")
    max_file_size_mb: int = 20  # Inline data ceiling of the Gemini API

    # Export settings
    export_filename: str = "zzmotors_extracted_data.xlsx"

    log_level: str = field(default_factory=lambda: os.getenv("TABLESCAN_LOG_LEVEL", "INFO"))

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config


def update_config(**kwargs) -> AppConfig:
    """Update configuration with new values."""
    config = get_config()
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
    return config
