"""
Configuration utilities.
"""
import os
from typing import Any, Dict, Optional
from dotenv import load_dotenv

ENV_PREFIX = "REJECTWISE_"

DEFAULTS = {
    "API_URL": "https://api.anthropic.com/v1/messages",
    "MODEL": "claude-sonnet-4-20250514",
    "MAX_TOKENS": "1000",
    "TIMEOUT": "60",
    "STORAGE_DIR": "data/active",
    "LOG_FILE": None,
}

class Config:
    """Configuration manager reading REJECTWISE_* environment variables."""

    def __init__(self, env_file: Optional[str] = None):
        """Initialize configuration.

        Args:
            env_file: Optional .env file to load. Variables already set in
                the environment win over the file.
        """
        load_dotenv(env_file)

    def get_credentials(self, provider: str = "anthropic") -> Dict[str, Optional[str]]:
        """Get API credentials for a provider, e.g. ANTHROPIC_API_KEY."""
        return {"api_key": os.getenv(f"{provider.upper()}_API_KEY")}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value.

        Looks up ``REJECTWISE_<KEY>``, then the built-in default, then ``default``.
        """
        value = os.getenv(ENV_PREFIX + key.upper())
        if value is None or value == "":
            value = DEFAULTS.get(key.upper())
        return default if value is None else value

    def get_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        value = self.get(key, default)
        try:
            return int(value) if value is not None else None
        except ValueError:
            raise ValueError(f"{ENV_PREFIX}{key.upper()} must be an integer, got {value!r}")

    def get_float(self, key: str, default: Optional[float] = None) -> Optional[float]:
        value = self.get(key, default)
        try:
            return float(value) if value is not None else None
        except ValueError:
            raise ValueError(f"{ENV_PREFIX}{key.upper()} must be a number, got {value!r}")
