"""
Configuration for the forensic report generator.

Credentials and model choice are passed explicitly to the report
generator; the environment is read only by ReportConfig.from_env().
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


DEFAULT_REPORT_MODEL = "google/gemini-2.5-flash"

API_KEY_ENV = "OPENROUTER_API_KEY"
MODEL_ENV = "LETHALITY_REPORT_MODEL"


@dataclass(frozen=True)
class ReportConfig:
    """Settings for one report-generation call."""
    api_key: Optional[str] = None
    model: str = DEFAULT_REPORT_MODEL
    temperature: float = 0.3
    max_tokens: int = 1024
    timeout_seconds: float = 60.0

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "ReportConfig":
        """
        Build a config from environment variables (and a .env file if present).

        Args:
            dotenv_path: Explicit .env file; defaults to python-dotenv's search

        Returns:
            ReportConfig with api_key from OPENROUTER_API_KEY and model from
            LETHALITY_REPORT_MODEL when set
        """
        load_dotenv(dotenv_path)
        return cls(
            api_key=os.getenv(API_KEY_ENV),
            model=os.getenv(MODEL_ENV) or DEFAULT_REPORT_MODEL,
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)
