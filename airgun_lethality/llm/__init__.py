"""
LLM integration for the air gun lethality analyzer.

Turns a verdict into a written appraisal conclusion via OpenRouter.
"""

from .client import ReportClient, LLMResponse
from .config import ReportConfig
from .prompts import build_forensic_prompt, describe_ammunition, is_mixed_ammunition
from .forensic_report import (
    EMPTY_REPORT_MESSAGE,
    REPORT_FAILURE_MESSAGE,
    ReportOutcome,
    generate_forensic_report,
    summarize_findings,
)

__all__ = [
    # Client
    "ReportClient",
    "LLMResponse",
    "ReportConfig",
    # Prompts
    "build_forensic_prompt",
    "describe_ammunition",
    "is_mixed_ammunition",
    # Report
    "EMPTY_REPORT_MESSAGE",
    "REPORT_FAILURE_MESSAGE",
    "ReportOutcome",
    "generate_forensic_report",
    "summarize_findings",
]
