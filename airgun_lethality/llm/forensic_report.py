"""
Forensic report generation.

Wraps the LLM call that turns a verdict into a written appraisal
conclusion. Failures (missing credential, network error, provider
error, malformed response) never escape: the caller gets a fixed
placeholder text and the already computed statistics stay valid.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

import httpx

from ..ballistics import ProjectileParams, ShotRecord
from ..determination import Verdict
from ..errors import ReportGenerationError
from .client import ReportClient
from .config import ReportConfig
from .prompts import FORENSIC_SYSTEM_PROMPT, build_forensic_prompt


REPORT_FAILURE_MESSAGE = "Error generating forensic report. Please check API configuration."
EMPTY_REPORT_MESSAGE = "Unable to generate report."


@dataclass(frozen=True)
class ReportOutcome:
    """Text of a report attempt and whether the service produced it."""
    text: str
    succeeded: bool
    error: Optional[str] = None


def generate_forensic_report(
    verdict: Verdict,
    params: Optional[ProjectileParams],
    records: Sequence[ShotRecord],
    config: Optional[ReportConfig] = None,
    client: Optional[ReportClient] = None,
) -> ReportOutcome:
    """
    Ask the LLM for an appraisal conclusion.

    Args:
        verdict: Determination for the batch
        params: Projectile parameters set by the operator
        records: Shot records the verdict was computed from
        config: Report settings; ignored when client is given
        client: Pre-built client (tests inject a fake here)

    Returns:
        ReportOutcome; on any failure text is REPORT_FAILURE_MESSAGE
    """
    messages = [
        {"role": "system", "content": FORENSIC_SYSTEM_PROMPT.strip()},
        {"role": "user", "content": build_forensic_prompt(verdict, params, records)},
    ]

    owned_client = None
    try:
        if client is None:
            client = owned_client = ReportClient(config or ReportConfig())
        response = client.complete(messages)
    except httpx.HTTPStatusError as e:
        print(f"[LLM ERROR] HTTP {e.response.status_code}: {e.response.text}")
        return ReportOutcome(REPORT_FAILURE_MESSAGE, False, f"HTTP {e.response.status_code}")
    except (httpx.HTTPError, ReportGenerationError, ValueError) as e:
        print(f"[LLM ERROR] {e}")
        return ReportOutcome(REPORT_FAILURE_MESSAGE, False, str(e))
    finally:
        if owned_client is not None:
            owned_client.close()

    text = response.content.strip()
    if not text:
        return ReportOutcome(EMPTY_REPORT_MESSAGE, True)
    return ReportOutcome(text, True)


def summarize_findings(
    verdict: Verdict,
    params: Optional[ProjectileParams],
    records: Sequence[ShotRecord],
    config: Optional[ReportConfig] = None,
    client: Optional[ReportClient] = None,
) -> str:
    """Report text only; see generate_forensic_report()."""
    return generate_forensic_report(verdict, params, records, config, client).text
