"""
One analysis run over a complete batch of shots.

Statistics and the verdict are computed synchronously first; the
report generator runs afterwards and its failure only changes the
report text and the status, never the numbers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple

from .ballistics import DEFAULT_PROJECTILE, LETHALITY_THRESHOLD, ProjectileParams, ShotInput, ShotRecord
from .determination import Verdict, analyze_shots
from .llm.client import ReportClient
from .llm.config import ReportConfig
from .llm.forensic_report import generate_forensic_report


class AnalysisStatus(Enum):
    """Lifecycle of an analysis run."""
    IDLE = "IDLE"
    ANALYZING = "ANALYZING"
    COMPLETE = "COMPLETE"
    ERROR = "ERROR"


@dataclass(frozen=True)
class AnalysisResult:
    """
    Everything one run produced.

    Attributes:
        records: Derived shot records in entry order
        verdict: Lethality determination
        report_text: LLM appraisal text, a failure placeholder, or empty
            when no report was requested
        status: COMPLETE, or ERROR when report generation failed
        report_error: Failure detail from the report generator
    """
    records: Tuple[ShotRecord, ...]
    verdict: Verdict
    report_text: str = ""
    status: AnalysisStatus = AnalysisStatus.COMPLETE
    report_error: Optional[str] = None


def run_analysis(
    inputs: Iterable[ShotInput],
    params: ProjectileParams = DEFAULT_PROJECTILE,
    report_config: Optional[ReportConfig] = None,
    client: Optional[ReportClient] = None,
    generate_report: bool = True,
    threshold: float = LETHALITY_THRESHOLD,
) -> AnalysisResult:
    """
    Analyze a batch of shots and optionally request the written report.

    Args:
        inputs: Shot inputs in entry order
        params: Projectile parameters set by the operator
        report_config: Settings for the report generator
        client: Pre-built report client
        generate_report: Skip the LLM call when False
        threshold: Lethality threshold (J/cm^2)

    Returns:
        AnalysisResult

    Raises:
        InvalidInputError: If a shot has a non-positive or non-finite field
    """
    records, verdict = analyze_shots(inputs, threshold)

    if not generate_report or not verdict.has_verdict:
        return AnalysisResult(records=records, verdict=verdict)

    outcome = generate_forensic_report(verdict, params, records, report_config, client)
    return AnalysisResult(
        records=records,
        verdict=verdict,
        report_text=outcome.text,
        status=AnalysisStatus.COMPLETE if outcome.succeeded else AnalysisStatus.ERROR,
        report_error=outcome.error,
    )
