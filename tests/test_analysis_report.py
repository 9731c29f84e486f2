#!/usr/bin/env python3
"""
Tests for analysis runs and report formatting.

Statistics must survive a failed report call, and an empty batch must
never be presented as a non-lethal conclusion.
"""

import json
import sys
from pathlib import Path
from unittest.mock import Mock

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from airgun_lethality.analysis import AnalysisStatus, run_analysis
from airgun_lethality.ballistics import ShotInput, SAMPLE_VELOCITIES, shots_from_velocities
from airgun_lethality.llm.client import LLMResponse, ReportClient
from airgun_lethality.llm.config import ReportConfig
from airgun_lethality.llm.forensic_report import REPORT_FAILURE_MESSAGE
from airgun_lethality.report import WITHHELD_MESSAGE, AnalysisReport


@pytest.fixture
def ok_client():
    client = Mock()
    client.complete.return_value = LLMResponse(
        content="## Conclusion\nThe air gun is non-lethal.", model="m", usage={}
    )
    return client


class TestRunAnalysis:
    """Analysis runs with and without the report generator."""

    def test_without_report(self):
        result = run_analysis(shots_from_velocities(SAMPLE_VELOCITIES), generate_report=False)

        assert result.status is AnalysisStatus.COMPLETE
        assert result.report_text == ""
        assert len(result.records) == 10
        assert result.verdict.is_lethal is False

    def test_with_report(self, ok_client):
        result = run_analysis(shots_from_velocities(SAMPLE_VELOCITIES), client=ok_client)

        assert result.status is AnalysisStatus.COMPLETE
        assert result.report_text.startswith("## Conclusion")
        ok_client.complete.assert_called_once()

    def test_report_failure_keeps_statistics(self):
        client = Mock()
        client.complete.side_effect = httpx.ReadTimeout("timed out")
        shots = shots_from_velocities([125.0, 400.0])

        failed = run_analysis(shots, client=client)
        baseline = run_analysis(shots, generate_report=False)

        assert failed.status is AnalysisStatus.ERROR
        assert failed.report_text == REPORT_FAILURE_MESSAGE
        assert failed.report_error is not None
        assert failed.verdict == baseline.verdict
        assert failed.verdict.is_lethal is True

    def test_missing_credentials_degrade(self):
        result = run_analysis(
            shots_from_velocities([125.0, 126.0]),
            report_config=ReportConfig(api_key=None),
        )
        assert result.status is AnalysisStatus.ERROR
        assert result.verdict.stats.count == 2

    def test_malformed_provider_response_keeps_statistics(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"choices": [{"message": None}]})
        )
        client = ReportClient(ReportConfig(api_key="k"), http_client=httpx.Client(transport=transport))
        shots = shots_from_velocities([125.0, 400.0])

        result = run_analysis(shots, client=client)

        assert result.status is AnalysisStatus.ERROR
        assert result.report_text == REPORT_FAILURE_MESSAGE
        assert result.verdict == run_analysis(shots, generate_report=False).verdict
        assert result.verdict.is_lethal is True

    def test_empty_batch_skips_report(self, ok_client):
        result = run_analysis([], client=ok_client)

        assert result.verdict.has_verdict is False
        assert result.report_text == ""
        ok_client.complete.assert_not_called()


class TestAnalysisReport:
    """Text, markdown and JSON rendering."""

    def test_text_report(self, ok_client):
        result = run_analysis(
            [ShotInput(125.0, 6.0, 0.2), ShotInput(400.0, 6.0, 0.2)], client=ok_client
        )
        text = AnalysisReport(result).to_text()

        assert "KINETIC ENERGY ANALYSIS" in text
        assert "VERDICT: POTENTIALLY LETHAL" in text
        assert "APPRAISAL CONCLUSION:" in text
        assert "56.59 *" in text

    def test_disagreement_is_noted(self):
        shots = shots_from_velocities([125.0] * 9 + [250.0])
        text = AnalysisReport(run_analysis(shots, generate_report=False)).to_text()

        assert "VERDICT: POTENTIALLY LETHAL" in text
        assert "disagree" in text

    def test_empty_report_withholds_verdict(self):
        report = AnalysisReport(run_analysis([], generate_report=False))

        assert report.verdict_label == "WITHHELD"
        assert WITHHELD_MESSAGE in report.to_text()
        assert WITHHELD_MESSAGE in report.to_markdown()
        assert "NON-LETHAL" not in report.to_text()

    def test_json_report(self):
        result = run_analysis(shots_from_velocities(SAMPLE_VELOCITIES), generate_report=False)
        data = json.loads(AnalysisReport(result).to_json())

        assert data["is_lethal"] is False
        assert data["has_verdict"] is True
        assert data["stats"]["count"] == 10
        assert len(data["shots"]) == 10
        assert data["test"]["interpretation"] == "Statistically Significant: Safe/Non-Lethal"
        assert data["status"] == "COMPLETE"

    def test_markdown_report(self):
        result = run_analysis(shots_from_velocities([125.0, 126.0]), generate_report=False)
        markdown = AnalysisReport(result).to_markdown()

        assert markdown.startswith("# Kinetic Energy Analysis")
        assert "| 1 | 125.0 | 6 | 0.2 |" in markdown
        assert "**Strict rule:** NON-LETHAL" in markdown

    def test_threshold_velocity_for_uniform_batch(self):
        result = run_analysis(shots_from_velocities([125.0, 126.0]), generate_report=False)
        report = AnalysisReport(result)

        assert report.threshold_velocity == pytest.approx(237.8, abs=0.1)
        assert "Threshold velocity:" in report.to_text()

    def test_no_threshold_velocity_for_mixed_batch(self):
        result = run_analysis(
            [ShotInput(125.0, 6.0, 0.2), ShotInput(125.0, 6.0, 0.25)], generate_report=False
        )
        assert AnalysisReport(result).threshold_velocity is None
