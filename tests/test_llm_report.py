"""
Tests for the forensic report generator.

Uses mocked LLM responses and httpx.MockTransport to test without API calls.
"""

import json
import sys
from pathlib import Path
from unittest.mock import Mock, patch

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from airgun_lethality.ballistics import DEFAULT_PROJECTILE, ProjectileParams, ShotInput, shots_from_velocities
from airgun_lethality.determination import analyze_shots
from airgun_lethality.errors import ReportGenerationError
from airgun_lethality.llm.client import LLMResponse, ReportClient
from airgun_lethality.llm.config import ReportConfig
from airgun_lethality.llm.forensic_report import (
    EMPTY_REPORT_MESSAGE,
    REPORT_FAILURE_MESSAGE,
    generate_forensic_report,
    summarize_findings,
)
from airgun_lethality.llm.prompts import build_forensic_prompt, describe_ammunition, is_mixed_ammunition


@pytest.fixture
def uniform_batch():
    return analyze_shots(shots_from_velocities([125.4, 126.1, 124.8, 300.0]))


@pytest.fixture
def mixed_batch():
    return analyze_shots([
        ShotInput(125.0, 6.0, 0.25),
        ShotInput(126.0, 6.0, 0.2),
        ShotInput(110.0, 8.0, 0.2),
    ])


def make_transport(status_code=200, body=None, captured=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if captured is not None:
            captured.append(request)
        return httpx.Response(status_code, json=body if body is not None else {})
    return httpx.MockTransport(handler)


def completion_body(content):
    return {
        "model": "google/gemini-2.5-flash",
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": 400, "completion_tokens": 120},
    }



MALFORMED_BODIES = [
    {},
    {"choices": []},
    {"choices": [{"message": "plain string"}]},
    {"choices": [{"message": None}]},
    {"choices": [{"message": {"content": [{"type": "text", "text": "hi"}]}}]},
]
MALFORMED_IDS = ["no_choices", "empty_choices", "string_message", "null_message", "content_parts"]

class TestPrompt:
    """Prompt content and mixed-ammunition detection."""

    def test_uniform_ammunition(self, uniform_batch):
        records, _ = uniform_batch
        assert is_mixed_ammunition(records) is False

        section = describe_ammunition(records, DEFAULT_PROJECTILE)
        assert "Projectile Diameter: 6 mm" in section
        assert "Projectile Weight: 0.2 g" in section
        assert "Mixed" not in section

    def test_mixed_ammunition_lists_distinct_values(self, mixed_batch):
        records, _ = mixed_batch
        assert is_mixed_ammunition(records) is True

        section = describe_ammunition(records, DEFAULT_PROJECTILE)
        assert "Mixed Ammunition Used" in section
        assert "Projectile Weights: 0.2, 0.25 g" in section
        assert "Projectile Diameters: 6, 8 mm" in section

    def test_no_records_uses_params(self):
        section = describe_ammunition([], ProjectileParams(4.5, 0.53))
        assert "4.5 mm" in section
        assert "0.53 g" in section

    def test_prompt_carries_statistics(self, uniform_batch):
        records, verdict = uniform_batch
        prompt = build_forensic_prompt(verdict, DEFAULT_PROJECTILE, records)

        assert "20 J/cm²" in prompt
        assert f"Sample Size: {verdict.stats.count}" in prompt
        assert f"P-Value: {verdict.test.p_value:.4f}" in prompt
        assert verdict.test.interpretation.value in prompt
        assert "Shot 4 (0.2g, 6mm)" in prompt
        assert "Potentially Lethal" in prompt


class TestReportClient:
    """HTTP client against a mock transport."""

    def test_requires_api_key(self):
        with pytest.raises(ReportGenerationError):
            ReportClient(ReportConfig(api_key=None))

    def test_complete(self):
        captured = []
        http = httpx.Client(transport=make_transport(body=completion_body("## Conclusion"), captured=captured))
        client = ReportClient(
            ReportConfig(api_key="test-key", model="openrouter/google/gemini-2.5-flash"),
            http_client=http,
        )

        response = client.complete([{"role": "user", "content": "hi"}])

        assert response.content == "## Conclusion"
        assert response.usage["completion_tokens"] == 120
        request = captured[0]
        assert request.headers["Authorization"] == "Bearer test-key"
        payload = json.loads(request.content)
        assert payload["model"] == "google/gemini-2.5-flash"

    def test_http_error_raises(self):
        http = httpx.Client(transport=make_transport(status_code=500, body={"error": "boom"}))
        client = ReportClient(ReportConfig(api_key="k"), http_client=http)

        with pytest.raises(httpx.HTTPStatusError):
            client.complete([{"role": "user", "content": "hi"}])

    def test_provider_error_raises(self):
        http = httpx.Client(transport=make_transport(body={"error": {"message": "quota"}}))
        client = ReportClient(ReportConfig(api_key="k"), http_client=http)

        with pytest.raises(ReportGenerationError):
            client.complete([{"role": "user", "content": "hi"}])

    @pytest.mark.parametrize("body", MALFORMED_BODIES, ids=MALFORMED_IDS)
    def test_malformed_response_raises(self, body):
        http = httpx.Client(transport=make_transport(body=body))
        client = ReportClient(ReportConfig(api_key="k"), http_client=http)

        with pytest.raises(ReportGenerationError, match="Malformed provider response"):
            client.complete([{"role": "user", "content": "hi"}])

    def test_null_content_is_empty(self):
        http = httpx.Client(transport=make_transport(body=completion_body(None)))
        client = ReportClient(ReportConfig(api_key="k"), http_client=http)

        assert client.complete([{"role": "user", "content": "hi"}]).content == ""


class TestForensicReport:
    """Failures degrade to a placeholder, never an exception."""

    def test_success(self, uniform_batch):
        records, verdict = uniform_batch
        client = Mock()
        client.complete.return_value = LLMResponse(
            content="  **Potentially Lethal.**  ", model="m", usage={}
        )

        outcome = generate_forensic_report(verdict, DEFAULT_PROJECTILE, records, client=client)

        assert outcome.succeeded is True
        assert outcome.text == "**Potentially Lethal.**"
        messages = client.complete.call_args[0][0]
        assert messages[0]["role"] == "system"
        assert "Forensic Ballistics Expert" in messages[0]["content"]
        assert "Sample Size: 4" in messages[1]["content"]

    def test_missing_credential(self, uniform_batch):
        records, verdict = uniform_batch
        text = summarize_findings(verdict, DEFAULT_PROJECTILE, records, config=ReportConfig(api_key=""))
        assert text == REPORT_FAILURE_MESSAGE

    def test_network_error(self, uniform_batch):
        records, verdict = uniform_batch
        client = Mock()
        client.complete.side_effect = httpx.ConnectError("connection refused")

        outcome = generate_forensic_report(verdict, DEFAULT_PROJECTILE, records, client=client)

        assert outcome.succeeded is False
        assert outcome.text == REPORT_FAILURE_MESSAGE
        assert "connection refused" in outcome.error

    def test_http_status_error(self, uniform_batch):
        records, verdict = uniform_batch
        http = httpx.Client(transport=make_transport(status_code=401, body={"error": "bad key"}))
        client = ReportClient(ReportConfig(api_key="k"), http_client=http)

        outcome = generate_forensic_report(verdict, DEFAULT_PROJECTILE, records, client=client)

        assert outcome.succeeded is False
        assert outcome.error == "HTTP 401"

    def test_empty_response(self, uniform_batch):
        records, verdict = uniform_batch
        client = Mock()
        client.complete.return_value = LLMResponse(content="", model="m", usage={})

        assert summarize_findings(verdict, DEFAULT_PROJECTILE, records, client=client) == EMPTY_REPORT_MESSAGE

    @pytest.mark.parametrize("body", MALFORMED_BODIES, ids=MALFORMED_IDS)
    def test_malformed_response(self, uniform_batch, body):
        records, verdict = uniform_batch
        http = httpx.Client(transport=make_transport(body=body))
        client = ReportClient(ReportConfig(api_key="k"), http_client=http)

        outcome = generate_forensic_report(verdict, DEFAULT_PROJECTILE, records, client=client)

        assert outcome.succeeded is False
        assert outcome.text == REPORT_FAILURE_MESSAGE

    def test_closes_client_it_builds(self, uniform_batch):
        records, verdict = uniform_batch
        with patch("airgun_lethality.llm.forensic_report.ReportClient") as client_cls:
            client_cls.return_value.complete.return_value = LLMResponse(content="ok", model="m", usage={})
            outcome = generate_forensic_report(
                verdict, DEFAULT_PROJECTILE, records, config=ReportConfig(api_key="k")
            )

        assert outcome.text == "ok"
        client_cls.return_value.close.assert_called_once()

    def test_closes_client_after_failure(self, uniform_batch):
        records, verdict = uniform_batch
        with patch("airgun_lethality.llm.forensic_report.ReportClient") as client_cls:
            client_cls.return_value.complete.side_effect = httpx.ConnectError("refused")
            outcome = generate_forensic_report(
                verdict, DEFAULT_PROJECTILE, records, config=ReportConfig(api_key="k")
            )

        assert outcome.succeeded is False
        client_cls.return_value.close.assert_called_once()

    def test_leaves_injected_client_open(self, uniform_batch):
        records, verdict = uniform_batch
        client = Mock()
        client.complete.return_value = LLMResponse(content="ok", model="m", usage={})

        generate_forensic_report(verdict, DEFAULT_PROJECTILE, records, client=client)

        client.close.assert_not_called()


class TestReportConfig:
    """Environment is read only through from_env()."""

    def test_defaults_have_no_credentials(self):
        assert ReportConfig().has_credentials is False

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "env-key")
        monkeypatch.setenv("LETHALITY_REPORT_MODEL", "openai/gpt-4o-mini")

        config = ReportConfig.from_env()

        assert config.api_key == "env-key"
        assert config.model == "openai/gpt-4o-mini"

    def test_from_dotenv_file(self, monkeypatch, tmp_path):
        # Register both vars so monkeypatch removes what load_dotenv sets
        monkeypatch.setenv("OPENROUTER_API_KEY", "placeholder")
        monkeypatch.delenv("OPENROUTER_API_KEY")
        monkeypatch.setenv("LETHALITY_REPORT_MODEL", "placeholder")
        monkeypatch.delenv("LETHALITY_REPORT_MODEL")
        env_file = tmp_path / ".env"
        env_file.write_text("OPENROUTER_API_KEY=file-key\n", encoding="utf-8")

        config = ReportConfig.from_env(str(env_file))

        assert config.api_key == "file-key"
        assert config.model == "google/gemini-2.5-flash"
