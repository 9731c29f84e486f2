"""
OpenRouter client for forensic report generation.

Uses the OpenRouter chat-completions API directly with httpx.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from ..errors import ReportGenerationError
from .config import ReportConfig


@dataclass
class LLMResponse:
    """Response from LLM API call."""
    content: str
    model: str
    usage: Dict[str, int]
    raw_response: Any = None


class ReportClient:
    """
    LLM client for writing appraisal conclusions via OpenRouter.

    The API key comes from the ReportConfig passed in; nothing is read
    from module-level state.
    """

    BASE_URL = "https://openrouter.ai/api/v1/chat/completions"

    def __init__(
        self,
        config: ReportConfig,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the report client.

        Args:
            config: Report settings (API key, model, sampling)
            http_client: Pre-built httpx client (defaults to a new one
                using config.timeout_seconds)

        Raises:
            ReportGenerationError: If the config carries no API key
        """
        if not config.has_credentials:
            raise ReportGenerationError(
                "OpenRouter API key required. Set OPENROUTER_API_KEY env var or pass api_key."
            )

        model = config.model
        # Strip openrouter/ prefix if present
        if model.startswith("openrouter/"):
            model = model[len("openrouter/"):]

        self.config = config
        self.model = model
        self._client = http_client or httpx.Client(timeout=config.timeout_seconds)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
            "X-Title": "Air Gun Lethality Analyzer",
        }

    def complete(
        self,
        messages: List[Dict[str, str]],
    ) -> LLMResponse:
        """
        Make a simple completion.

        Args:
            messages: Conversation messages

        Returns:
            LLMResponse with content

        Raises:
            httpx.HTTPError: On transport failure or a non-2xx status
            ReportGenerationError: On a provider error or a malformed body
        """
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }

        response = self._client.post(
            self.BASE_URL,
            headers=self._headers(),
            json=payload,
        )
        response.raise_for_status()
        data = response.json()

        if "error" in data:
            raise ReportGenerationError(f"Provider error: {data['error']}")
        try:
            message = data["choices"][0]["message"]
        except (KeyError, IndexError, TypeError) as e:
            raise ReportGenerationError(f"Malformed provider response: {e}") from e
        if not isinstance(message, dict):
            raise ReportGenerationError(
                f"Malformed provider response: message is {type(message).__name__}"
            )
        content = message.get("content")
        if content is not None and not isinstance(content, str):
            raise ReportGenerationError(
                f"Malformed provider response: content is {type(content).__name__}"
            )

        return LLMResponse(
            content=content or "",
            model=data.get("model", self.model),
            usage=data.get("usage", {}),
            raw_response=data,
        )

    def close(self) -> None:
        self._client.close()
