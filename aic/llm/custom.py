"""Client for a user-configured OpenAI-compatible server (LM Studio, vLLM, llama.cpp, ...)"""

import dataclasses
import logging
import re

from aic.llm import http
from aic.llm.base import DEFAULT_TIMEOUT, CompletionResult, GenerationRequest, HTTPStatusError, ProviderError
from aic.llm.openai import OpenAIClient

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:1234"

# Balanced <think>...</think> blocks, then any stray open/close tag left behind
THINK_BLOCK_RE = re.compile(r'<think\b[^>]*>.*?</think>', re.IGNORECASE | re.DOTALL)
THINK_TAG_RE = re.compile(r'</?think\b[^>]*>', re.IGNORECASE)


def strip_reasoning(text: str) -> str:
    """Remove reasoning traces some local models emit before the answer."""
    text = THINK_BLOCK_RE.sub('', text)
    text = THINK_TAG_RE.sub('', text)
    return text.strip()


@dataclasses.dataclass(frozen=True)
class CustomEndpoints:
    """Base URL plus per-endpoint paths. Absolute paths are used verbatim."""
    base_url: str = DEFAULT_BASE_URL
    chat_completions_path: str = "/v1/chat/completions"
    models_path: str = "/v1/models"

    def url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith('/'):
            path = '/' + path
        return self.base_url.rstrip('/') + path


class CustomClient(OpenAIClient):
    """OpenAI wire format against a configurable endpoint. The API key is optional."""

    PROVIDER = "custom"
    REQUIRES_KEY = False
    KEY_NAME = "CUSTOM_API_KEY"

    def __init__(self, api_key: str | None = None, endpoints: CustomEndpoints | None = None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.endpoints = endpoints or CustomEndpoints()
        super().__init__(api_key=api_key, base_url=self.endpoints.base_url, timeout=timeout)

    @property
    def name(self) -> str:
        return f"Custom ({self.endpoints.base_url})"

    def _chat_url(self) -> str:
        return self.endpoints.url(self.endpoints.chat_completions_path)

    def _prepare(self, request: GenerationRequest) -> GenerationRequest:
        model = request.model.strip()
        if model and model.lower() != "auto":
            return request
        resolved = self.resolve_model()
        logger.debug("custom: resolved model %s", resolved)
        return dataclasses.replace(request, model=resolved)

    def resolve_model(self) -> str:
        """Return the first model id the server lists."""
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        status, body = http.send(
            self.PROVIDER, self.endpoints.url(self.endpoints.models_path),
            headers=headers, method="GET", timeout=self.timeout,
        )
        if not http.is_success(status):
            raise HTTPStatusError("custom models", status, body)

        try:
            data = http.decode(self.PROVIDER, body)
        except ProviderError:
            data = None

        # OpenAI shape {"data": [{"id": ...}]} or a bare list [{"id": ...}]
        entries = data.get("data") if isinstance(data, dict) else data
        if isinstance(entries, list) and entries and isinstance(entries[0], dict):
            model_id = str(entries[0].get("id") or "").strip()
            if model_id:
                return model_id
        raise ProviderError("could not determine model from models response")

    def _content(self, choice: dict) -> str:
        return strip_reasoning(super()._content(choice))

    def _result(self, choices: list[dict], body: str) -> CompletionResult:
        cleaned = [text for text in (self._content(c) for c in choices) if text]
        return CompletionResult(choices=cleaned, raw=body)
