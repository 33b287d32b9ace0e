"""OpenAI Chat Completions client"""

import dataclasses
import logging

from aic.llm import http
from aic.llm.base import (
    DEFAULT_TIMEOUT, MAX_ATTEMPTS,
    CompletionResult, GenerationRequest, HTTPStatusError, LLMClient, LLMError, ProviderError,
)

logger = logging.getLogger(__name__)

UNSUPPORTED_MAX_TOKENS = "Unsupported parameter: 'max_tokens'"
UNSUPPORTED_TEMPERATURE = "Unsupported value: 'temperature'"


class OpenAIClient(LLMClient):
    """OpenAI chat completions client. Requires OPENAI_API_KEY."""

    PROVIDER = "openai"
    DEFAULT_BASE_URL = "https://api.openai.com/v1"
    TOKEN_CEILING = 8000
    REQUIRES_KEY = True
    KEY_NAME = "OPENAI_API_KEY"

    def __init__(self, api_key: str | None = None, base_url: str | None = None,
                 timeout: float = DEFAULT_TIMEOUT):
        if not api_key and self.REQUIRES_KEY:
            raise LLMError(f"missing {self.KEY_NAME}")
        self.api_key = api_key or ""
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip('/')
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "OpenAI"

    def chat(self, request: GenerationRequest) -> CompletionResult:
        request = self._prepare(request)
        attempt = 0
        while True:
            attempt += 1
            status, body = http.send(
                self.PROVIDER, self._chat_url(), self._payload(request),
                headers=self._headers(), timeout=self.timeout,
            )

            if not http.is_success(status):
                adjusted = self._adjust_for_error(request, body) if attempt < MAX_ATTEMPTS else None
                if adjusted is not None:
                    request = adjusted
                    continue
                raise HTTPStatusError(self.PROVIDER, status, body)

            data = http.decode(self.PROVIDER, body)
            message = http.embedded_error(data)
            if message:
                raise ProviderError(f"{self.PROVIDER} error: {message}")

            choices = (data.get("choices") if isinstance(data, dict) else None) or []
            budget = request.token_budget
            if budget and self._truncated_without_content(choices):
                doubled = budget * 2
                if doubled > self.TOKEN_CEILING:
                    logger.debug("%s: token budget ceiling reached at %d", self.PROVIDER, budget)
                    return self._result(choices, body)
                logger.debug("%s: empty output cut by length, retrying with %d tokens", self.PROVIDER, doubled)
                request = self._with_budget(request, doubled)
                continue

            return self._result(choices, body)

    def _prepare(self, request: GenerationRequest) -> GenerationRequest:
        return request

    def _chat_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _payload(self, request: GenerationRequest) -> dict:
        body = {
            "model": request.model,
            "messages": [{"role": m.role, "content": m.content} for m in request.messages],
            "n": request.n,
        }
        if request.max_tokens:
            body["max_tokens"] = request.max_tokens
        if request.max_completion_tokens:
            body["max_completion_tokens"] = request.max_completion_tokens
        if request.temperature is not None:
            body["temperature"] = request.temperature
        return body

    def _adjust_for_error(self, request: GenerationRequest, body: str) -> GenerationRequest | None:
        """Return a request the backend should accept, or None if the error is not a known quirk."""
        if UNSUPPORTED_MAX_TOKENS in body and request.max_tokens:
            logger.debug("%s: moving token budget to max_completion_tokens", self.PROVIDER)
            return dataclasses.replace(request, max_completion_tokens=request.max_tokens, max_tokens=None)
        if UNSUPPORTED_TEMPERATURE in body and request.temperature is not None:
            logger.debug("%s: dropping unsupported temperature", self.PROVIDER)
            return dataclasses.replace(request, temperature=None)
        return None

    @staticmethod
    def _with_budget(request: GenerationRequest, budget: int) -> GenerationRequest:
        if request.max_completion_tokens:
            return dataclasses.replace(request, max_completion_tokens=budget)
        return dataclasses.replace(request, max_tokens=budget)

    def _content(self, choice: dict) -> str:
        message = choice.get("message") or {}
        return message.get("content") or ""

    def _truncated_without_content(self, choices: list[dict]) -> bool:
        if not choices:
            return False
        return all(
            self._content(c) == "" and c.get("finish_reason") == "length"
            for c in choices
        )

    def _result(self, choices: list[dict], body: str) -> CompletionResult:
        return CompletionResult(choices=[self._content(c) for c in choices], raw=body)
