"""Gemini (Google Generative Language API) client"""

import logging
import urllib.parse

from aic.llm import http
from aic.llm.base import (
    DEFAULT_TIMEOUT, MAX_ATTEMPTS,
    CompletionResult, GenerationRequest, HTTPStatusError, LLMClient, LLMError, ProviderError,
)

logger = logging.getLogger(__name__)


def map_role(role: str) -> str:
    return "model" if role == "assistant" else role


class GeminiClient(LLMClient):
    """Gemini generateContent client. Requires GEMINI_API_KEY.

    Candidates are requested one call at a time and aggregated in order.
    """

    PROVIDER = "gemini"
    DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
    DEFAULT_MAX_TOKENS = 256
    TOKEN_CEILING = 2048

    def __init__(self, api_key: str | None = None, base_url: str | None = None,
                 timeout: float = DEFAULT_TIMEOUT):
        if not api_key:
            raise LLMError("missing GEMINI_API_KEY")
        self.api_key = api_key
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip('/')
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "Gemini"

    def chat(self, request: GenerationRequest) -> CompletionResult:
        contents = [
            {"role": map_role(m.role), "parts": [{"text": m.content}]}
            for m in request.conversation
        ]
        choices = []
        raw_parts = []
        for _ in range(request.n):
            text, raw = self._generate_one(request, contents)
            if text is not None:
                choices.append(text)
            raw_parts.append(raw)
        return CompletionResult(choices=choices, raw="\n".join(raw_parts))

    def _generate_one(self, request: GenerationRequest, contents: list[dict]) -> tuple[str | None, str]:
        """One candidate, growing the output budget when it was cut off before producing text."""
        max_out = request.token_budget or self.DEFAULT_MAX_TOKENS
        url = self._url(request.model)

        for attempt in range(1, MAX_ATTEMPTS + 1):
            status, body = http.send(
                self.PROVIDER, url, self._payload(request, contents, max_out),
                headers={"Content-Type": "application/json"}, timeout=self.timeout,
            )
            if not http.is_success(status):
                raise HTTPStatusError(self.PROVIDER, status, body)

            data = http.decode(self.PROVIDER, body)
            message = http.embedded_error(data)
            if message:
                raise ProviderError(f"{self.PROVIDER} error: {message}")

            candidates = (data.get("candidates") if isinstance(data, dict) else None) or []
            texts = [_candidate_text(c) for c in candidates]
            all_blank = all(not t.strip() for t in texts)
            hit_max_tokens = any(
                str(c.get("finishReason", "")).upper() == "MAX_TOKENS" for c in candidates
            )

            if not (all_blank and hit_max_tokens) or attempt == MAX_ATTEMPTS or max_out >= self.TOKEN_CEILING:
                return (texts[0] if texts else None), body

            max_out = min(max_out * 2, self.TOKEN_CEILING)
            logger.debug("gemini: empty output at MAX_TOKENS, retrying with %d tokens", max_out)

        raise ProviderError("gemini: retry loop exited without a response")

    def _url(self, model: str) -> str:
        model = urllib.parse.quote(model, safe='')
        return f"{self.base_url}/models/{model}:generateContent?key={urllib.parse.quote(self.api_key)}"

    def _payload(self, request: GenerationRequest, contents: list[dict], max_out: int) -> dict:
        generation_config = {
            "maxOutputTokens": max_out,
            "candidateCount": 1,
            "responseMimeType": "text/plain",
        }
        if request.temperature is not None:
            generation_config["temperature"] = request.temperature

        body = {"contents": contents, "generationConfig": generation_config}
        if request.system:
            body["systemInstruction"] = {"parts": [{"text": request.system}]}
        return body


def _candidate_text(candidate: dict) -> str:
    parts = (candidate.get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts)
