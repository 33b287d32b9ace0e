"""Claude (Anthropic) LLM Client"""

import json
import logging

from aic.llm.base import (
    DEFAULT_TIMEOUT,
    CompletionResult, GenerationRequest, HTTPStatusError, LLMClient, LLMError, ProviderError, TransportError,
)

logger = logging.getLogger(__name__)


class ClaudeClient(LLMClient):
    """Claude API client. Requires CLAUDE_API_KEY (or ANTHROPIC_API_KEY).

    The Messages API returns one completion per call, so n candidates cost n
    sequential calls.
    """

    PROVIDER = "claude"
    DEFAULT_MAX_TOKENS = 256

    def __init__(self, api_key: str | None = None, base_url: str | None = None,
                 timeout: float = DEFAULT_TIMEOUT, client=None):
        if client is not None:
            self._client = client
            return

        if not api_key:
            raise LLMError("missing CLAUDE_API_KEY")

        try:
            from anthropic import Anthropic
        except ImportError:
            raise LLMError(
                "Anthropic SDK not installed. Run:\n"
                "  pip install anthropic"
            )

        # Retries are owned by this client, not the SDK
        kwargs = {"api_key": api_key, "timeout": timeout, "max_retries": 0}
        if base_url:
            kwargs["base_url"] = base_url
        self._client = Anthropic(**kwargs)

    @property
    def name(self) -> str:
        return "Claude"

    def chat(self, request: GenerationRequest) -> CompletionResult:
        from anthropic import APIConnectionError, APIError, APIStatusError

        params = self._params(request)
        choices = []
        raw_parts = []

        for i in range(request.n):
            logger.debug("claude: call %d/%d model=%s", i + 1, request.n, request.model)
            try:
                response = self._client.messages.create(**params)
            except APIStatusError as e:
                raise HTTPStatusError(self.PROVIDER, e.status_code, _status_body(e)) from e
            except APIConnectionError as e:
                raise TransportError(f"claude request failed: {e}") from e
            except APIError as e:
                raise ProviderError(f"claude error: {e.message}") from e

            text = "".join(
                block.text for block in response.content
                if getattr(block, "type", None) == "text"
            )
            choices.append(text)
            raw_parts.append(response.model_dump_json())

        return CompletionResult(choices=choices, raw="\n".join(raw_parts))

    def _params(self, request: GenerationRequest) -> dict:
        params = {
            "model": request.model,
            "messages": [{"role": m.role, "content": m.content} for m in request.conversation],
            "max_tokens": request.token_budget or self.DEFAULT_MAX_TOKENS,
        }
        if request.system:
            params["system"] = request.system
        if request.temperature is not None:
            params["temperature"] = request.temperature
        return params


def _status_body(err) -> str:
    body = getattr(err, "body", None)
    if body is None:
        return err.message
    if isinstance(body, str):
        return body
    return json.dumps(body)
