"""LLM Client Package"""

from aic.llm.base import (
    CompletionResult,
    EmptyResponseError,
    GenerationRequest,
    HTTPStatusError,
    LLMClient,
    LLMError,
    Message,
    ProviderError,
    ResponseReadError,
    TransportError,
)
from aic.llm.claude import ClaudeClient
from aic.llm.custom import CustomClient, CustomEndpoints, strip_reasoning
from aic.llm.gemini import GeminiClient
from aic.llm.mock import MockClient
from aic.llm.openai import OpenAIClient

PROVIDERS = {
    "openai": OpenAIClient,
    "claude": ClaudeClient,
    "gemini": GeminiClient,
    "custom": CustomClient,
}

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "claude": "claude-3-5-haiku-latest",
    "gemini": "gemini-1.5-flash",
    # Ask the server which model it has loaded
    "custom": "auto",
}

MODEL_ALIASES = {
    ("openai", "gpt-5"): "gpt-5-2025-08-07",
}


def default_model_for(provider: str) -> str:
    """The cheap default model of a provider family."""
    return DEFAULT_MODELS.get(provider, DEFAULT_MODELS["openai"])


def resolve_model_alias(provider: str, model: str) -> str:
    return MODEL_ALIASES.get((provider, model), model)


def get_client(config) -> LLMClient:
    """Build the client for config.provider. Mock mode wins over any provider."""
    if config.mock:
        return MockClient()

    if config.provider == "custom":
        return CustomClient(api_key=config.api_key, endpoints=config.custom)
    if config.provider in PROVIDERS:
        return PROVIDERS[config.provider](api_key=config.api_key)

    raise LLMError(f"Unknown provider: {config.provider}. Use 'openai', 'claude', 'gemini', or 'custom'.")


__all__ = [
    "LLMClient",
    "LLMError",
    "TransportError",
    "ResponseReadError",
    "HTTPStatusError",
    "ProviderError",
    "EmptyResponseError",
    "Message",
    "GenerationRequest",
    "CompletionResult",
    "OpenAIClient",
    "ClaudeClient",
    "GeminiClient",
    "CustomClient",
    "CustomEndpoints",
    "MockClient",
    "strip_reasoning",
    "get_client",
    "default_model_for",
    "resolve_model_alias",
    "PROVIDERS",
    "DEFAULT_MODELS",
]
