"""LLM Base Classes and Shared Code"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from aic import AicError


ROLES = ("system", "user", "assistant")

# Per-call HTTP timeout in seconds
DEFAULT_TIMEOUT = 60

# Upper bound on compatibility retries within a single chat() call
MAX_ATTEMPTS = 3


@dataclass(frozen=True)
class Message:
    role: str
    content: str

    def __post_init__(self):
        if self.role not in ROLES:
            raise ValueError(f"Unknown message role: {self.role}")


@dataclass(frozen=True)
class GenerationRequest:
    """Provider-neutral chat request.

    Adapters never mutate a request; compatibility retries derive adjusted
    copies with dataclasses.replace().
    """
    model: str
    messages: tuple[Message, ...]
    max_tokens: int | None = None
    max_completion_tokens: int | None = None
    n: int = 1
    temperature: float | None = None

    def __post_init__(self):
        if self.n < 1:
            raise ValueError("n must be at least 1")
        if sum(1 for m in self.messages if m.role == "system") > 1:
            raise ValueError("at most one system message is allowed")
        # Accept lists from callers but store an immutable tuple
        object.__setattr__(self, "messages", tuple(self.messages))

    @property
    def system(self) -> str:
        for m in self.messages:
            if m.role == "system":
                return m.content
        return ""

    @property
    def conversation(self) -> list[Message]:
        """Messages without the system entry."""
        return [m for m in self.messages if m.role != "system"]

    @property
    def token_budget(self) -> int | None:
        return self.max_tokens or self.max_completion_tokens


@dataclass(frozen=True)
class CompletionResult:
    """Uniform result of any provider call."""
    choices: list[str] = field(default_factory=list)
    raw: str = ""


class LLMError(AicError):
    """Raised when LLM operations fail."""
    pass


class TransportError(LLMError):
    """Network failure before a response was received."""
    pass


class ResponseReadError(LLMError):
    """A response arrived but its body could not be read."""
    pass


class HTTPStatusError(LLMError):
    """Provider answered with a non-2xx status."""

    def __init__(self, provider: str, status: int, body: str):
        self.provider = provider
        self.status = status
        self.body = body
        super().__init__(f"{provider} http {status}: {body}")


class ProviderError(LLMError):
    """Provider reported an error inside an otherwise successful response."""
    pass


class EmptyResponseError(LLMError):
    """Provider returned nothing usable."""

    def __init__(self, message: str = "no choices returned", raw: str = ""):
        self.raw = raw
        super().__init__(message)


class LLMClient(ABC):
    """Abstract base for provider adapters."""

    @abstractmethod
    def chat(self, request: GenerationRequest) -> CompletionResult:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass
