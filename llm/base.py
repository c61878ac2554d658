"""
LLM Client Base - Abstract base class for LLM providers.
"""
from abc import ABC, abstractmethod
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any


# Context variable for tagging LLM calls in logs
_current_task_type: ContextVar[Optional[str]] = ContextVar('task_type', default=None)


def set_llm_context(task_type: Optional[str] = None):
    """Set context for LLM call logging."""
    if task_type is not None:
        _current_task_type.set(task_type)


def get_llm_context() -> Dict[str, Optional[str]]:
    """Get current LLM logging context."""
    return {"task_type": _current_task_type.get()}


@dataclass
class LLMResponse:
    """Standard response from LLM: completion text plus its citations."""
    content: str
    model: str
    citations: List[str] = field(default_factory=list)
    usage: Dict[str, int] = field(default_factory=dict)  # input_tokens, output_tokens
    finish_reason: Optional[str] = None
    latency_ms: Optional[int] = None

    @property
    def total_tokens(self) -> int:
        return self.usage.get("input_tokens", 0) + self.usage.get("output_tokens", 0)


@dataclass
class Message:
    """Chat message."""
    role: str  # "user", "assistant", "system"
    content: str


class LLMClient(ABC):
    """
    Abstract base class for LLM clients.

    All LLM providers should implement this interface.
    """

    def __init__(self, api_key: str, model: str):
        self.api_key = api_key
        self.model = model

    @abstractmethod
    async def chat(
        self,
        messages: List[Message],
        system: Optional[str] = None,
        max_tokens: int = 1500,
        temperature: float = 0.2,
        model: Optional[str] = None,
        **options: Any,
    ) -> LLMResponse:
        """
        Generate a response from a conversation.

        Args:
            messages: List of conversation messages
            system: Optional system prompt
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            model: Override the client's default model for this call
            **options: Provider-specific request fields

        Returns:
            LLMResponse with generated content and citations
        """
        pass

    async def generate(
        self,
        prompt: str,
        system: Optional[str] = None,
        max_tokens: int = 1500,
        temperature: float = 0.2,
        model: Optional[str] = None,
        **options: Any,
    ) -> LLMResponse:
        """Generate a response from a single user prompt."""
        messages = [Message(role="user", content=prompt)]
        return await self.chat(
            messages,
            system=system,
            max_tokens=max_tokens,
            temperature=temperature,
            model=model,
            **options,
        )

    async def aclose(self) -> None:
        """Release any underlying connections."""
        return None

    def _build_messages(
        self,
        messages: List[Message],
        system: Optional[str] = None
    ) -> List[Dict[str, str]]:
        """Build messages list in OpenAI format."""
        result = []
        if system:
            result.append({"role": "system", "content": system})
        for msg in messages:
            result.append({"role": msg.role, "content": msg.content})
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model})"
