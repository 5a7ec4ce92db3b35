"""Core data models for decision-router."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from decision_router.aliases import normalize


class Category(str, Enum):
    """Closed set of classification outcomes that drive dispatch."""

    CUSTOMER_SERVICE = "CustomerService"
    TECHNICAL_SUPPORT = "TechnicalSupport"
    GENERAL_INQUIRY = "GeneralInquiry"
    ESCALATION = "Escalation"

    @classmethod
    def from_name(cls, raw: Any) -> "Category | None":
        """Resolve a category name, ignoring case, spaces, hyphens and underscores.

        Returns None for anything that is not the name of a member.
        """
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        return _BY_NORMALIZED_NAME.get(normalize(raw))


_BY_NORMALIZED_NAME: dict[str, Category] = {normalize(c.value): c for c in Category}


@dataclass(frozen=True)
class Decision:
    """Result of routing classification."""

    category: Category
    confidence: float  # 0.0 .. 1.0 inclusive
    reasoning: str = ""

    def is_confident(self, threshold: float = 0.6) -> bool:
        return self.confidence >= threshold

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
        }


@dataclass
class LLMResponse:
    """Response from an LLM provider."""
    content: str | None
    finish_reason: str = "stop"
    usage: dict[str, int] = field(default_factory=dict)
    model_used: str = ""


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Both the classifier and every category handler are providers.
    """

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
    ) -> LLMResponse:
        """Send a chat completion request."""
        ...

    async def respond(self, prompt: str, **kwargs: Any) -> str | None:
        """Send a single user prompt and return the reply text (may be None)."""
        response = await self.chat(
            messages=[{"role": "user", "content": prompt}], **kwargs
        )
        return response.content

    @property
    def name(self) -> str:
        return self.__class__.__name__
