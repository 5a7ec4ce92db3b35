"""RoutingAgent: classify a request, then hand it to the matching handler."""

from collections.abc import Mapping
from types import MappingProxyType

from loguru import logger

from decision_router.models import Category, Decision, LLMProvider
from decision_router.parser import DecisionParser
from decision_router.prompts import (
    CLASSIFICATION_TEMPLATE,
    build_classification_prompt,
    build_handler_prompt,
)

UNROUTABLE_MESSAGE = "Sorry, I'm unable to process this type of request at the moment."
UNAVAILABLE_MESSAGE = "I apologize, but I'm unable to process your request at this time."


class RoutingAgent:
    """Two-step routing: one classifier call, one specialized handler call.

    ``handlers`` maps each Category to the provider that answers it.  It is
    copied into a read-only view; a category without an entry is answered
    with UNROUTABLE_MESSAGE instead of raising.  The agent holds no mutable
    state, so classify/dispatch may run concurrently on one instance.

    Provider exceptions are not caught here; retries and timeouts belong to
    the providers.
    """

    def __init__(
        self,
        classifier: LLMProvider,
        handlers: Mapping[Category, LLMProvider],
        *,
        parser: DecisionParser | None = None,
        classification_template: str = CLASSIFICATION_TEMPLATE,
        handler_prompts: Mapping[Category, str] | None = None,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
    ):
        self._classifier = classifier
        self._handlers: Mapping[Category, LLMProvider] = MappingProxyType(dict(handlers))
        self._parser = parser or DecisionParser()
        self._classification_template = classification_template
        self._handler_prompts = dict(handler_prompts) if handler_prompts is not None else None
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature

    @property
    def handlers(self) -> Mapping[Category, LLMProvider]:
        return self._handlers

    async def classify(self, request_text: str) -> Decision:
        """Ask the classifier for a category and extract a Decision from its reply."""
        prompt = build_classification_prompt(request_text, self._classification_template)
        raw = await self._classifier.respond(
            prompt, model=self._model, max_tokens=self._max_tokens, temperature=self._temperature,
        )
        decision = self._parser.parse(raw)
        logger.info(
            f"Route: {decision.category.value} ({decision.confidence:.0%}) "
            f"via {self._classifier.name} | {decision.reasoning[:120]}"
        )
        return decision

    async def dispatch(self, request_text: str, decision: Decision) -> str:
        """Send the request to the handler registered for ``decision.category``."""
        handler = self._handlers.get(decision.category)
        if handler is None:
            logger.warning(f"No handler registered for {decision.category.value}")
            return UNROUTABLE_MESSAGE

        prompt = build_handler_prompt(decision.category, request_text, self._handler_prompts)
        content = await handler.respond(
            prompt, model=self._model, max_tokens=self._max_tokens, temperature=self._temperature,
        )
        if not content or not content.strip():
            logger.warning(f"Handler {handler.name} returned an empty response for {decision.category.value}")
            return UNAVAILABLE_MESSAGE
        return content

    async def route(self, request_text: str) -> tuple[Decision, str]:
        """classify + dispatch in one call."""
        decision = await self.classify(request_text)
        return decision, await self.dispatch(request_text, decision)
