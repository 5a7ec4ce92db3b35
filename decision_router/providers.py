"""FunctionProvider: adapt a plain callable to the LLMProvider interface."""

import inspect
from typing import Any, Awaitable, Callable

from decision_router.models import LLMProvider, LLMResponse

PromptFn = Callable[[str], "str | None | Awaitable[str | None]"]


class FunctionProvider(LLMProvider):
    """Wraps ``fn(prompt) -> text`` (sync or async) as a provider.

    The prompt passed to ``fn`` is the content of the last user message.
    Handy for wiring non-LLM handlers into a registry, and for tests.
    """

    def __init__(self, fn: PromptFn, *, name: str | None = None, model: str = "function"):
        if not callable(fn):
            raise TypeError(f"FunctionProvider needs a callable, got {type(fn).__name__}")
        self._fn = fn
        self._name = name or getattr(fn, "__name__", "function")
        self._model = model

    @property
    def name(self) -> str:
        return self._name

    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
    ) -> LLMResponse:
        prompt = ""
        for msg in reversed(messages):
            if msg.get("role") == "user":
                prompt = str(msg.get("content") or "")
                break

        result = self._fn(prompt)
        if inspect.isawaitable(result):
            result = await result
        return LLMResponse(content=result, model_used=model or self._model)
