"""decision-router: recover classification decisions from LLM text and route on them."""

from decision_router.models import Category, Decision, LLMProvider, LLMResponse
from decision_router.parser import DecisionParser, extract
from decision_router.providers import FunctionProvider
from decision_router.router import UNAVAILABLE_MESSAGE, UNROUTABLE_MESSAGE, RoutingAgent

__all__ = [
    "Category",
    "Decision",
    "LLMProvider",
    "LLMResponse",
    "DecisionParser",
    "extract",
    "FunctionProvider",
    "RoutingAgent",
    "UNROUTABLE_MESSAGE",
    "UNAVAILABLE_MESSAGE",
]
