"""Tests for RoutingAgent classify/dispatch."""

import asyncio

import pytest

from decision_router import (
    UNAVAILABLE_MESSAGE,
    UNROUTABLE_MESSAGE,
    Category,
    Decision,
    FunctionProvider,
    RoutingAgent,
)
from decision_router.parser import FALLBACK_CONFIDENCE


def _recording(reply, calls):
    def fn(prompt):
        calls.append(prompt)
        return reply
    return FunctionProvider(fn)


def _agent(classifier_reply, handlers=None, **kwargs):
    calls = {"classifier": [], **{c: [] for c in Category}}
    if handlers is None:
        handlers = {c: _recording(f"{c.value} answer", calls[c]) for c in Category}
    agent = RoutingAgent(_recording(classifier_reply, calls["classifier"]), handlers, **kwargs)
    return agent, calls


def test_classify_sends_request_and_parses_reply():
    agent, calls = _agent('{"category": "TechnicalSupport", "confidence": 0.88, "reasoning": "export crash"}')
    decision = asyncio.run(agent.classify("The app crashes when exporting CSV"))

    assert decision == Decision(Category.TECHNICAL_SUPPORT, 0.88, "export crash")
    assert len(calls["classifier"]) == 1
    prompt = calls["classifier"][0]
    assert "The app crashes when exporting CSV" in prompt
    for category in Category:
        assert category.value in prompt
    assert '{"category": "CategoryName", "confidence": 0.95, "reasoning": "Brief explanation"}' in prompt


def test_classify_empty_reply_uses_fallback():
    agent, _ = _agent(None)
    decision = asyncio.run(agent.classify("hi"))
    assert decision.category is Category.GENERAL_INQUIRY
    assert decision.confidence == FALLBACK_CONFIDENCE


def test_dispatch_returns_handler_text_verbatim():
    agent, calls = _agent("unused")
    decision = Decision(Category.TECHNICAL_SUPPORT, 0.9, "bug")
    result = asyncio.run(agent.dispatch("App crashes on start", decision))

    assert result == "TechnicalSupport answer"
    assert len(calls[Category.TECHNICAL_SUPPORT]) == 1
    assert "technical support specialist" in calls[Category.TECHNICAL_SUPPORT][0]
    assert '"App crashes on start"' in calls[Category.TECHNICAL_SUPPORT][0]
    assert not calls[Category.CUSTOMER_SERVICE]


def test_dispatch_unregistered_category():
    calls = []
    handlers = {Category.GENERAL_INQUIRY: _recording("general", calls)}
    agent, _ = _agent("unused", handlers=handlers)

    result = asyncio.run(agent.dispatch("I want a lawyer", Decision(Category.ESCALATION, 0.9, "legal")))
    assert result == UNROUTABLE_MESSAGE
    assert calls == []


@pytest.mark.parametrize("reply", [None, "", "   \n"])
def test_dispatch_empty_handler_reply(reply):
    agent, _ = _agent("unused", handlers={Category.CUSTOMER_SERVICE: FunctionProvider(lambda p: reply)})
    result = asyncio.run(agent.dispatch("refund please", Decision(Category.CUSTOMER_SERVICE, 0.9, "")))
    assert result == UNAVAILABLE_MESSAGE


def test_shared_handler_for_escalation():
    calls = []
    general = _recording("general", calls)
    agent, _ = _agent("unused", handlers={Category.GENERAL_INQUIRY: general, Category.ESCALATION: general})

    result = asyncio.run(agent.dispatch("This is unacceptable!", Decision(Category.ESCALATION, 0.9, "")))
    assert result == "general"
    assert "escalated request" in calls[0]


def test_custom_handler_prompts_fall_back_to_general_template():
    calls = []
    agent, _ = _agent(
        "unused",
        handlers={Category.TECHNICAL_SUPPORT: _recording("ok", calls)},
        handler_prompts={Category.GENERAL_INQUIRY: "General: {request}"},
    )
    asyncio.run(agent.dispatch("printer jam", Decision(Category.TECHNICAL_SUPPORT, 0.9, "")))
    assert calls == ["General: printer jam"]


def test_route_end_to_end_with_prose_reply():
    agent, calls = _agent("Clearly a billing issue because they were charged twice.")
    decision, response = asyncio.run(agent.route("I was charged twice this month"))

    assert decision.category is Category.CUSTOMER_SERVICE
    assert decision.confidence == 0.75
    assert decision.reasoning == "they were charged twice"
    assert response == "CustomerService answer"
    assert len(calls["classifier"]) == 1
    assert len(calls[Category.CUSTOMER_SERVICE]) == 1


def test_route_invalid_confidence_escalates_on_keyword():
    agent, calls = _agent('{"category":"Escalation","confidence":1.2,"reasoning":"angry customer"}')
    decision, response = asyncio.run(agent.route("You people are useless"))
    assert decision.category is Category.ESCALATION
    assert decision.confidence == 0.75
    assert response == "Escalation answer"


def test_async_providers_and_concurrent_routes():
    async def classifier(prompt):
        await asyncio.sleep(0)
        if "I need a refund" in prompt:
            return '{"category": "CustomerService", "confidence": 0.9, "reasoning": "refund"}'
        return '{"category": "GeneralInquiry", "confidence": 0.6, "reasoning": "question"}'

    async def handler(prompt):
        await asyncio.sleep(0)
        return "handled: " + prompt.splitlines()[0][:10]

    agent = RoutingAgent(
        FunctionProvider(classifier),
        {c: FunctionProvider(handler) for c in Category},
    )

    async def main():
        return await asyncio.gather(
            agent.route("I need a refund"),
            agent.route("What plans do you offer?"),
        )

    (d1, r1), (d2, r2) = asyncio.run(main())
    assert d1.category is Category.CUSTOMER_SERVICE
    assert d2.category is Category.GENERAL_INQUIRY
    assert r1.startswith("handled: ")
    assert r2.startswith("handled: ")


def test_handler_registry_is_read_only_copy():
    handlers = {Category.GENERAL_INQUIRY: FunctionProvider(lambda p: "general")}
    agent = RoutingAgent(FunctionProvider(lambda p: ""), handlers)

    handlers[Category.ESCALATION] = FunctionProvider(lambda p: "late addition")
    assert Category.ESCALATION not in agent.handlers
    with pytest.raises(TypeError):
        agent.handlers[Category.ESCALATION] = handlers[Category.ESCALATION]


def test_provider_errors_propagate():
    def broken(prompt):
        raise ConnectionError("classifier down")

    agent = RoutingAgent(FunctionProvider(broken), {})
    with pytest.raises(ConnectionError):
        asyncio.run(agent.classify("hello"))


def test_function_provider_requires_callable():
    with pytest.raises(TypeError):
        FunctionProvider("not callable")


def test_function_provider_uses_last_user_message():
    seen = []
    provider = FunctionProvider(lambda p: seen.append(p) or "ok", name="echo")
    messages = [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "first"},
        {"role": "assistant", "content": "reply"},
        {"role": "user", "content": "second"},
    ]
    response = asyncio.run(provider.chat(messages, model="m1"))
    assert seen == ["second"]
    assert response.content == "ok"
    assert response.model_used == "m1"
    assert provider.name == "echo"
