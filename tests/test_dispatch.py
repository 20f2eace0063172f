"""Tests for provider selection and text/chat fallback."""

import pytest

from clarity_llm.dispatch import Dispatcher
from clarity_llm.errors import NoProviderAvailableError, TransportError
from clarity_llm.models import GenerationOptions, Message, PromptTemplate, Role
from tests.fakes import FakeAdapter, probed_registry


@pytest.mark.asyncio
async def test_select_first_available_by_priority():
    low = FakeAdapter("low", 5)
    high = FakeAdapter("high", 1)
    dispatcher = Dispatcher(await probed_registry(low, high))
    assert dispatcher.select_provider().name == "high"


@pytest.mark.asyncio
async def test_select_skips_unavailable_adapters():
    down = FakeAdapter("down", 1, available=False)
    up = FakeAdapter("up", 2)
    dispatcher = Dispatcher(await probed_registry(down, up))
    assert dispatcher.select_provider().name == "up"


@pytest.mark.asyncio
async def test_select_preferred_when_available(alpha, beta):
    dispatcher = Dispatcher(await probed_registry(alpha, beta))
    assert dispatcher.select_provider("Beta") is beta


@pytest.mark.asyncio
async def test_select_unavailable_preferred_falls_through(alpha):
    beta = FakeAdapter("Beta", 2, available=False)
    dispatcher = Dispatcher(await probed_registry(alpha, beta))
    assert dispatcher.select_provider("Beta") is dispatcher.select_provider()
    assert dispatcher.select_provider("Beta") is alpha


@pytest.mark.asyncio
async def test_select_unknown_preferred_falls_through(alpha, beta):
    dispatcher = Dispatcher(await probed_registry(alpha, beta))
    assert dispatcher.select_provider("nope") is alpha


@pytest.mark.asyncio
async def test_select_none_when_nothing_available():
    dispatcher = Dispatcher(await probed_registry(FakeAdapter("x", 1, available=False)))
    assert dispatcher.select_provider() is None
    assert dispatcher.select_provider("x") is None


@pytest.mark.asyncio
async def test_primary_success_never_touches_fallback(alpha, beta):
    """Alpha succeeds: result comes from Alpha and Beta is never invoked."""
    dispatcher = Dispatcher(await probed_registry(alpha, beta))
    result = await dispatcher.generate_text("hello")
    assert result.provider == "Alpha"
    assert result.content == "Alpha says: hello"
    assert beta.calls == []


@pytest.mark.asyncio
async def test_result_passed_through_unchanged(alpha):
    dispatcher = Dispatcher(await probed_registry(alpha))
    result = await dispatcher.generate_text("hi")
    assert result.model == "Alpha-model"
    assert result.usage is None


@pytest.mark.asyncio
async def test_failure_falls_back_to_next_adapter(beta):
    """Alpha throws, Beta succeeds: the caller sees Beta's result."""
    alpha = FakeAdapter("Alpha", 1, error=TransportError("Alpha", "boom"))
    dispatcher = Dispatcher(await probed_registry(alpha, beta))
    result = await dispatcher.generate_text("hello")
    assert result.provider == "Beta"
    assert len(alpha.calls) == 1
    assert beta.calls == [("text", "hello", None)]


@pytest.mark.asyncio
async def test_fallback_error_is_surfaced():
    """Both fail: the fallback's error reaches the caller, not the primary's."""
    alpha_error = TransportError("Alpha", "alpha down")
    beta_error = TransportError("Beta", "beta down")
    alpha = FakeAdapter("Alpha", 1, error=alpha_error)
    beta = FakeAdapter("Beta", 2, error=beta_error)
    dispatcher = Dispatcher(await probed_registry(alpha, beta))
    with pytest.raises(TransportError) as exc_info:
        await dispatcher.generate_text("hello")
    assert exc_info.value is beta_error


@pytest.mark.asyncio
async def test_only_one_fallback_hop():
    first = FakeAdapter("first", 1, error=RuntimeError("first"))
    second = FakeAdapter("second", 2, error=RuntimeError("second"))
    third = FakeAdapter("third", 3)
    dispatcher = Dispatcher(await probed_registry(first, second, third))
    with pytest.raises(RuntimeError, match="second"):
        await dispatcher.generate_chat([Message(role=Role.USER, content="hi")])
    assert third.calls == []


@pytest.mark.asyncio
async def test_no_fallback_reraises_original_error():
    error = ValueError("bad response")
    only = FakeAdapter("only", 1, error=error)
    dispatcher = Dispatcher(await probed_registry(only))
    with pytest.raises(ValueError) as exc_info:
        await dispatcher.generate_text("hello")
    assert exc_info.value is error
    assert len(only.calls) == 1


@pytest.mark.asyncio
async def test_fallback_skips_unavailable_adapters():
    primary = FakeAdapter("primary", 1, error=RuntimeError("down"))
    offline = FakeAdapter("offline", 2, available=False)
    spare = FakeAdapter("spare", 3)
    dispatcher = Dispatcher(await probed_registry(primary, offline, spare))
    result = await dispatcher.generate_text("x")
    assert result.provider == "spare"
    assert offline.calls == []


@pytest.mark.asyncio
async def test_preferred_failure_falls_back_to_highest_priority(alpha):
    beta = FakeAdapter("Beta", 2, error=RuntimeError("down"))
    dispatcher = Dispatcher(await probed_registry(alpha, beta))
    result = await dispatcher.generate_text("x", GenerationOptions(provider="Beta"))
    assert result.provider == "Alpha"


@pytest.mark.asyncio
async def test_failure_does_not_change_availability(beta):
    alpha = FakeAdapter("Alpha", 1, error=RuntimeError("down"))
    registry = await probed_registry(alpha, beta)
    dispatcher = Dispatcher(registry)
    await dispatcher.generate_text("x")
    assert dispatcher.available_provider_names() == ["Alpha", "Beta"]
    await dispatcher.generate_text("y")
    assert len(alpha.calls) == 2


@pytest.mark.asyncio
async def test_no_provider_raises_without_invoking_adapters():
    offline = FakeAdapter("offline", 1, available=False)
    dispatcher = Dispatcher(await probed_registry(offline))
    with pytest.raises(NoProviderAvailableError):
        await dispatcher.generate_text("hello")
    with pytest.raises(NoProviderAvailableError):
        await dispatcher.generate_chat([Message(role=Role.USER, content="hi")])
    assert offline.calls == []


@pytest.mark.asyncio
async def test_chat_messages_and_options_passed_verbatim(alpha):
    dispatcher = Dispatcher(await probed_registry(alpha))
    messages = [
        Message(role=Role.SYSTEM, content="rules"),
        Message(role=Role.USER, content="q1"),
        Message(role=Role.ASSISTANT, content="a1"),
        Message(role=Role.USER, content="q2"),
    ]
    options = GenerationOptions(temperature=0.2, max_tokens=50)
    await dispatcher.generate_chat(messages, options)
    kind, sent, sent_options = alpha.calls[0]
    assert kind == "chat"
    assert sent == messages
    assert sent_options is options


@pytest.mark.asyncio
async def test_generate_from_template_builds_system_and_user(alpha):
    dispatcher = Dispatcher(await probed_registry(alpha))
    template = PromptTemplate(
        system="You are a {{role}} assistant",
        user="Help with {{task}}",
        variables={"role": "coding", "task": "tests"},
    )
    await dispatcher.generate_from_template(template)
    _, messages, _ = alpha.calls[0]
    assert messages == [
        Message(role=Role.SYSTEM, content="You are a coding assistant"),
        Message(role=Role.USER, content="Help with tests"),
    ]


@pytest.mark.asyncio
async def test_generate_from_template_without_system(alpha):
    dispatcher = Dispatcher(await probed_registry(alpha))
    await dispatcher.generate_from_template(PromptTemplate(user="just {{x}}"))
    _, messages, _ = alpha.calls[0]
    assert messages == [Message(role=Role.USER, content="just {{x}}")]


@pytest.mark.asyncio
async def test_template_chat_uses_fallback(beta):
    alpha = FakeAdapter("Alpha", 1, error=RuntimeError("down"))
    dispatcher = Dispatcher(await probed_registry(alpha, beta))
    result = await dispatcher.generate_from_template(PromptTemplate(user="hi"))
    assert result.provider == "Beta"
