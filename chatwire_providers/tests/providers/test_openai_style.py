"""OpenAI-compatible adapters (OpenAI, DeepSeek, xAI, OpenRouter)."""
from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from chatwire_providers.base.errors import ErrorCode
from chatwire_providers.base.models import Message, StreamOptions, StreamRequest
from chatwire_providers.base.openai_style_parts.style_helpers import (
    build_chat_body,
    extract_delta_text,
    extract_finish_reason,
    extract_model_ids,
    is_done_sentinel,
)
from chatwire_providers.deepseek import DeepseekProvider
from chatwire_providers.openai import OpenAIProvider
from chatwire_providers.openrouter import OpenRouterProvider
from chatwire_providers.tests.helpers import CallbackRecorder, StubTransport
from chatwire_providers.xai import XAIProvider

HI = [{"role": "user", "content": "Hi"}]


def _delta(text=None, finish=None) -> str:
    delta = {"content": text} if text is not None else {}
    return json.dumps({"id": "c1", "choices": [{"index": 0, "delta": delta, "finish_reason": finish}]})


def _start(provider, rec, options=None):
    asyncio.run(provider.chat_stream("gpt-test", HI, rec.callbacks(), options))


def test_body_normalizes_roles_and_options():
    request = StreamRequest(
        model="gpt-test",
        messages=[Message("system", "s"), Message("user", "u"), Message("model", "m")],
        options=StreamOptions(max_output_tokens=10, top_p=0.5, system_instruction="first", seed=7),
    )
    body = build_chat_body(request, default_temperature=0.7)

    assert body["messages"] == [  # nosec B101
        {"role": "system", "content": "first"},
        {"role": "system", "content": "s"},
        {"role": "user", "content": "u"},
        {"role": "assistant", "content": "m"},
    ]
    assert body["stream"] is True and body["temperature"] == 0.7  # nosec B101
    assert body["max_tokens"] == 10 and body["top_p"] == 0.5 and body["seed"] == 7  # nosec B101


def test_chunk_helpers():
    assert is_done_sentinel(" [DONE] ")  # nosec B101
    assert extract_delta_text(json.loads(_delta("x"))) == "x"  # nosec B101
    assert extract_delta_text(json.loads(_delta())) is None  # nosec B101
    assert extract_finish_reason(json.loads(_delta(finish="stop"))) == "stop"  # nosec B101
    assert extract_model_ids({"data": [{"id": "b"}, {"id": "a"}, {"object": "x"}]}) == ["a", "b"]  # nosec B101


def test_stream_completes_on_done_sentinel():
    stub, rec = StubTransport(), CallbackRecorder()
    provider = OpenAIProvider(api_key="sk-test", transport=stub)  # pragma: allowlist secret - dummy test value
    _start(provider, rec)
    config = stub.last.config
    stub.last.replay([_delta("Hel"), _delta("lo"), _delta(finish="stop"), "[DONE]", _delta("ignored")])

    assert rec.events == [("start", None), ("token", "Hel"), ("token", "lo"), ("complete", None)]  # nosec B101
    assert config.url == "https://api.openai.com/v1/chat/completions"  # nosec B101
    assert config.headers["Authorization"] == "Bearer sk-test"  # nosec B101
    assert config.body["model"] == "gpt-test"  # nosec B101


def test_stream_without_done_completes_at_end():
    stub, rec = StubTransport(), CallbackRecorder()
    _start(OpenAIProvider(api_key="k", transport=stub), rec)  # pragma: allowlist secret - dummy test value
    stub.last.replay([_delta("a"), _delta(finish="length")])

    assert rec.terminals == [("complete", None)]  # nosec B101


def test_content_filter_is_a_content_policy_error():
    stub, rec = StubTransport(), CallbackRecorder()
    _start(DeepseekProvider(api_key="k", transport=stub), rec)  # pragma: allowlist secret - dummy test value
    stub.last.replay([_delta("par"), _delta(finish="content_filter"), "[DONE]"])

    assert rec.tokens == ["par"]  # nosec B101
    assert rec.error.code is ErrorCode.CONTENT_BLOCKED  # nosec B101
    assert len(rec.terminals) == 1  # nosec B101


def test_error_object_fails_the_exchange():
    stub, rec = StubTransport(), CallbackRecorder()
    _start(XAIProvider(api_key="k", transport=stub), rec)  # pragma: allowlist secret - dummy test value
    stub.last.replay([json.dumps({"error": {"message": "Incorrect API key provided", "type": "invalid_request_error"}})])

    assert rec.error.code is ErrorCode.AUTH  # nosec B101


def test_vendor_defaults():
    stub = StubTransport()
    for cls, url in (
        (DeepseekProvider, "https://api.deepseek.com/v1/chat/completions"),
        (XAIProvider, "https://api.x.ai/v1/chat/completions"),
        (OpenRouterProvider, "https://openrouter.ai/api/v1/chat/completions"),
    ):
        asyncio.run(cls(api_key="k", transport=stub).chat_stream(None, HI))  # pragma: allowlist secret - dummy test value
        assert stub.last.config.url == url  # nosec B101


def test_openrouter_attribution_headers():
    stub = StubTransport()
    provider = OpenRouterProvider(api_key="k", transport=stub, referer="https://app.test", title="Chat App")  # pragma: allowlist secret - dummy test value
    asyncio.run(provider.chat_stream("openrouter/auto", HI))

    assert stub.last.config.headers["HTTP-Referer"] == "https://app.test"  # nosec B101
    assert stub.last.config.headers["X-Title"] == "Chat App"  # nosec B101


@pytest.mark.parametrize(
    "env_name, cls",
    [("OPENAI_API_KEY", OpenAIProvider), ("DEEPSEEK_API_KEY", DeepseekProvider), ("XAI_API_KEY", XAIProvider)],
)
def test_key_comes_from_environment(monkeypatch, env_name, cls):
    monkeypatch.setenv(env_name, "from-env")
    stub = StubTransport()
    asyncio.run(cls(transport=stub).chat_stream("m", HI))

    assert stub.last.config.headers["Authorization"] == "Bearer from-env"  # nosec B101


def test_fetch_models_lists_live_models():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"data": [{"id": "gpt-b"}, {"id": "gpt-a"}]})

    async def main():
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        try:
            return await OpenAIProvider(api_key="k", http_client=client).fetch_models()  # pragma: allowlist secret - dummy test value
        finally:
            await client.aclose()

    models = asyncio.run(main())

    assert [m.id for m in models] == ["gpt-a", "gpt-b"]  # nosec B101
    assert seen[0].headers["Authorization"] == "Bearer k"  # nosec B101


def test_fetch_models_falls_back_to_static_catalog():
    def handler(request):
        return httpx.Response(500, text="down")

    async def main():
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        try:
            return await OpenAIProvider(api_key="k", http_client=client).fetch_models()  # pragma: allowlist secret - dummy test value
        finally:
            await client.aclose()

    models = asyncio.run(main())

    assert "gpt-4o" in [m.id for m in models]  # nosec B101


def test_check_connection_auth_failure():
    async def main():
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(401)))
        try:
            return await OpenAIProvider(api_key="bad", http_client=client).check_connection()  # pragma: allowlist secret - dummy test value
        finally:
            await client.aclose()

    result = asyncio.run(main())

    assert not result.ok and result.reason.value == "AUTH"  # nosec B101
