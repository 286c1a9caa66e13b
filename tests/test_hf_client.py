"""Hugging Face client: request shape, response parsing and retries."""

from __future__ import annotations

import json
from typing import Any, Callable, List

import httpx
import pytest

from services.hf_client import (
    HF_SOURCE,
    HuggingFaceClient,
    HuggingFaceError,
    HuggingFaceUnavailable,
    normalize_label,
)


def _client(handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any) -> HuggingFaceClient:
    return HuggingFaceClient(
        "hf_test_token",
        base_url="https://hf.test/models",
        backoff_seconds=0,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


async def test_nested_payload_is_normalized() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=[[
                {"label": "POS", "score": 0.9},
                {"label": "NEU", "score": 0.07},
                {"label": "NEG", "score": 0.03},
            ]],
        )

    client = _client(handler)
    result = await client.analyze("Me encanta", "spanish")
    await client.aclose()

    assert result["success"] is True
    assert result["source"] == HF_SOURCE
    assert result["model"] == "pysentimiento/robertuito-sentiment-analysis"
    assert result["analysis"]["sentiment"] == "positive"
    assert result["analysis"]["confidence"] == 90.0
    assert result["analysis"]["label"] == "POS"
    assert [s["score"] for s in result["analysis"]["all_scores"]] == [90.0, 7.0, 3.0]

    request = seen[0]
    assert str(request.url) == "https://hf.test/models/pysentimiento/robertuito-sentiment-analysis"
    assert request.headers["Authorization"] == "Bearer hf_test_token"
    assert json.loads(request.content) == {
        "inputs": "Me encanta",
        "options": {"wait_for_model": True},
    }


async def test_flat_payload_and_profile_selection() -> None:
    seen: List[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=[
            {"label": "neutral", "score": 0.3},
            {"label": "negative", "score": 0.7},
        ])

    client = _client(handler)
    result = await client.analyze("I hate it", "english")
    await client.aclose()

    assert seen == ["https://hf.test/models/cardiffnlp/twitter-roberta-base-sentiment-latest"]
    assert result["analysis"]["sentiment"] == "negative"
    assert result["analysis"]["confidence"] == 70.0


async def test_unknown_profile_uses_spanish_model() -> None:
    seen: List[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json=[{"label": "NEU", "score": 1.0}])

    client = _client(handler)
    result = await client.analyze("hola", "klingon")
    await client.aclose()

    assert seen == ["/models/pysentimiento/robertuito-sentiment-analysis"]
    assert result["analysis"]["sentiment"] == "neutral"


@pytest.mark.parametrize("payload", [[], [[]], {"error": "Model is loading"}, [{"label": "POS"}], "ok"])
async def test_invalid_payload_raises(payload: Any) -> None:
    client = _client(lambda request: httpx.Response(200, json=payload))

    with pytest.raises(HuggingFaceError):
        await client.analyze("hola")
    await client.aclose()


async def test_client_error_is_not_retried() -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(401, json={"error": "Invalid credentials"})

    client = _client(handler)
    with pytest.raises(HuggingFaceError) as excinfo:
        await client.analyze("hola")
    await client.aclose()

    assert calls["count"] == 1
    assert "401" in str(excinfo.value)
    assert not isinstance(excinfo.value, HuggingFaceUnavailable)


async def test_model_loading_is_retried_until_success() -> None:
    responses = [
        httpx.Response(503, json={"error": "loading"}),
        httpx.Response(200, json=[{"label": "POS", "score": 0.8}]),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.pop(0)

    client = _client(handler)
    result = await client.analyze("genial")
    await client.aclose()

    assert responses == []
    assert result["analysis"]["sentiment"] == "positive"


async def test_retries_stop_after_max_attempts() -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(429)

    client = _client(handler, max_attempts=2)
    with pytest.raises(HuggingFaceUnavailable):
        await client.analyze("hola")
    await client.aclose()

    assert calls["count"] == 2


async def test_transport_errors_are_retried_then_raised() -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        raise httpx.ConnectTimeout("timed out", request=request)

    client = _client(handler, max_attempts=3)
    with pytest.raises(httpx.ConnectTimeout):
        await client.analyze("hola")
    await client.aclose()

    assert calls["count"] == 3


@pytest.mark.parametrize(
    "label, expected",
    [
        ("POS", "positive"),
        ("positive", "positive"),
        ("NEG", "negative"),
        ("Negative", "negative"),
        ("NEU", "neutral"),
        ("LABEL_1", "neutral"),
        (None, "neutral"),
    ],
)
def test_normalize_label(label: Any, expected: str) -> None:
    assert normalize_label(label) == expected
