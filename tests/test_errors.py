"""Tests for failure classification."""
from __future__ import annotations

from types import SimpleNamespace

import httpx
import pytest

from ayurbot.infra.errors import UpstreamServiceError
from ayurbot.retrieval.errors import (
    ErrorCategory,
    StageTimeoutError,
    classify_error,
    is_transient,
    status_of,
)


def test_forbidden_status_is_configuration_error():
    classified = classify_error(UpstreamServiceError("gemini", 403, "permission denied"))

    assert classified.category is ErrorCategory.CONFIGURATION
    assert classified.status_code == 500
    assert classified.body == {
        "error": "Configuration issue with AI service",
        "details": "API key problem",
    }


def test_api_key_message_is_configuration_error():
    classified = classify_error(UpstreamServiceError("gemini", 400, "API key not valid. Please pass a valid API key."))
    assert classified.category is ErrorCategory.CONFIGURATION


def test_rate_limit_status_is_capacity_error():
    classified = classify_error(UpstreamServiceError("gemini", 429, "Too many requests"))

    assert classified.category is ErrorCategory.CAPACITY
    assert classified.status_code == 503
    assert classified.body["details"] == "Try again later"


def test_quota_message_is_capacity_error():
    classified = classify_error(RuntimeError("You exceeded your current quota"))
    assert classified.category is ErrorCategory.CAPACITY


@pytest.mark.parametrize(
    "exc",
    [
        UpstreamServiceError("pinecone", 500, "internal"),
        UpstreamServiceError("gemini", 503, "overloaded"),
        StageTimeoutError("embed", 5.0),
        ValueError(""),
    ],
)
def test_everything_else_is_generic(exc):
    classified = classify_error(exc)

    assert classified.category is ErrorCategory.GENERIC
    assert classified.status_code == 500
    assert classified.body["error"] == "Chat service temporarily unavailable"
    assert classified.body["errorType"] == type(exc).__name__
    assert classified.body["details"]


def test_status_of_reads_common_shapes():
    request = httpx.Request("POST", "https://example.test")
    http_error = httpx.HTTPStatusError("boom", request=request, response=httpx.Response(429, request=request))

    assert status_of(UpstreamServiceError("gemini", 503, "x")) == 503
    assert status_of(SimpleNamespace(status=403)) == 403
    assert status_of(http_error) == 429
    assert status_of(RuntimeError("plain")) is None


def test_only_service_unavailable_is_transient():
    assert is_transient(UpstreamServiceError("gemini", 503, "overloaded"))
    assert not is_transient(UpstreamServiceError("gemini", 429, "rate limited"))
    assert not is_transient(StageTimeoutError("generate", 1.0))
