"""Tests for the shared external adapter lifecycle.

Tests cover:
- Primary path (payload, normalization)
- Single retry on transport errors and attempt timeouts
- Degradation to the local fallback with compressed confidence
- Abstention for adapters without a fallback
- Cancellation propagating without retry
- Health checks
"""

import asyncio
import json

import httpx
import pytest

from authenticity_system.agents.adapters import BertAdapter, CofactsAdapter, create_http_client
from authenticity_system.data_management.schemas import (
    AbstentionReason,
    Abstained,
    AgentVerdict,
    AnalysisRequest,
    Answered,
    ResultSource,
)

ENDPOINT = "http://bert.test/classify"
AI_REVIEW = "As an AI, I highly recommend this amazing perfect excellent app"


def _client(handler) -> httpx.AsyncClient:
    return create_http_client(user_agent="test-agent", timeout=5.0, transport=httpx.MockTransport(handler))


class CallCounter:
    """Mock transport handler that scripts one response per call."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.responses[min(len(self.requests), len(self.responses)) - 1]
        if isinstance(step, Exception):
            raise step
        if isinstance(step, (int, float)) and not isinstance(step, bool):
            await asyncio.sleep(step)
            return httpx.Response(200, json={"cg_probability": 0.1})
        return step

    @property
    def calls(self) -> int:
        return len(self.requests)


class TestPrimaryPath:
    """Test successful service calls."""

    @pytest.mark.asyncio
    async def test_primary_result(self):
        handler = CallCounter(httpx.Response(200, json={"label": "CG", "cg_probability": 0.87}))
        async with _client(handler) as client:
            outcome = await BertAdapter(ENDPOINT, client).evaluate(AnalysisRequest(text=AI_REVIEW), 2.0)

        assert isinstance(outcome, Answered)
        assert outcome.result.confidence == pytest.approx(87.0)
        assert outcome.result.verdict == AgentVerdict.FAKE
        assert outcome.result.source == ResultSource.PRIMARY
        assert handler.calls == 1

        sent = handler.requests[0]
        assert json.loads(sent.content) == {
            "text": AI_REVIEW,
            "model": "bert-base-uncased",
            "return_attention": False,
        }
        assert sent.headers["user-agent"] == "test-agent"

    @pytest.mark.asyncio
    async def test_analyze_returns_result(self):
        handler = CallCounter(httpx.Response(200, json={"cg_probability": 0.2}))
        async with _client(handler) as client:
            result = await BertAdapter(ENDPOINT, client).analyze(AnalysisRequest(text="Fine app"), 2.0)

        assert result.confidence == pytest.approx(20.0)
        assert result.verdict == AgentVerdict.GENUINE


class TestRetry:
    """Test the single retry policy."""

    def test_retry_budget_is_shorter(self):
        primary, retry = BertAdapter(ENDPOINT).attempt_timeouts(10.0)
        assert retry < primary
        assert primary + retry < 10.0

    @pytest.mark.asyncio
    async def test_connect_error_retried_once(self):
        handler = CallCounter(
            httpx.ConnectError("connection refused"),
            httpx.Response(200, json={"cg_probability": 0.9}),
        )
        async with _client(handler) as client:
            outcome = await BertAdapter(ENDPOINT, client).evaluate(AnalysisRequest(text=AI_REVIEW), 2.0)

        assert handler.calls == 2
        assert outcome.result.source == ResultSource.PRIMARY
        assert outcome.result.confidence == pytest.approx(90.0)

    @pytest.mark.asyncio
    async def test_two_timeouts_degrade_to_fallback(self):
        handler = CallCounter(5.0)
        async with _client(handler) as client:
            outcome = await BertAdapter(ENDPOINT, client).evaluate(AnalysisRequest(text=AI_REVIEW), 0.2)

        assert handler.calls == 2
        assert isinstance(outcome, Answered)
        assert outcome.result.source == ResultSource.FALLBACK

    @pytest.mark.asyncio
    async def test_http_error_status_not_retried(self):
        handler = CallCounter(httpx.Response(503, text="down"))
        async with _client(handler) as client:
            outcome = await BertAdapter(ENDPOINT, client).evaluate(AnalysisRequest(text=AI_REVIEW), 2.0)

        assert handler.calls == 1
        assert outcome.result.source == ResultSource.FALLBACK


class TestDegradation:
    """Test fallback and abstention on failure."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, json={"label": "CG"}),
            httpx.Response(200, json={}),
            httpx.Response(200, json=[0.9]),
            httpx.Response(200, text="<html>oops</html>"),
            httpx.Response(200, json={"cg_probability": 1.7}),
        ],
    )
    async def test_malformed_response_uses_fallback(self, response):
        handler = CallCounter(response)
        async with _client(handler) as client:
            outcome = await BertAdapter(ENDPOINT, client).evaluate(AnalysisRequest(text=AI_REVIEW), 2.0)

        assert handler.calls == 1
        assert outcome.result.source == ResultSource.FALLBACK

    @pytest.mark.asyncio
    async def test_fallback_confidence_compressed(self):
        handler = CallCounter(httpx.Response(503))
        async with _client(handler) as client:
            outcome = await BertAdapter(ENDPOINT, client).evaluate(AnalysisRequest(text=AI_REVIEW), 2.0)

        result = outcome.result
        # Local heuristic scores 60; 50 + (60 - 50) * 0.6
        assert result.raw_score["fallback_confidence"] == pytest.approx(60.0)
        assert result.confidence == pytest.approx(56.0)
        assert result.verdict == AgentVerdict.SUSPICIOUS
        assert result.evidence[-1] == "BERT API unavailable - used local fallback (lower accuracy)"

    @pytest.mark.asyncio
    async def test_unavailable_primary_skips_network(self):
        handler = CallCounter(httpx.Response(200, json={"cg_probability": 0.9}))
        async with _client(handler) as client:
            outcome = await BertAdapter(ENDPOINT, client).evaluate(
                AnalysisRequest(text=AI_REVIEW), 2.0, primary_available=False
            )

        assert handler.calls == 0
        assert outcome.result.source == ResultSource.FALLBACK

    @pytest.mark.asyncio
    async def test_adapter_without_fallback_abstains(self):
        handler = CallCounter(httpx.ConnectError("refused"))
        async with _client(handler) as client:
            adapter = CofactsAdapter("http://cofacts.test/graphql", client)
            outcome = await adapter.evaluate(AnalysisRequest(app_description="The best app ever made"), 2.0)
            assert await adapter.analyze(AnalysisRequest(app_description="x"), 0.1) is None

        assert isinstance(outcome, Abstained)
        assert outcome.reason == AbstentionReason.FAILED
        assert "ConnectError" in outcome.detail

    @pytest.mark.asyncio
    async def test_malformed_endpoint_uses_fallback(self):
        handler = CallCounter(httpx.Response(200, json={"cg_probability": 0.9}))
        async with _client(handler) as client:
            outcome = await BertAdapter("http://bert.test:notaport/classify", client).evaluate(
                AnalysisRequest(text=AI_REVIEW), 2.0
            )

        assert handler.calls == 0
        assert outcome.result.source == ResultSource.FALLBACK


class TestCancellation:
    """Test that cancellation stops the adapter immediately."""

    @pytest.mark.asyncio
    async def test_cancel_propagates_without_retry(self):
        handler = CallCounter(10.0)
        async with _client(handler) as client:
            adapter = BertAdapter(ENDPOINT, client)
            task = asyncio.create_task(adapter.evaluate(AnalysisRequest(text=AI_REVIEW), 20.0))
            await asyncio.sleep(0.05)
            task.cancel()

            with pytest.raises(asyncio.CancelledError):
                await task

        assert handler.calls == 1


class TestHealth:
    """Test health checks."""

    @pytest.mark.asyncio
    async def test_healthy_service(self):
        handler = CallCounter(httpx.Response(200, json={"status": "ok"}))
        async with _client(handler) as client:
            status = await BertAdapter(ENDPOINT, client).check_health(1.0)

        assert status.available is True
        assert status.agent == "bertTransformer"
        assert handler.requests[0].method == "GET"
        assert str(handler.requests[0].url) == "http://bert.test/health"

    @pytest.mark.asyncio
    async def test_unreachable_service(self):
        handler = CallCounter(httpx.ConnectError("refused"))
        async with _client(handler) as client:
            status = await BertAdapter(ENDPOINT, client).check_health(1.0)

        assert status.available is False
        assert "ConnectError" in status.detail

    @pytest.mark.asyncio
    async def test_cofacts_health_check_is_graphql_query(self):
        handler = CallCounter(httpx.Response(200, json={"data": {"__typename": "Query"}}))
        async with _client(handler) as client:
            status = await CofactsAdapter("http://cofacts.test/graphql", client).check_health(1.0)

        assert status.available is True
        assert handler.requests[0].method == "POST"
        assert json.loads(handler.requests[0].content) == {"query": "{ __typename }"}

    @pytest.mark.asyncio
    async def test_malformed_endpoint_reports_unavailable(self):
        handler = CallCounter(httpx.Response(200))
        async with _client(handler) as client:
            status = await BertAdapter("http://bert.test:notaport/classify", client).check_health(1.0)

        assert handler.calls == 0
        assert status.available is False
        assert "InvalidURL" in status.detail

    @pytest.mark.asyncio
    async def test_cofacts_invalid_url_reports_unavailable(self):
        handler = CallCounter(httpx.InvalidURL("Invalid port: 'notaport'"))
        async with _client(handler) as client:
            status = await CofactsAdapter("http://cofacts.test/graphql", client).check_health(1.0)

        assert status.available is False
        assert status.endpoint == "http://cofacts.test/graphql"
        assert "InvalidURL" in status.detail
