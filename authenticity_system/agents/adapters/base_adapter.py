"""Base class for adapters over third-party classification services.

Each adapter hides one provider's wire format behind the canonical AgentResult.
The lifecycle of one call:

1. build_payload() selects the request fields the service needs.
2. call_service() POSTs under the per-agent timeout. One retry is allowed on
   transport errors and attempt timeouts, with a strictly shorter timeout, so
   both attempts fit inside the agent's budget.
3. normalize() maps the provider vocabulary and scale onto AgentResult using
   fixed split points. Malformed bodies raise MalformedResponseError.
4. On any failure the adapter degrades to fallback(), a local approximation
   tagged FALLBACK with confidence compressed toward 50, or abstains when no
   fallback exists.

asyncio.CancelledError is never caught here: an adapter cancelled at the global
deadline stops retrying immediately.
"""

import asyncio
from abc import abstractmethod
from typing import Any, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_none,
)

from authenticity_system.agents.base_agent import BaseAgent
from authenticity_system.config.scoring import (
    AGENT_FAKE_THRESHOLD,
    AGENT_SUSPICIOUS_THRESHOLD,
    FALLBACK_CONFIDENCE_FACTOR,
    PRIMARY_ATTEMPT_FRACTION,
    RETRY_ATTEMPT_FRACTION,
)
from authenticity_system.config.settings import settings
from authenticity_system.data_management.schemas import (
    AbstentionReason,
    Abstained,
    AgentKind,
    AgentOutcome,
    AgentResult,
    AgentVerdict,
    AnalysisRequest,
    HealthStatus,
    ResultSource,
    verdict_from_thresholds,
)
from authenticity_system.errors import AdapterTransportError, MalformedResponseError

# Errors that trigger the single retry
RETRYABLE_ERRORS = (httpx.TransportError, asyncio.TimeoutError)

# Errors that make the adapter degrade to its fallback
DEGRADE_ERRORS = (
    httpx.HTTPError,
    httpx.InvalidURL,
    asyncio.TimeoutError,
    AdapterTransportError,
    ValueError,
    KeyError,
    TypeError,
)


# Errors that mark a service unavailable during a health check
HEALTH_ERRORS = (httpx.HTTPError, httpx.InvalidURL, asyncio.TimeoutError)

def create_http_client(
    user_agent: str = settings.user_agent,
    timeout: float = settings.agent_timeout_seconds,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Build the AsyncClient shared by all adapters of one orchestrator.

    Args:
        user_agent: User-Agent header for outbound requests
        timeout: Default timeout; adapters pass tighter per-request timeouts
        transport: Optional transport override (httpx.MockTransport in tests)
    """
    limits = httpx.Limits(max_keepalive_connections=10, max_connections=50)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        limits=limits,
        follow_redirects=True,
        transport=transport,
        headers={
            "User-Agent": user_agent,
            "Accept": "application/json",
        },
    )


class ExternalAgentAdapter(BaseAgent):
    """
    Adapter over one unreliable third-party classifier.

    Subclasses set AGENT_ID and SERVICE_NAME and implement build_payload() and
    normalize(). Those with a local approximation override fallback().

    Attributes:
        endpoint: Service URL
        http_client: Shared httpx.AsyncClient (created lazily when not injected)
    """

    KIND = AgentKind.EXTERNAL
    SERVICE_NAME = "External service"

    FAKE_THRESHOLD = AGENT_FAKE_THRESHOLD
    SUSPICIOUS_THRESHOLD = AGENT_SUSPICIOUS_THRESHOLD

    def __init__(
        self,
        endpoint: str,
        http_client: Optional[httpx.AsyncClient] = None,
        name: str = "",
        description: str = "",
    ):
        super().__init__(name=name, description=description)
        self.endpoint = endpoint
        self.http_client = http_client
        self._owns_client = http_client is None

    # ── Client lifecycle ──────────────────────────────────────────────

    async def _get_client(self) -> httpx.AsyncClient:
        if self.http_client is None:
            self.http_client = create_http_client()
            self._owns_client = True
        return self.http_client

    async def aclose(self) -> None:
        """Close the HTTP client if this adapter created it."""
        if self._owns_client and self.http_client is not None:
            await self.http_client.aclose()
            self.http_client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    # ── Provider contract ─────────────────────────────────────────────

    @abstractmethod
    def build_payload(self, request: AnalysisRequest) -> dict[str, Any]:
        """Request body containing only the fields this service needs."""
        pass

    @abstractmethod
    def normalize(self, response: dict[str, Any], request: AnalysisRequest) -> Optional[AgentResult]:
        """
        Map a provider response onto AgentResult.

        Returns None when the service answered but has nothing to say
        (e.g. no community data).

        Raises:
            MalformedResponseError: If the body lacks the expected fields
        """
        pass

    def fallback(self, request: AnalysisRequest) -> Optional[AgentResult]:
        """Local approximation used when the service is unavailable."""
        return None

    @property
    def health_url(self) -> str:
        return str(httpx.URL(self.endpoint).copy_with(path="/health"))

    # ── Wire calls ────────────────────────────────────────────────────

    def attempt_timeouts(self, timeout: float) -> tuple[float, float]:
        """Per-attempt budgets; the retry is strictly shorter than the first attempt."""
        return timeout * PRIMARY_ATTEMPT_FRACTION, timeout * RETRY_ATTEMPT_FRACTION

    async def _post(self, payload: dict[str, Any], timeout: float) -> dict[str, Any]:
        client = await self._get_client()
        response = await asyncio.wait_for(
            client.post(self.endpoint, json=payload, timeout=httpx.Timeout(timeout)),
            timeout=timeout,
        )
        response.raise_for_status()
        try:
            body = response.json()
        except ValueError as e:
            raise MalformedResponseError(self.agent_id, f"invalid JSON body: {e}") from e
        if not isinstance(body, dict) or not body:
            raise MalformedResponseError(self.agent_id, "empty or non-object response body")
        return body

    async def call_service(self, payload: dict[str, Any], timeout: float) -> dict[str, Any]:
        """
        POST the payload with at most one retry.

        Raises:
            httpx.HTTPError, asyncio.TimeoutError, MalformedResponseError
        """
        budgets = self.attempt_timeouts(timeout)
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(len(budgets)),
            wait=wait_none(),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            reraise=True,
        ):
            with attempt:
                number = attempt.retry_state.attempt_number
                if number > 1:
                    self.log.info("adapter_retry", attempt=number, timeout=round(budgets[number - 1], 3))
                return await self._post(payload, budgets[number - 1])
        raise AdapterTransportError(self.agent_id, "retry loop exhausted")

    # ── Result helpers ────────────────────────────────────────────────

    def build_result(
        self,
        confidence: float,
        evidence: list[str],
        raw_score: Any = None,
        verdict: Optional[AgentVerdict] = None,
        source: ResultSource = ResultSource.PRIMARY,
    ) -> AgentResult:
        """AgentResult with confidence clamped to 0-100 and a thresholded verdict."""
        confidence = float(max(0.0, min(confidence, 100.0)))
        if verdict is None:
            verdict = verdict_from_thresholds(
                confidence, self.FAKE_THRESHOLD, self.SUSPICIOUS_THRESHOLD
            )
        return AgentResult(
            agent_name=self.agent_id,
            confidence=confidence,
            verdict=verdict,
            evidence=evidence,
            raw_score=raw_score,
            source=source,
        )

    def degraded_result(self, request: AnalysisRequest) -> Optional[AgentResult]:
        """Fallback result compressed into the reduced confidence band."""
        result = self.fallback(request)
        if result is None:
            return None
        compressed = 50.0 + (result.confidence - 50.0) * FALLBACK_CONFIDENCE_FACTOR
        evidence = list(result.evidence)
        evidence.append(f"{self.SERVICE_NAME} unavailable - used local fallback (lower accuracy)")
        return self.build_result(
            compressed,
            evidence,
            raw_score={"fallback_confidence": result.confidence, "detail": result.raw_score},
            source=ResultSource.FALLBACK,
        )

    # ── Boundary ──────────────────────────────────────────────────────

    async def evaluate(
        self,
        request: AnalysisRequest,
        timeout: float,
        primary_available: bool = True,
    ) -> AgentOutcome:
        """
        Run the adapter and wrap the outcome. Never raises except on cancellation.

        Args:
            request: Analysis request
            timeout: Per-agent budget in seconds
            primary_available: False when a health pre-check found the service down
        """
        try:
            return await self._evaluate(request, timeout, primary_available)
        except Exception as e:
            self.log.error("adapter_failed", error=str(e), error_type=type(e).__name__)
            return Abstained(self.agent_id, AbstentionReason.FAILED, f"{type(e).__name__}: {e}")

    async def _evaluate(
        self,
        request: AnalysisRequest,
        timeout: float,
        primary_available: bool,
    ) -> AgentOutcome:
        failure = "service marked unavailable by health check"
        if primary_available:
            try:
                payload = self.build_payload(request)
                response = await self.call_service(payload, timeout)
                result = self.normalize(response, request)
                if result is None:
                    self.log.info("adapter_no_data")
                    return Abstained(self.agent_id, AbstentionReason.NO_SIGNAL, "service returned no data")
                self.log.debug("adapter_primary_result", confidence=result.confidence)
                return self.to_outcome(result)
            except DEGRADE_ERRORS as e:
                failure = f"{type(e).__name__}: {e}"
                self.log.warning("adapter_primary_failed", error=failure)

        result = self.degraded_result(request)
        if result is None:
            return Abstained(self.agent_id, AbstentionReason.FAILED, failure)
        self.log.info("adapter_fallback", reason=failure, confidence=result.confidence)
        return self.to_outcome(result)

    async def analyze(self, request: AnalysisRequest, timeout: float) -> Optional[AgentResult]:
        """Canonical result, or None when the adapter abstains."""
        outcome = await self.evaluate(request, timeout)
        return getattr(outcome, "result", None)

    async def check_health(self, timeout: float = settings.health_timeout_seconds) -> HealthStatus:
        """Cheap GET against the service's health route. Never raises."""
        try:
            client = await self._get_client()
            response = await asyncio.wait_for(
                client.get(self.health_url, timeout=httpx.Timeout(timeout)), timeout=timeout
            )
            available = response.status_code == 200
            return HealthStatus(self.agent_id, available, self.endpoint, f"HTTP {response.status_code}")
        except HEALTH_ERRORS as e:
            self.log.info("health_check_failed", error_type=type(e).__name__)
            return HealthStatus(self.agent_id, False, self.endpoint, f"{type(e).__name__}: {e}")


__all__ = ["ExternalAgentAdapter", "create_http_client", "RETRYABLE_ERRORS", "DEGRADE_ERRORS", "HEALTH_ERRORS"]
