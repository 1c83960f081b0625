"""Shared fixtures: engine configuration, stub adapters and agent sets."""

import asyncio
from typing import Any, Callable, Optional

import pytest

from authenticity_system.agents.adapters.base_adapter import ExternalAgentAdapter
from authenticity_system.agents.factory import ADAPTER_CLASSES, DETECTOR_CLASSES
from authenticity_system.config.engine import EngineConfig
from authenticity_system.data_management.schemas import (
    AbstentionReason,
    Abstained,
    AgentOutcome,
    AnalysisRequest,
    HealthStatus,
)

ENDPOINTS = {
    "sayamML": "http://sayam.test/predict",
    "developer306": "http://dev306.test/analyze",
    "bertTransformer": "http://bert.test/classify",
    "cofacts": "http://cofacts.test/graphql",
    "checkup": "http://checkup.test/scrape",
    "kitware": "http://kitware.test/analyze",
}

EXTERNAL_IDS = [cls.AGENT_ID for cls in ADAPTER_CLASSES]


class StubAdapter(ExternalAgentAdapter):
    """
    External adapter with scripted behavior and no network access.

    Args:
        confidence: Answer with this confidence; None abstains as FAILED
        delay: Seconds to sleep before answering
        outcome: Return this outcome verbatim (after the delay)
        health_delay: Seconds check_health() takes
        healthy: Availability reported by check_health()
    """

    def __init__(
        self,
        confidence: Optional[float] = None,
        delay: float = 0.0,
        outcome: Optional[AgentOutcome] = None,
        health_delay: float = 0.0,
        healthy: bool = True,
    ):
        super().__init__(f"http://{self.AGENT_ID.lower()}.stub/analyze")
        self.confidence = confidence
        self.delay = delay
        self.outcome = outcome
        self.health_delay = health_delay
        self.healthy = healthy
        self.calls = 0
        self.cancelled = False
        self.primary_available: Optional[bool] = None

    def get_capabilities(self) -> list[str]:
        return ["stub"]

    def build_payload(self, request: AnalysisRequest) -> dict[str, Any]:
        return {}

    def normalize(self, response, request):
        return None

    async def evaluate(self, request, timeout, primary_available=True) -> AgentOutcome:
        self.calls += 1
        self.primary_available = primary_available
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.outcome is not None:
            return self.outcome
        if self.confidence is None:
            return Abstained(self.agent_id, AbstentionReason.FAILED, "stub service unavailable")
        return self.to_outcome(
            self.build_result(self.confidence, [f"{self.agent_id} stub evidence"])
        )

    async def check_health(self, timeout: float = 1.0) -> HealthStatus:
        await asyncio.sleep(self.health_delay)
        return HealthStatus(self.agent_id, self.healthy, self.endpoint, "stub")


@pytest.fixture
def engine_config() -> EngineConfig:
    """Fast configuration: 2s deadline, 1s per-agent timeout."""
    return EngineConfig(
        global_deadline_seconds=2.0,
        agent_timeout_seconds=1.0,
        health_timeout_seconds=0.5,
        endpoints=dict(ENDPOINTS),
    )


@pytest.fixture
def make_stub() -> Callable[..., StubAdapter]:
    """Factory building a StubAdapter registered under an external agent id."""

    def _make(agent_id: str, **kwargs) -> StubAdapter:
        cls = type(f"Stub_{agent_id}", (StubAdapter,), {"AGENT_ID": agent_id})
        return cls(**kwargs)

    return _make


@pytest.fixture
def make_agents(make_stub) -> Callable[..., dict]:
    """
    Factory for a full agent set: real detectors plus stub adapters.

    Adapters not given explicitly abstain. Usage:
        agents = make_agents(bertTransformer=make_stub("bertTransformer", confidence=90))
    """

    def _make(**adapters) -> dict:
        agents = {cls.AGENT_ID: cls() for cls in DETECTOR_CLASSES}
        for agent_id in EXTERNAL_IDS:
            agents[agent_id] = adapters.get(agent_id) or make_stub(agent_id)
        return agents

    return _make
