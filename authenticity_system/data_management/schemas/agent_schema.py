"""Agent-level schemas: registry descriptors, canonical results and outcomes.

Every agent, local heuristic or third-party adapter, reports through the same
AgentResult shape. Confidence is always the probability (0-100) that the
content is inauthentic, whatever scale the underlying signal used.

An agent that has nothing trustworthy to say abstains. Abstention is an
explicit outcome variant, never a sentinel score.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AgentKind(str, Enum):
    """Where an agent runs."""

    CORE = "CORE"  # Local deterministic heuristic
    EXTERNAL = "EXTERNAL"  # Adapter over a third-party service


class AgentVerdict(str, Enum):
    """Per-agent discrete verdict."""

    GENUINE = "GENUINE"
    FAKE = "FAKE"
    SUSPICIOUS = "SUSPICIOUS"
    UNCERTAIN = "UNCERTAIN"


class ResultSource(str, Enum):
    """Whether a result came from the real classifier or a local approximation."""

    PRIMARY = "PRIMARY"
    FALLBACK = "FALLBACK"


class AbstentionReason(str, Enum):
    """Why an agent did not contribute to the composite score."""

    NOT_APPLICABLE = "NOT_APPLICABLE"  # Required input fields absent
    DISABLED = "DISABLED"  # Switched off in configuration
    NO_SIGNAL = "NO_SIGNAL"  # Agent ran but had nothing to report
    TIMED_OUT = "TIMED_OUT"  # Per-agent timeout elapsed
    DEADLINE_EXCEEDED = "DEADLINE_EXCEEDED"  # Cancelled at the global deadline
    FAILED = "FAILED"  # Internal error or transport failure without fallback
    INVALID_RESULT = "INVALID_RESULT"  # Result broke the AgentResult invariants


class AgentDescriptor(BaseModel):
    """Static registry entry describing one agent.

    The registry table is the single place identifiers, weights and required
    inputs are defined. Weights across the registry sum to 1.0.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    identifier: str = Field(..., min_length=1, description="Stable agent key")
    display_name: str = Field(..., description="Human-readable agent name")
    weight: float = Field(..., gt=0.0, le=1.0, description="Nominal share of the composite")
    kind: AgentKind
    required_input_fields: frozenset[str] = Field(
        ..., description="AnalysisRequest fields that must be present to dispatch"
    )
    description: str = Field("", description="What the agent looks at")


class AgentResult(BaseModel):
    """Canonical normalized output of one agent.

    Attributes:
        agent_name: Registry identifier of the producing agent
        confidence: Probability (0-100) that the content is inauthentic
        verdict: Discrete per-agent verdict
        evidence: Ordered human-readable reasons
        raw_score: Untransformed provider signal, kept for audit only
        source: PRIMARY when the real classifier answered, FALLBACK otherwise
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "agentName": "bertTransformer",
                    "confidence": 87.0,
                    "verdict": "FAKE",
                    "evidence": ["Transformer estimates 87% probability of generated text"],
                    "rawScore": 0.87,
                    "source": "PRIMARY",
                }
            ]
        },
    )

    agent_name: str = Field(..., min_length=1)
    confidence: float = Field(..., ge=0.0, le=100.0, allow_inf_nan=False)
    verdict: AgentVerdict
    evidence: list[str] = Field(default_factory=list)
    raw_score: Optional[Any] = Field(None, description="Provider signal before normalization")
    source: ResultSource = ResultSource.PRIMARY


@dataclass(frozen=True)
class Answered:
    """Outcome of an agent that produced a valid result."""

    result: AgentResult

    @property
    def agent_id(self) -> str:
        return self.result.agent_name


@dataclass(frozen=True)
class Abstained:
    """Outcome of an agent that contributed nothing."""

    agent_id: str
    reason: AbstentionReason
    detail: str = ""


AgentOutcome = Union[Answered, Abstained]


@dataclass(frozen=True)
class HealthStatus:
    """Result of a cheap availability check against an external service."""

    agent: str
    available: bool
    endpoint: str
    detail: str = ""


def verdict_from_thresholds(
    confidence: float,
    fake_threshold: float,
    suspicious_threshold: float,
) -> AgentVerdict:
    """Map a confidence onto FAKE / SUSPICIOUS / GENUINE with fixed split points."""
    if confidence >= fake_threshold:
        return AgentVerdict.FAKE
    if confidence >= suspicious_threshold:
        return AgentVerdict.SUSPICIOUS
    return AgentVerdict.GENUINE


__all__ = [
    "AgentKind",
    "AgentVerdict",
    "ResultSource",
    "AbstentionReason",
    "AgentDescriptor",
    "AgentResult",
    "Answered",
    "Abstained",
    "AgentOutcome",
    "HealthStatus",
    "verdict_from_thresholds",
]
