"""Composite result schema returned by the orchestrator.

The composite carries no timestamps or random identifiers, so two analyses of
the same request with the same agent outcomes serialize to identical JSON.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from authenticity_system.data_management.schemas.agent_schema import (
    AbstentionReason,
    AgentResult,
    ResultSource,
)


class CompositeVerdict(str, Enum):
    """Final verdict banded from the composite score."""

    LIKELY_GENUINE = "LIKELY_GENUINE"
    SUSPICIOUS = "SUSPICIOUS"
    HIGHLY_LIKELY_FAKE = "HIGHLY_LIKELY_FAKE"
    UNCERTAIN = "UNCERTAIN"  # No usable agent output


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class EvidenceEntry(_CamelModel):
    """One evidence string tagged with its agent and the weight it carried."""

    agent: str
    effective_weight: float = Field(..., ge=0.0, le=1.0)
    source: ResultSource
    text: str


class Consensus(_CamelModel):
    """How far the answering agents agree that the content is inauthentic."""

    rate: float = Field(0.0, ge=0.0, le=1.0, description="Share of FAKE/SUSPICIOUS verdicts")
    strong_consensus: bool = False
    description: str = ""


class AnalysisMetadata(_CamelModel):
    """Counts describing which agents contributed."""

    total_agents_run: int = 0
    core_agents: int = 0
    external_agents: int = 0
    fallback_agents: int = 0


class CompositeResult(_CamelModel):
    """Aggregated outcome of one analysis.

    Attributes:
        composite_score: Weighted mean of answering agents' confidence (0-100)
        verdict: Banded composite verdict
        agent_results: Every applicable agent; None when it did not answer
        evidence_chain: Evidence in registry order tagged with effective weight
        missing_agents: Applicable agents that abstained, timed out or failed
        effective_weights: Renormalized weights of answering agents (sum to 1.0)
        not_applicable_agents: Registry agents never dispatched for this request
        abstentions: Reason each missing agent did not contribute
        consensus: Agreement among answering agents
        metadata: Contribution counts
    """

    composite_score: float = Field(..., ge=0.0, le=100.0)
    verdict: CompositeVerdict
    agent_results: dict[str, Optional[AgentResult]] = Field(default_factory=dict)
    evidence_chain: list[EvidenceEntry] = Field(default_factory=list)
    missing_agents: list[str] = Field(default_factory=list)
    effective_weights: dict[str, float] = Field(default_factory=dict)
    not_applicable_agents: list[str] = Field(default_factory=list)
    abstentions: dict[str, AbstentionReason] = Field(default_factory=dict)
    consensus: Consensus = Field(default_factory=Consensus)
    metadata: AnalysisMetadata = Field(default_factory=AnalysisMetadata)

    def to_dict(self) -> dict:
        """Plain dict with camelCase keys, JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialize with camelCase field names."""
        return self.model_dump_json(by_alias=True, indent=indent)


__all__ = [
    "CompositeVerdict",
    "EvidenceEntry",
    "Consensus",
    "AnalysisMetadata",
    "CompositeResult",
]
