"""Schema package for analysis requests, agent results and composite results.

Primary exports:
- AnalysisRequest: Content plus context submitted for analysis
- AgentResult: Canonical normalized output of one agent
- AgentOutcome: Answered | Abstained tagged variant
- CompositeResult: Aggregated score, verdict and evidence chain

Usage:
    from authenticity_system.data_management.schemas import AnalysisRequest
    request = AnalysisRequest(text="Great app", rating=5)
"""

from authenticity_system.data_management.schemas.request_schema import (
    AppMedia,
    AnalysisRequest,
    REQUEST_FIELDS,
)

from authenticity_system.data_management.schemas.agent_schema import (
    AgentKind,
    AgentVerdict,
    ResultSource,
    AbstentionReason,
    AgentDescriptor,
    AgentResult,
    Answered,
    Abstained,
    AgentOutcome,
    HealthStatus,
    verdict_from_thresholds,
)

from authenticity_system.data_management.schemas.composite_schema import (
    CompositeVerdict,
    EvidenceEntry,
    Consensus,
    AnalysisMetadata,
    CompositeResult,
)

__all__ = [
    # Request
    "AppMedia",
    "AnalysisRequest",
    "REQUEST_FIELDS",
    # Agent
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
    # Composite
    "CompositeVerdict",
    "EvidenceEntry",
    "Consensus",
    "AnalysisMetadata",
    "CompositeResult",
]
