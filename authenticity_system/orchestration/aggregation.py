"""Pure aggregation functions: weight renormalization, composite score, verdict.

All functions iterate in registry order so floating-point sums, and therefore
serialized results, are reproducible for identical inputs.
"""

from typing import Dict, List, Mapping, Sequence

from authenticity_system.config.scoring import (
    DEFAULT_VERDICT_BANDS,
    STRONG_CONSENSUS_HIGH,
    STRONG_CONSENSUS_LOW,
    VerdictBand,
)
from authenticity_system.data_management.schemas import (
    AgentDescriptor,
    AgentResult,
    AgentVerdict,
    CompositeVerdict,
    Consensus,
    EvidenceEntry,
)
from authenticity_system.errors import ConfigurationError


def validate_verdict_bands(bands: Sequence[VerdictBand]) -> tuple[VerdictBand, ...]:
    """
    Check bands are contiguous from 0 and strictly increasing.

    Raises:
        ConfigurationError: If the bands are not monotonic and exhaustive
    """
    bands = tuple(bands)
    if not bands:
        raise ConfigurationError("verdict bands are empty")
    if bands[0].lower_bound != 0.0:
        raise ConfigurationError("first verdict band must start at 0")
    for previous, current in zip(bands, bands[1:]):
        if current.lower_bound <= previous.lower_bound:
            raise ConfigurationError("verdict band lower bounds must be strictly increasing")
    if bands[-1].lower_bound > 100.0:
        raise ConfigurationError("verdict band lower bound exceeds 100")
    if any(b.verdict == CompositeVerdict.UNCERTAIN for b in bands):
        raise ConfigurationError("UNCERTAIN is reserved for analyses without answering agents")
    return bands


def renormalize_weights(
    descriptors: Sequence[AgentDescriptor],
    answered: Mapping[str, AgentResult],
) -> Dict[str, float]:
    """
    Effective weight of each answering agent: nominal weight / sum over answering agents.

    Returns an empty map when nobody answered; otherwise the values sum to 1.0.
    """
    contributing = [d for d in descriptors if d.identifier in answered]
    total = sum(d.weight for d in contributing)
    if total <= 0:
        return {}
    return {d.identifier: d.weight / total for d in contributing}


def compute_composite_score(
    descriptors: Sequence[AgentDescriptor],
    answered: Mapping[str, AgentResult],
    effective_weights: Mapping[str, float],
) -> float:
    """Weighted mean of answering agents' confidence, clamped to [0, 100]."""
    score = 0.0
    for d in descriptors:
        if d.identifier in effective_weights:
            score += answered[d.identifier].confidence * effective_weights[d.identifier]
    return max(0.0, min(score, 100.0))


def classify_verdict(
    score: float,
    bands: Sequence[VerdictBand] = DEFAULT_VERDICT_BANDS,
) -> CompositeVerdict:
    """Verdict of the highest band whose lower bound the score reaches."""
    verdict = bands[0].verdict
    for band in bands:
        if score >= band.lower_bound:
            verdict = band.verdict
        else:
            break
    return verdict


def build_evidence_chain(
    descriptors: Sequence[AgentDescriptor],
    answered: Mapping[str, AgentResult],
    effective_weights: Mapping[str, float],
) -> List[EvidenceEntry]:
    """Every answering agent's evidence in registry order, tagged with its weight."""
    chain: List[EvidenceEntry] = []
    for d in descriptors:
        result = answered.get(d.identifier)
        if result is None:
            continue
        for text in result.evidence:
            chain.append(
                EvidenceEntry(
                    agent=d.identifier,
                    effective_weight=effective_weights[d.identifier],
                    source=result.source,
                    text=text,
                )
            )
    return chain


def compute_consensus(answered: Mapping[str, AgentResult]) -> Consensus:
    """Share of answering agents whose verdict is FAKE or SUSPICIOUS."""
    if not answered:
        return Consensus(rate=0.0, strong_consensus=False, description="No agents answered")

    flagged = sum(
        1 for r in answered.values() if r.verdict in (AgentVerdict.FAKE, AgentVerdict.SUSPICIOUS)
    )
    rate = flagged / len(answered)
    strong = rate > STRONG_CONSENSUS_HIGH or rate < STRONG_CONSENSUS_LOW
    if rate > STRONG_CONSENSUS_HIGH:
        description = f"Strong consensus: {flagged}/{len(answered)} agents flag the content"
    elif rate < STRONG_CONSENSUS_LOW:
        description = f"Strong consensus: {len(answered) - flagged}/{len(answered)} agents find it genuine"
    else:
        description = f"Mixed signals: {flagged}/{len(answered)} agents flag the content"
    return Consensus(rate=rate, strong_consensus=strong, description=description)


__all__ = [
    "validate_verdict_bands",
    "renormalize_weights",
    "compute_composite_score",
    "classify_verdict",
    "build_evidence_chain",
    "compute_consensus",
]
