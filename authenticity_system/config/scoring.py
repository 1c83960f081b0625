"""Scoring configuration: composite verdict bands and per-agent split points.

Composite verdict bands (lower bound inclusive):
- 0  <= score < 30: LIKELY_GENUINE
- 30 <= score < 70: SUSPICIOUS
- 70 <= score:      HIGHLY_LIKELY_FAKE

Bands are contiguous from 0 and strictly increasing, so every score in
[0, 100] maps to exactly one verdict and a higher score never maps to a less
severe verdict.
"""

from dataclasses import dataclass
from typing import Tuple

from authenticity_system.data_management.schemas.composite_schema import CompositeVerdict


@dataclass(frozen=True)
class VerdictBand:
    """A composite verdict that applies from lower_bound upward."""

    lower_bound: float
    verdict: CompositeVerdict


DEFAULT_VERDICT_BANDS: Tuple[VerdictBand, ...] = (
    VerdictBand(0.0, CompositeVerdict.LIKELY_GENUINE),
    VerdictBand(30.0, CompositeVerdict.SUSPICIOUS),
    VerdictBand(70.0, CompositeVerdict.HIGHLY_LIKELY_FAKE),
)

# Per-agent verdict split points on the 0-100 confidence scale
AGENT_FAKE_THRESHOLD = 70.0
AGENT_SUSPICIOUS_THRESHOLD = 40.0

# Consensus is strong when this share of agents agree either way
STRONG_CONSENSUS_HIGH = 0.75
STRONG_CONSENSUS_LOW = 0.25

# Fallback results are compressed toward the midpoint: 50 + (c - 50) * factor
FALLBACK_CONFIDENCE_FACTOR = 0.6

# Adapter retry budget as fractions of the per-agent timeout.
# The retry timeout is strictly shorter than the first attempt.
PRIMARY_ATTEMPT_FRACTION = 0.55
RETRY_ATTEMPT_FRACTION = 0.35

# Input caps keeping heuristic work bounded
MAX_ANALYZED_CHARS = 10_000
MAX_REFERENCE_TEXTS = 200

__all__ = [
    "VerdictBand",
    "DEFAULT_VERDICT_BANDS",
    "AGENT_FAKE_THRESHOLD",
    "AGENT_SUSPICIOUS_THRESHOLD",
    "STRONG_CONSENSUS_HIGH",
    "STRONG_CONSENSUS_LOW",
    "FALLBACK_CONFIDENCE_FACTOR",
    "PRIMARY_ATTEMPT_FRACTION",
    "RETRY_ATTEMPT_FRACTION",
    "MAX_ANALYZED_CHARS",
    "MAX_REFERENCE_TEXTS",
]
