"""Local heuristic detectors (core agents).

Detectors are pure and always available. Each exposes detect() returning an
AgentResult or None, and evaluate() returning an Answered/Abstained outcome.
"""

from authenticity_system.agents.detectors.base_detector import HeuristicDetector
from authenticity_system.agents.detectors.pattern_detector import PatternDetector
from authenticity_system.agents.detectors.nlp_detector import NlpDetector
from authenticity_system.agents.detectors.behavior_detector import (
    BehaviorDetector,
    ReviewerProfile,
    extract_profile,
)
from authenticity_system.agents.detectors.network_detector import NetworkDetector
from authenticity_system.agents.detectors.duplicate_detector import DuplicateDetector

__all__ = [
    "HeuristicDetector",
    "PatternDetector",
    "NlpDetector",
    "BehaviorDetector",
    "ReviewerProfile",
    "extract_profile",
    "NetworkDetector",
    "DuplicateDetector",
]
