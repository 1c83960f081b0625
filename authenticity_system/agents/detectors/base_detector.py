"""Base class for local, deterministic heuristic detectors."""

from abc import abstractmethod
from typing import Any, List, Optional

from authenticity_system.agents.base_agent import BaseAgent
from authenticity_system.config.scoring import (
    AGENT_FAKE_THRESHOLD,
    AGENT_SUSPICIOUS_THRESHOLD,
)
from authenticity_system.data_management.schemas import (
    AbstentionReason,
    Abstained,
    AgentKind,
    AgentOutcome,
    AgentResult,
    AnalysisRequest,
    ResultSource,
    verdict_from_thresholds,
)


class HeuristicDetector(BaseAgent):
    """
    Pure, always-available core agent.

    Subclasses implement detect(): no I/O, no randomness, bounded work. The
    evaluate() boundary converts any exception into an abstention.
    """

    KIND = AgentKind.CORE

    FAKE_THRESHOLD = AGENT_FAKE_THRESHOLD
    SUSPICIOUS_THRESHOLD = AGENT_SUSPICIOUS_THRESHOLD

    @abstractmethod
    def detect(self, request: AnalysisRequest) -> Optional[AgentResult]:
        """Score the request, or return None when there is nothing to judge."""
        pass

    def evaluate(self, request: AnalysisRequest) -> AgentOutcome:
        """Run detect() and wrap the outcome. Never raises."""
        try:
            result = self.detect(request)
        except Exception as e:
            self.log.exception("detector_failed", error=str(e), error_type=type(e).__name__)
            return Abstained(self.agent_id, AbstentionReason.FAILED, f"{type(e).__name__}: {e}")
        return self.to_outcome(result)

    def build_result(
        self,
        score: float,
        evidence: List[str],
        raw_score: Any = None,
    ) -> AgentResult:
        """Clamp a summed score to 0-100 and attach the thresholded verdict."""
        confidence = float(max(0.0, min(score, 100.0)))
        return AgentResult(
            agent_name=self.agent_id,
            confidence=confidence,
            verdict=verdict_from_thresholds(
                confidence, self.FAKE_THRESHOLD, self.SUSPICIOUS_THRESHOLD
            ),
            evidence=evidence,
            raw_score=raw_score,
            source=ResultSource.PRIMARY,
        )


__all__ = ["HeuristicDetector"]
