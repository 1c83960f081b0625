"""Abstract base class for all authenticity agents."""

import math
from abc import ABC, abstractmethod
from typing import Any, Optional

from authenticity_system.data_management.schemas import (
    AbstentionReason,
    Abstained,
    AgentKind,
    AgentOutcome,
    AgentResult,
    Answered,
)
from authenticity_system.errors import InvariantViolation
from authenticity_system.utils.logging import get_agent_logger


class BaseAgent(ABC):
    """
    Common interface for heuristic detectors and external adapters.

    Every agent is keyed by a stable registry identifier (AGENT_ID) and reports
    through the canonical AgentResult. The boundary methods of subclasses never
    raise: failures become Abstained outcomes so one misbehaving agent cannot
    take down an analysis.

    Attributes:
        agent_id: Registry identifier (e.g. "pattern", "bertTransformer")
        name: Human-readable agent name
        description: Brief description of what the agent looks at
        log: Structured logger bound with the agent identifier
    """

    AGENT_ID: str = ""
    KIND: AgentKind = AgentKind.CORE

    def __init__(self, name: str = "", description: str = ""):
        if not self.AGENT_ID:
            raise TypeError(f"{type(self).__name__} must define AGENT_ID")
        self.agent_id = self.AGENT_ID
        self.name = name or self.AGENT_ID
        self.description = description
        self.log = get_agent_logger(self.agent_id, self.KIND)

    @property
    def kind(self) -> AgentKind:
        return self.KIND

    @abstractmethod
    def get_capabilities(self) -> list[str]:
        """
        Return list of agent capabilities.

        Used by the CLI agent listing. Capabilities are short identifiers of
        the signals the agent inspects.
        """
        pass

    def validate_result(self, result: Any) -> AgentResult:
        """
        Check a produced result against the AgentResult invariants.

        Pydantic enforces these at construction, but results built with
        model_construct() or returned by a subclass as the wrong type slip past
        that, so the boundary re-checks.

        Raises:
            InvariantViolation: If the result is unusable
        """
        if not isinstance(result, AgentResult):
            raise InvariantViolation(self.agent_id, f"expected AgentResult, got {type(result).__name__}")
        if result.agent_name != self.agent_id:
            raise InvariantViolation(
                self.agent_id, f"result attributed to {result.agent_name!r}"
            )
        confidence = result.confidence
        if not isinstance(confidence, (int, float)) or math.isnan(confidence) or not 0.0 <= confidence <= 100.0:
            raise InvariantViolation(self.agent_id, f"confidence {confidence!r} outside [0, 100]")
        if result.verdict is None:
            raise InvariantViolation(self.agent_id, "verdict missing")
        return result

    def to_outcome(self, result: Optional[AgentResult]) -> AgentOutcome:
        """Wrap an agent's return value in the Answered/Abstained variant."""
        if result is None:
            return Abstained(self.agent_id, AbstentionReason.NO_SIGNAL, "agent reported no signal")
        try:
            return Answered(self.validate_result(result))
        except InvariantViolation as e:
            self.log.warning("invariant_violation", error=str(e))
            return Abstained(self.agent_id, AbstentionReason.INVALID_RESULT, str(e))


__all__ = ["BaseAgent"]
