"""Static agent registry with applicability lookup."""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from loguru import logger

from authenticity_system.config.agent_registry import DEFAULT_AGENT_DESCRIPTORS
from authenticity_system.data_management.schemas import (
    AgentDescriptor,
    AgentKind,
    AnalysisRequest,
    REQUEST_FIELDS,
)
from authenticity_system.errors import ConfigurationError


class AgentRegistry:
    """
    Read-only table of agent descriptors.

    The registry is validated once at construction and never mutated, so a
    single instance is shared safely by concurrent analyses.

    Invariants checked at construction:
    - At least one descriptor
    - Identifiers are unique
    - Required input fields name real AnalysisRequest fields
    - Weights sum to 1.0 within weight_tolerance

    Example:
        >>> registry = AgentRegistry()
        >>> [d.identifier for d in registry.applicable_agents(AnalysisRequest(text="hi"))]
        ['pattern', 'nlp', 'sayamML', 'bertTransformer']
    """

    DEFAULT_WEIGHT_TOLERANCE = 0.01

    def __init__(
        self,
        descriptors: Iterable[AgentDescriptor] = DEFAULT_AGENT_DESCRIPTORS,
        weight_tolerance: float = DEFAULT_WEIGHT_TOLERANCE,
    ):
        """
        Initialize and validate the registry.

        Args:
            descriptors: Agent descriptors in evidence order
            weight_tolerance: Allowed deviation of the weight sum from 1.0

        Raises:
            ConfigurationError: If any invariant fails
        """
        self._descriptors: Tuple[AgentDescriptor, ...] = tuple(descriptors)
        self.weight_tolerance = weight_tolerance
        self.logger = logger.bind(component="AgentRegistry")
        self._validate()
        self._by_id: Dict[str, AgentDescriptor] = {d.identifier: d for d in self._descriptors}
        self.logger.debug(
            f"Registry loaded with {len(self._descriptors)} agents",
            total_weight=round(self.total_weight(), 6),
        )

    def _validate(self) -> None:
        if not self._descriptors:
            raise ConfigurationError("agent registry is empty")

        seen: set[str] = set()
        for descriptor in self._descriptors:
            if descriptor.identifier in seen:
                raise ConfigurationError(f"duplicate agent identifier: {descriptor.identifier}")
            seen.add(descriptor.identifier)

            unknown = descriptor.required_input_fields - REQUEST_FIELDS
            if unknown:
                raise ConfigurationError(
                    f"agent {descriptor.identifier} requires unknown request field(s): {sorted(unknown)}"
                )
            if not descriptor.required_input_fields:
                raise ConfigurationError(f"agent {descriptor.identifier} declares no required input fields")

        total = self.total_weight()
        if abs(total - 1.0) > self.weight_tolerance:
            raise ConfigurationError(f"agent weights sum to {total:.4f}, expected 1.0")

    # ── Lookup ────────────────────────────────────────────────────────

    @property
    def descriptors(self) -> Tuple[AgentDescriptor, ...]:
        return self._descriptors

    def get(self, identifier: str) -> Optional[AgentDescriptor]:
        return self._by_id.get(identifier)

    def identifiers(self) -> List[str]:
        return [d.identifier for d in self._descriptors]

    def core_agents(self) -> List[AgentDescriptor]:
        return [d for d in self._descriptors if d.kind == AgentKind.CORE]

    def external_agents(self) -> List[AgentDescriptor]:
        return [d for d in self._descriptors if d.kind == AgentKind.EXTERNAL]

    def total_weight(self) -> float:
        return sum(d.weight for d in self._descriptors)

    def applicable_agents(
        self,
        request: AnalysisRequest,
        enabled: Optional[Iterable[str]] = None,
    ) -> List[AgentDescriptor]:
        """
        Descriptors whose required input fields are all present in the request.

        Pure and deterministic; preserves registry order.

        Args:
            request: Analysis request
            enabled: Optional set of identifiers allowed to run

        Returns:
            Applicable descriptors, empty only when the request has no usable fields
        """
        present = request.present_fields()
        allowed = set(enabled) if enabled is not None else None
        return [
            d
            for d in self._descriptors
            if d.required_input_fields <= present and (allowed is None or d.identifier in allowed)
        ]

    def __iter__(self) -> Iterator[AgentDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._by_id


__all__ = ["AgentRegistry"]
