"""Authenticity orchestrator: concurrent fan-out to agents and deterministic fan-in.

One analysis:

1. Filter the registry to agents whose required request fields are present
   (and that are not disabled). No applicable agent means insufficient input.
2. Optionally health-check external services and route unhealthy ones straight to
   their fallback.
3. Start one task per external adapter, each bounded by its per-agent timeout,
   then run the heuristic detectors inline.
4. Wait for adapter tasks until the global deadline. Tasks still running are
   cancelled and awaited so no request outlives the analysis.
5. Renormalize weights over the agents that answered, compute the weighted
   composite score, band it into a verdict and assemble the evidence chain in
   registry order.

Agent failures never escape analyze(); they surface as missing agents.
"""

import asyncio
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import httpx
from pydantic import ValidationError

from authenticity_system.agents.adapters.base_adapter import (
    ExternalAgentAdapter,
    create_http_client,
)
from authenticity_system.agents.base_agent import BaseAgent
from authenticity_system.agents.detectors.base_detector import HeuristicDetector
from authenticity_system.agents.factory import create_default_agents
from authenticity_system.agents.registry import AgentRegistry
from authenticity_system.config.engine import EngineConfig
from authenticity_system.config.scoring import DEFAULT_VERDICT_BANDS, VerdictBand
from authenticity_system.data_management.schemas import (
    AbstentionReason,
    Abstained,
    AgentDescriptor,
    AgentKind,
    AgentOutcome,
    AgentResult,
    AnalysisMetadata,
    AnalysisRequest,
    Answered,
    CompositeResult,
    CompositeVerdict,
    Consensus,
    HealthStatus,
    ResultSource,
)
from authenticity_system.errors import (
    ConfigurationError,
    InvalidRequestError,
    InvariantViolation,
)
from authenticity_system.orchestration.aggregation import (
    build_evidence_chain,
    classify_verdict,
    compute_composite_score,
    compute_consensus,
    renormalize_weights,
    validate_verdict_bands,
)
from authenticity_system.utils.logging import analysis_context, get_structured_logger

RequestLike = Union[AnalysisRequest, Mapping[str, Any]]


class AuthenticityOrchestrator:
    """
    Dispatches one request to every applicable agent and aggregates the outcomes.

    Usage:
        async with AuthenticityOrchestrator() as orchestrator:
            result = await orchestrator.analyze({"text": "Great app!", "rating": 5})
            print(result.verdict, result.composite_score)

    Attributes:
        config: Engine configuration (timeouts, deadline, endpoints, flags)
        registry: Read-only agent registry
        agents: Agent implementations keyed by registry identifier
        verdict_bands: Validated composite verdict bands
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        registry: Optional[AgentRegistry] = None,
        agents: Optional[Mapping[str, BaseAgent]] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        verdict_bands: Sequence[VerdictBand] = DEFAULT_VERDICT_BANDS,
    ):
        """
        Build and validate the orchestrator.

        Args:
            config: Engine configuration (defaults to environment settings)
            registry: Agent registry (defaults to the built-in table)
            agents: Agent implementations (defaults to the built-in set)
            http_client: Shared client for the built-in adapters
            verdict_bands: Composite verdict bands

        Raises:
            ConfigurationError: If registry, agents, bands or timeouts are inconsistent
        """
        self.config = config or EngineConfig.from_settings()
        self.registry = registry or AgentRegistry()
        self.verdict_bands = validate_verdict_bands(verdict_bands)
        self._log = get_structured_logger("orchestrator")

        self._owns_client = False
        self.http_client = http_client
        if agents is None:
            if self.http_client is None:
                self.http_client = create_http_client(
                    user_agent=self.config.user_agent,
                    timeout=self.config.agent_timeout_seconds,
                )
                self._owns_client = True
            agents = create_default_agents(self.config, self.http_client)
        self.agents: Dict[str, BaseAgent] = dict(agents)

        self._validate_configuration()

    def _validate_configuration(self) -> None:
        for descriptor in self.registry:
            agent = self.agents.get(descriptor.identifier)
            if agent is None:
                raise ConfigurationError(f"no implementation for agent {descriptor.identifier}")
            if agent.agent_id != descriptor.identifier:
                raise ConfigurationError(
                    f"agent registered as {descriptor.identifier} reports id {agent.agent_id}"
                )
            expected = HeuristicDetector if descriptor.kind == AgentKind.CORE else ExternalAgentAdapter
            if agent.kind != descriptor.kind or not isinstance(agent, expected):
                raise ConfigurationError(
                    f"agent {descriptor.identifier} is not a {descriptor.kind.value} agent"
                )
            if descriptor.kind == AgentKind.EXTERNAL:
                timeout = self.config.timeout_for(descriptor.identifier)
                if timeout >= self.config.global_deadline_seconds:
                    raise ConfigurationError(
                        f"timeout for {descriptor.identifier} ({timeout}s) must be shorter "
                        f"than the global deadline ({self.config.global_deadline_seconds}s)"
                    )

        unknown = set(self.config.disabled_agents) - set(self.registry.identifiers())
        if unknown:
            raise ConfigurationError(f"cannot disable unknown agent(s): {sorted(unknown)}")

    # ── Lifecycle ─────────────────────────────────────────────────────

    async def aclose(self) -> None:
        """Close the shared HTTP client and any adapter-owned clients."""
        for agent in self.agents.values():
            if isinstance(agent, ExternalAgentAdapter):
                await agent.aclose()
        if self._owns_client and self.http_client is not None:
            await self.http_client.aclose()
            self.http_client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    # ── Analysis ──────────────────────────────────────────────────────

    def enabled_agents(self) -> List[str]:
        return [i for i in self.registry.identifiers() if self.config.is_enabled(i)]

    async def analyze(self, request: RequestLike) -> CompositeResult:
        """
        Score one piece of content.

        Args:
            request: AnalysisRequest or a plain mapping with camelCase keys

        Returns:
            CompositeResult; an UNCERTAIN sentinel when no agent applies or answers

        Raises:
            InvalidRequestError: If the request is not a mapping, or no usable field
                survives validation
        """
        request = self._coerce_request(request)
        with analysis_context():
            return await self._analyze(request)

    async def _analyze(self, request: AnalysisRequest) -> CompositeResult:
        loop = asyncio.get_running_loop()
        started = loop.time()
        deadline = started + self.config.global_deadline_seconds

        applicable = self.registry.applicable_agents(request, self.enabled_agents())
        applicable_ids = {d.identifier for d in applicable}
        not_applicable = [i for i in self.registry.identifiers() if i not in applicable_ids]

        if not applicable:
            self._log.info("insufficient_input", present_fields=sorted(request.present_fields()))
            return self._insufficient_input()

        self._log.info(
            "analysis_started",
            applicable=[d.identifier for d in applicable],
            not_applicable=not_applicable,
        )

        external = [d for d in applicable if d.kind == AgentKind.EXTERNAL]
        core = [d for d in applicable if d.kind == AgentKind.CORE]

        availability: Dict[str, bool] = {}
        if self.config.precheck_health and external:
            availability = await self._precheck(external)

        tasks: Dict[asyncio.Task, str] = {
            asyncio.create_task(
                self._run_adapter(d, request, availability.get(d.identifier, True)),
                name=f"agent:{d.identifier}",
            ): d.identifier
            for d in external
        }

        outcomes: Dict[str, AgentOutcome] = {}
        try:
            for d in core:
                outcomes[d.identifier] = self._run_detector(d, request)

            if tasks:
                remaining = max(0.0, deadline - loop.time())
                done, pending = await asyncio.wait(tasks.keys(), timeout=remaining)
                for task in done:
                    outcomes[tasks[task]] = self._task_outcome(task, tasks[task])
                if pending:
                    for task in pending:
                        task.cancel()
                    await asyncio.gather(*pending, return_exceptions=True)
                    for task in pending:
                        agent_id = tasks[task]
                        outcomes[agent_id] = Abstained(
                            agent_id,
                            AbstentionReason.DEADLINE_EXCEEDED,
                            f"cancelled at the {self.config.global_deadline_seconds:g}s global deadline",
                        )
                    self._log.warning("deadline_exceeded", cancelled=sorted(tasks[t] for t in pending))
        finally:
            # Caller cancellation must not leak in-flight adapter calls
            leftover = [t for t in tasks if not t.done()]
            for task in leftover:
                task.cancel()
            if leftover:
                await asyncio.gather(*leftover, return_exceptions=True)

        result = self._aggregate(applicable, outcomes, not_applicable)
        self._log.info(
            "analysis_complete",
            composite_score=round(result.composite_score, 2),
            verdict=result.verdict.value,
            missing=result.missing_agents,
            duration_ms=round((loop.time() - started) * 1000, 1),
        )
        return result

    def _run_detector(self, descriptor: AgentDescriptor, request: AnalysisRequest) -> AgentOutcome:
        detector = self.agents[descriptor.identifier]
        try:
            return detector.evaluate(request)
        except Exception as e:
            self._log.error("detector_failed", agent=descriptor.identifier, error=str(e))
            return Abstained(descriptor.identifier, AbstentionReason.FAILED, str(e))

    async def _run_adapter(
        self,
        descriptor: AgentDescriptor,
        request: AnalysisRequest,
        primary_available: bool,
    ) -> AgentOutcome:
        adapter = self.agents[descriptor.identifier]
        timeout = self.config.timeout_for(descriptor.identifier)
        try:
            return await asyncio.wait_for(
                adapter.evaluate(request, timeout, primary_available),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            return Abstained(
                descriptor.identifier,
                AbstentionReason.TIMED_OUT,
                f"no answer within {timeout:g}s",
            )
        except Exception as e:
            self._log.error("adapter_failed", agent=descriptor.identifier, error=str(e))
            return Abstained(descriptor.identifier, AbstentionReason.FAILED, str(e))

    def _task_outcome(self, task: asyncio.Task, agent_id: str) -> AgentOutcome:
        if task.cancelled():
            return Abstained(agent_id, AbstentionReason.DEADLINE_EXCEEDED, "cancelled")
        error = task.exception()
        if error is not None:
            return Abstained(agent_id, AbstentionReason.FAILED, str(error))
        return task.result()

    async def _precheck(self, external: Sequence[AgentDescriptor]) -> Dict[str, bool]:
        statuses = await asyncio.gather(
            *(
                self.agents[d.identifier].check_health(self.config.health_timeout_seconds)
                for d in external
            ),
            return_exceptions=True,
        )
        availability: Dict[str, bool] = {}
        for d, status in zip(external, statuses):
            available = isinstance(status, HealthStatus) and status.available
            availability[d.identifier] = available
            if not available:
                self._log.info("precheck_unhealthy", agent=d.identifier)
        return availability

    # ── Aggregation ───────────────────────────────────────────────────

    def _accept(self, agent_id: str, outcome: Optional[AgentOutcome]) -> AgentOutcome:
        """Re-check an Answered outcome against the AgentResult invariants."""
        if outcome is None:
            return Abstained(agent_id, AbstentionReason.FAILED, "no outcome recorded")
        if isinstance(outcome, Answered):
            try:
                if outcome.agent_id != agent_id:
                    raise InvariantViolation(agent_id, f"outcome attributed to {outcome.agent_id}")
                self.agents[agent_id].validate_result(outcome.result)
            except InvariantViolation as e:
                self._log.warning("invariant_violation", agent=agent_id, error=str(e))
                return Abstained(agent_id, AbstentionReason.INVALID_RESULT, str(e))
        return outcome

    def _aggregate(
        self,
        applicable: Sequence[AgentDescriptor],
        outcomes: Mapping[str, AgentOutcome],
        not_applicable: List[str],
    ) -> CompositeResult:
        answered: Dict[str, AgentResult] = {}
        abstentions: Dict[str, AbstentionReason] = {}
        for d in applicable:
            outcome = self._accept(d.identifier, outcomes.get(d.identifier))
            if isinstance(outcome, Answered):
                answered[d.identifier] = outcome.result
            else:
                abstentions[d.identifier] = outcome.reason
                self._log.info(
                    "agent_abstained",
                    agent=d.identifier,
                    reason=outcome.reason.value,
                    detail=outcome.detail,
                )

        weights = renormalize_weights(applicable, answered)
        if weights:
            score = compute_composite_score(applicable, answered, weights)
            verdict = classify_verdict(score, self.verdict_bands)
        else:
            score = 0.0
            verdict = CompositeVerdict.UNCERTAIN

        by_id = {d.identifier: d for d in applicable}
        return CompositeResult(
            composite_score=score,
            verdict=verdict,
            agent_results={d.identifier: answered.get(d.identifier) for d in applicable},
            evidence_chain=build_evidence_chain(applicable, answered, weights),
            missing_agents=[d.identifier for d in applicable if d.identifier not in answered],
            effective_weights=weights,
            not_applicable_agents=not_applicable,
            abstentions=abstentions,
            consensus=compute_consensus(answered),
            metadata=AnalysisMetadata(
                total_agents_run=len(answered),
                core_agents=sum(1 for i in answered if by_id[i].kind == AgentKind.CORE),
                external_agents=sum(1 for i in answered if by_id[i].kind == AgentKind.EXTERNAL),
                fallback_agents=sum(1 for r in answered.values() if r.source == ResultSource.FALLBACK),
            ),
        )

    def _insufficient_input(self) -> CompositeResult:
        identifiers = self.registry.identifiers()
        return CompositeResult(
            composite_score=0.0,
            verdict=CompositeVerdict.UNCERTAIN,
            missing_agents=identifiers,
            not_applicable_agents=identifiers,
            abstentions={
                i: (
                    AbstentionReason.NOT_APPLICABLE
                    if self.config.is_enabled(i)
                    else AbstentionReason.DISABLED
                )
                for i in identifiers
            },
            consensus=Consensus(description="Insufficient input: no agent could analyze the request"),
        )

    def _coerce_request(self, request: RequestLike) -> AnalysisRequest:
        """
        Validate a mapping into an AnalysisRequest.

        Fields that fail validation are dropped and the rest are kept, so a bad
        field only costs the agents that need it. The request is rejected only
        when nothing usable is left.
        """
        if isinstance(request, AnalysisRequest):
            return request
        if not isinstance(request, Mapping):
            raise InvalidRequestError(f"unsupported request type: {type(request).__name__}")

        payload = dict(request)
        try:
            return AnalysisRequest.model_validate(payload)
        except ValidationError as e:
            invalid = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
            invalid |= {
                name for name, info in AnalysisRequest.model_fields.items() if info.alias in invalid
            }
            salvaged = {k: v for k, v in payload.items() if k not in invalid}
            try:
                coerced = AnalysisRequest.model_validate(salvaged)
            except ValidationError:
                raise InvalidRequestError(f"invalid analysis request: {e}") from e
            if not coerced.present_fields():
                raise InvalidRequestError(f"invalid analysis request: {e}") from e
            self._log.warning("invalid_fields_dropped", fields=sorted(invalid & set(payload)))
            return coerced

    # ── Supplemental operations ───────────────────────────────────────

    async def analyze_batch(
        self,
        requests: Iterable[RequestLike],
        concurrency: int = 5,
    ) -> List[CompositeResult]:
        """
        Analyze several requests with bounded concurrency, preserving order.

        All requests are validated before any analysis starts.

        Raises:
            InvalidRequestError: If any request fails validation
        """
        validated = [self._coerce_request(r) for r in requests]
        semaphore = asyncio.Semaphore(max(1, concurrency))

        async def analyze_with_semaphore(request: AnalysisRequest) -> CompositeResult:
            async with semaphore:
                return await self.analyze(request)

        return list(await asyncio.gather(*(analyze_with_semaphore(r) for r in validated)))

    async def check_health(self) -> Dict[str, HealthStatus]:
        """Health of every enabled external adapter, keyed by identifier in registry order. Never raises."""
        external = [
            d for d in self.registry.external_agents() if self.config.is_enabled(d.identifier)
        ]
        statuses = await asyncio.gather(
            *(
                self.agents[d.identifier].check_health(self.config.health_timeout_seconds)
                for d in external
            ),
            return_exceptions=True,
        )
        report: Dict[str, HealthStatus] = {}
        for d, status in zip(external, statuses):
            if not isinstance(status, HealthStatus):
                self._log.warning("health_check_error", agent=d.identifier, error=repr(status))
                endpoint = getattr(self.agents[d.identifier], "endpoint", "")
                status = HealthStatus(d.identifier, False, endpoint, f"{type(status).__name__}: {status}")
            report[d.identifier] = status
        return report


__all__ = ["AuthenticityOrchestrator"]
