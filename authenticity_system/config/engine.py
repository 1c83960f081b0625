"""Construction-time engine configuration.

EngineConfig is the one object the orchestrator is built from: endpoints,
timeouts, deadline and enable/disable flags. Settings (environment) is only
one way to produce it; tests build it directly.
"""

from typing import Optional

from pydantic import BaseModel, Field

from authenticity_system.config.settings import Settings, settings as default_settings


class EngineConfig(BaseModel):
    """
    Orchestrator configuration.

    Attributes:
        global_deadline_seconds: Hard bound on collecting agent outcomes
        agent_timeout_seconds: Default per-agent timeout
        agent_timeouts: Per-agent overrides keyed by agent identifier
        health_timeout_seconds: Timeout for health checks
        disabled_agents: Identifiers never dispatched
        precheck_health: Check external services before dispatch
        endpoints: Service URL per external agent identifier
        user_agent: User-Agent header for outbound requests
    """

    model_config = {"frozen": True}

    global_deadline_seconds: float = Field(20.0, gt=0)
    agent_timeout_seconds: float = Field(10.0, gt=0)
    agent_timeouts: dict[str, float] = Field(default_factory=dict)
    health_timeout_seconds: float = Field(3.0, gt=0)
    disabled_agents: frozenset[str] = Field(default_factory=frozenset)
    precheck_health: bool = False
    endpoints: dict[str, str] = Field(default_factory=dict)
    user_agent: str = "authenticity_system/0.1.0"

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "EngineConfig":
        """Build the engine configuration from environment settings."""
        s = source or default_settings
        return cls(
            global_deadline_seconds=s.global_deadline_seconds,
            agent_timeout_seconds=s.agent_timeout_seconds,
            agent_timeouts=dict(s.agent_timeouts),
            health_timeout_seconds=s.health_timeout_seconds,
            disabled_agents=frozenset(s.disabled_agents),
            precheck_health=s.precheck_health,
            endpoints={
                "sayamML": s.sayam_ml_endpoint,
                "developer306": s.developer306_endpoint,
                "bertTransformer": s.bert_endpoint,
                "cofacts": s.cofacts_endpoint,
                "checkup": s.checkup_endpoint,
                "kitware": s.kitware_endpoint,
            },
            user_agent=s.user_agent,
        )

    def timeout_for(self, agent_id: str) -> float:
        return self.agent_timeouts.get(agent_id, self.agent_timeout_seconds)

    def is_enabled(self, agent_id: str) -> bool:
        return agent_id not in self.disabled_agents


__all__ = ["EngineConfig"]
