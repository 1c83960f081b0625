"""Application settings using Pydantic BaseSettings for environment variable management."""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """
    Global engine settings loaded from environment variables.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log output format (json for production, console for dev)
        global_deadline_seconds: Hard bound on one analysis fan-in
        agent_timeout_seconds: Default per-agent timeout for external adapters
        agent_timeouts: Per-agent timeout overrides keyed by agent identifier
        health_timeout_seconds: Timeout for adapter health checks
        disabled_agents: Agent identifiers that are never invoked
        precheck_health: Check external services before dispatching to them
        user_agent: User-Agent header sent to third-party services
        sayam_ml_endpoint: SayamAlt ML classifier endpoint
        developer306_endpoint: Developer306 sentiment classifier endpoint
        bert_endpoint: BERT transformer classifier endpoint
        cofacts_endpoint: Cofacts GraphQL endpoint
        checkup_endpoint: Check-up scraper endpoint
        kitware_endpoint: Kitware media forensics endpoint
    """

    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="json",
        description="Log output format: json or console"
    )
    global_deadline_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Global deadline for collecting agent outcomes"
    )
    agent_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Default timeout for one external adapter call"
    )
    agent_timeouts: dict[str, float] = Field(
        default_factory=lambda: {"cofacts": 5.0, "checkup": 8.0, "kitware": 15.0},
        description="Per-agent timeout overrides (JSON object in the environment)"
    )
    health_timeout_seconds: float = Field(
        default=3.0,
        gt=0,
        description="Timeout for adapter health checks"
    )
    disabled_agents: list[str] = Field(
        default_factory=list,
        description="Agent identifiers excluded from every analysis"
    )
    precheck_health: bool = Field(
        default=False,
        description="Check external services before dispatch and skip unhealthy ones"
    )
    user_agent: str = Field(
        default="authenticity_system/0.1.0",
        description="User-Agent header for outbound requests"
    )
    sayam_ml_endpoint: str = Field(
        default="http://localhost:5001/predict",
        description="SayamAlt ML classifier endpoint"
    )
    developer306_endpoint: str = Field(
        default="http://localhost:5002/analyze",
        description="Developer306 sentiment classifier endpoint"
    )
    bert_endpoint: str = Field(
        default="http://localhost:5003/classify",
        description="BERT transformer classifier endpoint"
    )
    cofacts_endpoint: str = Field(
        default="https://cofacts-api.g0v.tw/graphql",
        description="Cofacts community fact-check GraphQL endpoint"
    )
    checkup_endpoint: str = Field(
        default="http://localhost:5004/scrape",
        description="Check-up scraper endpoint"
    )
    kitware_endpoint: str = Field(
        default="http://localhost:5005/analyze",
        description="Kitware media forensics endpoint"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton instance - import this throughout the application
settings = Settings()

__all__ = ["Settings", "settings"]
