"""Construction of the default agent set."""

from typing import Dict, Optional

import httpx

from authenticity_system.agents.adapters import (
    BertAdapter,
    CheckupAdapter,
    CofactsAdapter,
    Developer306Adapter,
    KitwareAdapter,
    SayamAdapter,
)
from authenticity_system.agents.base_agent import BaseAgent
from authenticity_system.agents.detectors import (
    BehaviorDetector,
    DuplicateDetector,
    NetworkDetector,
    NlpDetector,
    PatternDetector,
)
from authenticity_system.config.engine import EngineConfig
from authenticity_system.errors import ConfigurationError

DETECTOR_CLASSES = (
    PatternDetector,
    NlpDetector,
    BehaviorDetector,
    NetworkDetector,
    DuplicateDetector,
)

ADAPTER_CLASSES = (
    SayamAdapter,
    Developer306Adapter,
    BertAdapter,
    CofactsAdapter,
    CheckupAdapter,
    KitwareAdapter,
)


def create_default_agents(
    config: EngineConfig,
    http_client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, BaseAgent]:
    """
    Instantiate every built-in detector and adapter keyed by identifier.

    Args:
        config: Engine configuration supplying adapter endpoints
        http_client: Shared client handed to every adapter

    Raises:
        ConfigurationError: If an adapter has no configured endpoint
    """
    agents: Dict[str, BaseAgent] = {cls.AGENT_ID: cls() for cls in DETECTOR_CLASSES}
    for cls in ADAPTER_CLASSES:
        endpoint = config.endpoints.get(cls.AGENT_ID)
        if not endpoint:
            raise ConfigurationError(f"no endpoint configured for {cls.AGENT_ID}")
        agents[cls.AGENT_ID] = cls(endpoint, http_client)
    return agents


__all__ = ["create_default_agents", "DETECTOR_CLASSES", "ADAPTER_CLASSES"]
