"""Authenticity agents: heuristic detectors, external adapters and the registry."""

from authenticity_system.agents.base_agent import BaseAgent
from authenticity_system.agents.registry import AgentRegistry

__all__ = ["BaseAgent", "AgentRegistry"]
