"""Tests for the agent registry.

Tests cover:
- Default table (weights, ordering, kinds)
- Construction-time validation
- Applicability filtering
"""

import pytest

from authenticity_system.agents.registry import AgentRegistry
from authenticity_system.config.agent_registry import DEFAULT_AGENT_DESCRIPTORS
from authenticity_system.data_management.schemas import (
    AgentDescriptor,
    AgentKind,
    AnalysisRequest,
    AppMedia,
)
from authenticity_system.errors import ConfigurationError


def _descriptor(identifier: str, weight: float, fields=("text",), kind=AgentKind.CORE) -> AgentDescriptor:
    return AgentDescriptor(
        identifier=identifier,
        display_name=identifier.title(),
        weight=weight,
        kind=kind,
        required_input_fields=frozenset(fields),
    )


class TestDefaultRegistry:
    """Test the built-in agent table."""

    def test_weights_sum_to_one(self):
        registry = AgentRegistry()
        assert registry.total_weight() == pytest.approx(1.0)

    def test_identifiers_in_declaration_order(self):
        assert AgentRegistry().identifiers() == [
            "pattern",
            "nlp",
            "behavior",
            "network",
            "duplicate",
            "sayamML",
            "developer306",
            "bertTransformer",
            "cofacts",
            "checkup",
            "kitware",
        ]

    def test_core_and_external_split(self):
        registry = AgentRegistry()
        assert len(registry.core_agents()) == 5
        assert len(registry.external_agents()) == 6
        assert sum(d.weight for d in registry.core_agents()) == pytest.approx(0.65)

    def test_lookup(self):
        registry = AgentRegistry()
        assert "cofacts" in registry
        assert "missing" not in registry
        assert registry.get("cofacts").required_input_fields == {"appDescription"}
        assert registry.get("missing") is None
        assert len(registry) == len(DEFAULT_AGENT_DESCRIPTORS)


class TestValidation:
    """Test invariants enforced at construction."""

    def test_empty_registry_rejected(self):
        with pytest.raises(ConfigurationError, match="empty"):
            AgentRegistry([])

    def test_weights_not_summing_to_one_rejected(self):
        with pytest.raises(ConfigurationError, match="sum"):
            AgentRegistry([_descriptor("a", 0.5), _descriptor("b", 0.3)])

    def test_weight_sum_within_tolerance_accepted(self):
        registry = AgentRegistry([_descriptor("a", 0.5), _descriptor("b", 0.495)])
        assert len(registry) == 2

    def test_duplicate_identifier_rejected(self):
        with pytest.raises(ConfigurationError, match="duplicate"):
            AgentRegistry([_descriptor("a", 0.5), _descriptor("a", 0.5)])

    def test_unknown_required_field_rejected(self):
        with pytest.raises(ConfigurationError, match="unknown request field"):
            AgentRegistry([_descriptor("a", 1.0, fields=("stars",))])

    def test_no_required_fields_rejected(self):
        with pytest.raises(ConfigurationError, match="no required input fields"):
            AgentRegistry([_descriptor("a", 1.0, fields=())])


class TestApplicability:
    """Test applicable_agents filtering."""

    def test_text_only(self):
        applicable = AgentRegistry().applicable_agents(AnalysisRequest(text="hello there"))
        assert [d.identifier for d in applicable] == ["pattern", "nlp", "sayamML", "bertTransformer"]

    def test_text_and_rating_adds_developer306(self):
        applicable = AgentRegistry().applicable_agents(AnalysisRequest(text="hello", rating=4))
        assert "developer306" in [d.identifier for d in applicable]

    def test_user_context_only(self):
        request = AnalysisRequest(user_context={"reviewCount": 3})
        assert [d.identifier for d in AgentRegistry().applicable_agents(request)] == [
            "behavior",
            "network",
        ]

    def test_every_field_present(self):
        request = AnalysisRequest(
            text="hello",
            rating=5,
            user_context={"reviewCount": 1},
            app_description="Best app",
            source_url="https://example.com",
            app_media=AppMedia(icon_url="https://cdn.test/icon.png"),
            reference_texts=["other"],
        )
        assert len(AgentRegistry().applicable_agents(request)) == 11

    def test_empty_request(self):
        assert AgentRegistry().applicable_agents(AnalysisRequest()) == []

    def test_enabled_filter(self):
        applicable = AgentRegistry().applicable_agents(
            AnalysisRequest(text="hello"), enabled=["pattern", "bertTransformer", "kitware"]
        )
        assert [d.identifier for d in applicable] == ["pattern", "bertTransformer"]

    def test_applicability_is_deterministic(self):
        registry = AgentRegistry()
        request = AnalysisRequest(text="hello", rating=2, source_url="https://example.com")
        assert registry.applicable_agents(request) == registry.applicable_agents(request)
