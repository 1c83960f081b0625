"""Agent registry table.

Single source of truth for agent identifiers, display names, nominal weights
and required request fields. Declaration order is the order evidence appears in
the composite result.

Weights are hand-tuned and sum to 1.0:
- Core heuristics: 0.65 (pattern 0.15, nlp 0.20, behavior 0.10, network 0.10,
  duplicate 0.10)
- External adapters: 0.35 (bertTransformer 0.10, sayamML 0.08,
  developer306 0.07, cofacts 0.05, checkup 0.03, kitware 0.02)
"""

from typing import Tuple

from authenticity_system.data_management.schemas.agent_schema import (
    AgentDescriptor,
    AgentKind,
)

DEFAULT_AGENT_DESCRIPTORS: Tuple[AgentDescriptor, ...] = (
    # Core heuristics
    AgentDescriptor(
        identifier="pattern",
        display_name="Pattern Analysis",
        weight=0.15,
        kind=AgentKind.CORE,
        required_input_fields=frozenset({"text"}),
        description="Keyword and regex density: AI self-reference, superlatives, spam",
    ),
    AgentDescriptor(
        identifier="nlp",
        display_name="NLP Analysis",
        weight=0.20,
        kind=AgentKind.CORE,
        required_input_fields=frozenset({"text"}),
        description="Linguistic heuristics: generated-text phrasing, templates, uniformity",
    ),
    AgentDescriptor(
        identifier="behavior",
        display_name="Behavioral Signals",
        weight=0.10,
        kind=AgentKind.CORE,
        required_input_fields=frozenset({"userContext"}),
        description="Reviewer account age, volume and posting bursts",
    ),
    AgentDescriptor(
        identifier="network",
        display_name="Network Analysis",
        weight=0.10,
        kind=AgentKind.CORE,
        required_input_fields=frozenset({"userContext"}),
        description="Shared devices, shared IPs and coordinated account clusters",
    ),
    AgentDescriptor(
        identifier="duplicate",
        display_name="Duplicate Detection",
        weight=0.10,
        kind=AgentKind.CORE,
        required_input_fields=frozenset({"text", "referenceTexts"}),
        description="Token-set similarity against a reference set of reviews",
    ),
    # External adapters
    AgentDescriptor(
        identifier="sayamML",
        display_name="SayamAlt ML Classifier",
        weight=0.08,
        kind=AgentKind.EXTERNAL,
        required_input_fields=frozenset({"text"}),
        description="TF-IDF + SVM fake review classifier",
    ),
    AgentDescriptor(
        identifier="developer306",
        display_name="Developer306 Sentiment",
        weight=0.07,
        kind=AgentKind.EXTERNAL,
        required_input_fields=frozenset({"text", "rating"}),
        description="Sentiment/rating mismatch random forest classifier",
    ),
    AgentDescriptor(
        identifier="bertTransformer",
        display_name="BERT Transformer",
        weight=0.10,
        kind=AgentKind.EXTERNAL,
        required_input_fields=frozenset({"text"}),
        description="Transformer classifier for computer-generated text",
    ),
    AgentDescriptor(
        identifier="cofacts",
        display_name="Cofacts Community",
        weight=0.05,
        kind=AgentKind.EXTERNAL,
        required_input_fields=frozenset({"appDescription"}),
        description="Crowd-sourced fact-check consensus on description claims",
    ),
    AgentDescriptor(
        identifier="checkup",
        display_name="Check-up Scraper",
        weight=0.03,
        kind=AgentKind.EXTERNAL,
        required_input_fields=frozenset({"sourceUrl"}),
        description="Page scraper scoring misinformation claims",
    ),
    AgentDescriptor(
        identifier="kitware",
        display_name="Kitware OSINT",
        weight=0.02,
        kind=AgentKind.EXTERNAL,
        required_input_fields=frozenset({"appMedia"}),
        description="Media forensics: manipulation and deepfake detection",
    ),
)

__all__ = ["DEFAULT_AGENT_DESCRIPTORS"]
