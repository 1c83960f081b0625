"""Adapters over third-party classification services (external agents).

Every adapter normalizes its provider's output into AgentResult, retries at
most once, and degrades to a local fallback or abstains instead of raising.
"""

from authenticity_system.agents.adapters.base_adapter import (
    ExternalAgentAdapter,
    create_http_client,
)
from authenticity_system.agents.adapters.bert_adapter import BertAdapter, classify_generated_text
from authenticity_system.agents.adapters.sayam_adapter import SayamAdapter, extract_svm_features
from authenticity_system.agents.adapters.developer306_adapter import (
    Developer306Adapter,
    analyze_sentiment,
)
from authenticity_system.agents.adapters.cofacts_adapter import CofactsAdapter, extract_claims
from authenticity_system.agents.adapters.checkup_adapter import CheckupAdapter, scan_misinformation
from authenticity_system.agents.adapters.kitware_adapter import KitwareAdapter

__all__ = [
    "ExternalAgentAdapter",
    "create_http_client",
    "BertAdapter",
    "classify_generated_text",
    "SayamAdapter",
    "extract_svm_features",
    "Developer306Adapter",
    "analyze_sentiment",
    "CofactsAdapter",
    "extract_claims",
    "CheckupAdapter",
    "scan_misinformation",
    "KitwareAdapter",
]
