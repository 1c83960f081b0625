"""Adapter for the Check-up page scraper and misinformation scorer.

Wire format:
    POST {endpoint}  {"url": ..., "scrape_ads": true, "classify_theme": true,
                      "extract_claims": true, "depth": 1}
    -> {"has_misinfo": bool, "disinfo_score": 0-100,
        "flagged_claims": [{"text": ..., "category": ...}], "ads": [...]}

Fallback: weighted misinformation pattern scan of the claim text supplied with
the URL (appDescription, else text). No page is fetched locally.
"""

import re
from typing import Any, Optional

from authenticity_system.agents.adapters.base_adapter import ExternalAgentAdapter
from authenticity_system.config.detection_patterns import MISINFORMATION_PATTERNS
from authenticity_system.data_management.schemas import (
    AgentResult,
    AnalysisRequest,
    ResultSource,
)
from authenticity_system.errors import MalformedResponseError
from authenticity_system.utils.text import clip

_MISINFO = [
    (re.compile(pattern, re.IGNORECASE), weight, category)
    for pattern, weight, category in MISINFORMATION_PATTERNS
]


def scan_misinformation(text: str) -> tuple[float, list[dict[str, Any]]]:
    """
    Score text against the weighted misinformation pattern table.

    Returns:
        Tuple of (score capped at 100, flagged claims with text and category)
    """
    text = clip(text)
    score = 0
    flagged: list[dict[str, Any]] = []
    for pattern, weight, category in _MISINFO:
        match = pattern.search(text)
        if match:
            score += weight
            flagged.append({"text": match.group(0), "category": category, "weight": weight})
    return min(score, 100), flagged


def _summarize_claims(flagged: list[dict[str, Any]]) -> list[str]:
    evidence: list[str] = []
    if flagged:
        categories = sorted({str(c.get("category", "Unknown")) for c in flagged})
        evidence.append(f"{len(flagged)} misinformation claim(s): {', '.join(categories)}")
    for category, label in (
        ("Health", "Health misinformation"),
        ("Financial", "Get-rich-quick or scam pattern"),
        ("Privacy", "Privacy red flag"),
    ):
        match = next((c for c in flagged if c.get("category") == category), None)
        if match:
            evidence.append(f'{label}: "{match.get("text", "")}"')
    return evidence


class CheckupAdapter(ExternalAgentAdapter):
    """Scrapes the source page and scores misinformation claims."""

    AGENT_ID = "checkup"
    SERVICE_NAME = "Check-up scraper"

    EXCESSIVE_ADS = 5

    def __init__(self, endpoint: str, http_client=None):
        super().__init__(
            endpoint,
            http_client,
            name="Check-up Scraper",
            description="Page scraper scoring misinformation claims",
        )

    def get_capabilities(self) -> list[str]:
        return ["page_scraping", "misinformation_claims", "ad_detection"]

    def build_payload(self, request: AnalysisRequest) -> dict[str, Any]:
        return {
            "url": request.source_url,
            "scrape_ads": True,
            "classify_theme": True,
            "extract_claims": True,
            "depth": 1,
        }

    def normalize(self, response: dict[str, Any], request: AnalysisRequest) -> Optional[AgentResult]:
        score = response.get("disinfo_score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise MalformedResponseError(self.agent_id, "missing disinfo_score")
        if not 0 <= score <= 100:
            raise MalformedResponseError(self.agent_id, f"disinfo_score {score} outside [0, 100]")

        flagged = [c for c in response.get("flagged_claims") or [] if isinstance(c, dict)]
        ads = response.get("ads") or []

        evidence = _summarize_claims(flagged)
        if len(ads) > self.EXCESSIVE_ADS:
            evidence.append(f"Excessive advertising ({len(ads)} ads on page)")
        if not evidence:
            evidence.append("No misinformation claims found on the page")

        return self.build_result(
            float(score),
            evidence,
            raw_score={
                "disinfo_score": score,
                "has_misinfo": bool(response.get("has_misinfo", False)),
                "flagged_claims": len(flagged),
            },
        )

    def fallback(self, request: AnalysisRequest) -> Optional[AgentResult]:
        text = request.app_description or request.text
        if not text or not text.strip():
            return None
        score, flagged = scan_misinformation(text)
        evidence = _summarize_claims(flagged) or ["No misinformation patterns in the supplied text"]
        return self.build_result(
            score,
            evidence,
            raw_score={"disinfo_score": score, "flagged_claims": len(flagged)},
            source=ResultSource.FALLBACK,
        )


__all__ = ["CheckupAdapter", "scan_misinformation"]
