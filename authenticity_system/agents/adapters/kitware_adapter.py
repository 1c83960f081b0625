"""Adapter for the Kitware media forensics service.

Wire format:
    POST {endpoint}  {"media": [{"url": ..., "type": "image" | "video"}],
                      "analysis_types": ["deepfake", "exif", "attribution"]}
    -> {"results": [{"media_url": ..., "is_manipulated": bool,
                     "manipulation_score": 0-100, "deepfake_prob": 0.0-1.0,
                     "exif_flags": [{"type": ..., "severity": ..., "description": ...}]}]}

Composite: 0.6 x mean manipulation score + 0.4 x max deepfake probability x 100.

Fallback: URL-only checks (stock-photo hosts, editing-software markers in file
names). Media is never downloaded locally.
"""

from typing import Any, Optional

from authenticity_system.agents.adapters.base_adapter import ExternalAgentAdapter
from authenticity_system.config.detection_patterns import (
    EDITING_SOFTWARE_MARKERS,
    STOCK_PHOTO_HOSTS,
)
from authenticity_system.data_management.schemas import (
    AgentResult,
    AnalysisRequest,
    ResultSource,
)
from authenticity_system.errors import MalformedResponseError

MANIPULATION_WEIGHT = 0.6
DEEPFAKE_WEIGHT = 0.4


def combine_media_scores(manipulation_scores: list[float], deepfake_probs: list[float]) -> float:
    """Mean manipulation and worst-case deepfake probability on the 0-100 scale."""
    if not manipulation_scores:
        return 0.0
    mean_manipulation = sum(manipulation_scores) / len(manipulation_scores)
    max_deepfake = max(deepfake_probs) if deepfake_probs else 0.0
    return mean_manipulation * MANIPULATION_WEIGHT + max_deepfake * 100 * DEEPFAKE_WEIGHT


class KitwareAdapter(ExternalAgentAdapter):
    """Manipulation and deepfake detection over app listing media."""

    AGENT_ID = "kitware"
    SERVICE_NAME = "Kitware API"

    ANALYSIS_TYPES = ["deepfake", "exif", "attribution"]
    DEEPFAKE_FLAG_PROBABILITY = 0.5
    STOCK_PHOTO_POINTS = 40
    EDITING_SOFTWARE_POINTS = 15

    def __init__(self, endpoint: str, http_client=None):
        super().__init__(
            endpoint,
            http_client,
            name="Kitware OSINT",
            description="Media manipulation and deepfake detection",
        )

    def get_capabilities(self) -> list[str]:
        return ["media_manipulation", "deepfake_detection", "stock_photo_detection"]

    def build_payload(self, request: AnalysisRequest) -> dict[str, Any]:
        items = request.app_media.media_items() if request.app_media else []
        return {
            "media": [{"url": url, "type": media_type} for url, media_type in items],
            "analysis_types": self.ANALYSIS_TYPES,
        }

    def normalize(self, response: dict[str, Any], request: AnalysisRequest) -> Optional[AgentResult]:
        results = response.get("results")
        if not isinstance(results, list):
            raise MalformedResponseError(self.agent_id, "missing results list")
        if not results:
            return None

        manipulation: list[float] = []
        deepfake: list[float] = []
        manipulated = 0
        high_exif: list[str] = []
        for item in results:
            if not isinstance(item, dict):
                raise MalformedResponseError(self.agent_id, "result entry is not an object")
            score = float(item.get("manipulation_score") or 0)
            prob = float(item.get("deepfake_prob") or 0)
            if not 0 <= score <= 100 or not 0 <= prob <= 1:
                raise MalformedResponseError(self.agent_id, "media score out of range")
            manipulation.append(score)
            deepfake.append(prob)
            manipulated += bool(item.get("is_manipulated"))
            high_exif.extend(
                str(flag.get("description", flag.get("type", "")))
                for flag in item.get("exif_flags") or []
                if isinstance(flag, dict) and flag.get("severity") == "HIGH"
            )

        confidence = combine_media_scores(manipulation, deepfake)
        evidence = [f"{len(results)} media item(s) analyzed"]
        if manipulated:
            evidence.append(f"{manipulated} media item(s) show signs of manipulation")
        if max(deepfake) > self.DEEPFAKE_FLAG_PROBABILITY:
            evidence.append(f"Deepfake probability up to {max(deepfake):.0%}")
        if high_exif:
            evidence.append(f"{len(high_exif)} critical EXIF issue(s): {high_exif[0]}")

        return self.build_result(
            confidence,
            evidence,
            raw_score={
                "avg_manipulation": round(sum(manipulation) / len(manipulation), 4),
                "max_deepfake_prob": max(deepfake),
                "analyzed": len(results),
            },
        )

    def fallback(self, request: AnalysisRequest) -> Optional[AgentResult]:
        items = request.app_media.media_items() if request.app_media else []
        if not items:
            return None

        scores: list[float] = []
        stock = edited = 0
        for url, _ in items:
            lowered = url.lower()
            score = 0
            if any(host in lowered for host in STOCK_PHOTO_HOSTS):
                score += self.STOCK_PHOTO_POINTS
                stock += 1
            if any(marker in lowered for marker in EDITING_SOFTWARE_MARKERS):
                score += self.EDITING_SOFTWARE_POINTS
                edited += 1
            scores.append(float(score))

        evidence: list[str] = []
        if stock:
            evidence.append(f"App uses {stock} stock photo(s) instead of original content")
        if edited:
            evidence.append(f"{edited} media file name(s) reference editing software")
        if not evidence:
            evidence.append("No media red flags detectable from URLs")

        return self.build_result(
            combine_media_scores(scores, []),
            evidence,
            raw_score={"stock_photos": stock, "edited": edited, "analyzed": len(items)},
            source=ResultSource.FALLBACK,
        )


__all__ = ["KitwareAdapter", "combine_media_scores"]
