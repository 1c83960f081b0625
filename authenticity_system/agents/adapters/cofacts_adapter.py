"""Adapter for the Cofacts crowd-sourced fact-checking GraphQL API.

Claims are extracted from the app description and searched with Cofacts'
moreLikeThis filter. Community replies classify matching articles as RUMOR,
NOT_RUMOR or OPINIONATED; the ratios map onto fixed confidence bands:

| Condition              | Confidence                    |
|------------------------|-------------------------------|
| rumor rate > 0.6       | 70 + (rate - 0.6) * 75        |
| rumor rate > 0.4       | 40 + (rate - 0.4) * 150       |
| not-rumor rate > 0.6   | 10 + (1 - not_rumor) * 25     |
| otherwise              | 30 + (rumor - not_rumor) * 50 |

No matching articles, or no replied articles, means the community has
nothing to say and the adapter abstains. There is no local fallback because
crowd consensus cannot be approximated offline.
"""

import asyncio
import re
from typing import Any, Optional

import httpx

from authenticity_system.agents.adapters.base_adapter import HEALTH_ERRORS, ExternalAgentAdapter
from authenticity_system.config.detection_patterns import CLAIM_PATTERNS
from authenticity_system.data_management.schemas import (
    AgentResult,
    AnalysisRequest,
    HealthStatus,
)
from authenticity_system.config.settings import settings
from authenticity_system.errors import MalformedResponseError
from authenticity_system.utils.text import compile_patterns

LIST_ARTICLES_QUERY = """
query SearchArticles($text: String!, $limit: Int) {
  ListArticles(
    filter: { moreLikeThis: { like: $text, minimumShouldMatch: "0%" } }
    orderBy: [{ _score: DESC }]
    first: $limit
  ) {
    edges {
      node {
        id
        text
        articleReplies(status: NORMAL) {
          reply { id type }
        }
        replyRequestCount
        replyCount
      }
      score
    }
  }
}
""".strip()

_CLAIM_PATTERNS = compile_patterns(CLAIM_PATTERNS)
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def extract_claims(description: str, min_length: int = 20) -> list[str]:
    """
    Sentences of an app description that make strong, checkable claims.

    Falls back to the whole description when no sentence qualifies.
    """
    claims = []
    for sentence in _SENTENCE_SPLIT_RE.split(description):
        sentence = sentence.strip()
        if len(sentence) > min_length and any(p.search(sentence) for p in _CLAIM_PATTERNS):
            claims.append(sentence)
    return claims or [description.strip()]


def community_confidence(rumor_rate: float, not_rumor_rate: float) -> float:
    """Map community reply ratios onto the 0-100 confidence scale."""
    if rumor_rate > 0.6:
        return 70 + (rumor_rate - 0.6) * 75
    if rumor_rate > 0.4:
        return 40 + (rumor_rate - 0.4) * 150
    if not_rumor_rate > 0.6:
        return 10 + (1 - not_rumor_rate) * 25
    return 30 + (rumor_rate - not_rumor_rate) * 50


class CofactsAdapter(ExternalAgentAdapter):
    """Community fact-check consensus on app description claims."""

    AGENT_ID = "cofacts"
    SERVICE_NAME = "Cofacts API"

    MAX_CLAIMS = 3
    MAX_QUERY_CHARS = 1000
    RESULT_LIMIT = 10
    HIGH_DEMAND_REQUESTS = 10

    def __init__(self, endpoint: str, http_client=None):
        super().__init__(
            endpoint,
            http_client,
            name="Cofacts Community",
            description="Crowd-sourced fact-check consensus",
        )

    def get_capabilities(self) -> list[str]:
        return ["community_fact_check", "claim_extraction"]

    def build_payload(self, request: AnalysisRequest) -> dict[str, Any]:
        claims = extract_claims(request.app_description or "")[: self.MAX_CLAIMS]
        return {
            "query": LIST_ARTICLES_QUERY,
            "variables": {
                "text": " ".join(claims)[: self.MAX_QUERY_CHARS],
                "limit": self.RESULT_LIMIT,
            },
        }

    def normalize(self, response: dict[str, Any], request: AnalysisRequest) -> Optional[AgentResult]:
        errors = response.get("errors")
        if errors:
            message = errors[0].get("message", "unknown") if isinstance(errors[0], dict) else errors[0]
            raise MalformedResponseError(self.agent_id, f"GraphQL error: {message}")

        try:
            edges = response["data"]["ListArticles"]["edges"]
        except (KeyError, TypeError) as e:
            raise MalformedResponseError(self.agent_id, f"unexpected response shape: {e}") from e
        if not edges:
            return None

        with_replies = rumor = not_rumor = opinionated = requests = 0
        for edge in edges:
            node = (edge or {}).get("node") or {}
            reply_types = {
                (ar.get("reply") or {}).get("type")
                for ar in node.get("articleReplies") or []
            }
            reply_types.discard(None)
            requests += node.get("replyRequestCount") or 0
            if not reply_types:
                continue
            with_replies += 1
            rumor += "RUMOR" in reply_types
            not_rumor += "NOT_RUMOR" in reply_types
            opinionated += "OPINIONATED" in reply_types

        if with_replies == 0:
            return None

        rumor_rate = rumor / with_replies
        not_rumor_rate = not_rumor / with_replies
        confidence = community_confidence(rumor_rate, not_rumor_rate)

        evidence = [
            f"{len(edges)} similar claim(s) found; {rumor} flagged as rumor by community fact-checkers"
        ]
        if rumor_rate > 0.6:
            evidence.append(f"Strong community consensus: {rumor_rate:.0%} of checked claims are rumors")
        elif not_rumor_rate > 0.6:
            evidence.append(f"Community verified {not_rumor_rate:.0%} of similar claims as accurate")
        if opinionated:
            evidence.append(f"{opinionated} similar claim(s) judged opinion rather than fact")
        if requests > self.HIGH_DEMAND_REQUESTS:
            evidence.append(f"High fact-check demand ({requests} requests)")

        return self.build_result(
            confidence,
            evidence,
            raw_score={
                "rumor_rate": round(rumor_rate, 4),
                "not_rumor_rate": round(not_rumor_rate, 4),
                "articles": len(edges),
                "with_replies": with_replies,
            },
        )

    async def check_health(self, timeout: float = settings.health_timeout_seconds) -> HealthStatus:
        """Trivial GraphQL query; the API has no health route."""
        try:
            client = await self._get_client()
            response = await asyncio.wait_for(
                client.post(
                    self.endpoint,
                    json={"query": "{ __typename }"},
                    timeout=httpx.Timeout(timeout),
                ),
                timeout=timeout,
            )
            available = response.status_code == 200
            return HealthStatus(self.agent_id, available, self.endpoint, f"HTTP {response.status_code}")
        except HEALTH_ERRORS as e:
            self.log.info("health_check_failed", error_type=type(e).__name__)
            return HealthStatus(self.agent_id, False, self.endpoint, f"{type(e).__name__}: {e}")


__all__ = ["CofactsAdapter", "extract_claims", "community_confidence", "LIST_ARTICLES_QUERY"]
