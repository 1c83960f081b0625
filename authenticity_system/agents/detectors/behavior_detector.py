"""Reviewer behavior detector over userContext history signals."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from dateutil import parser as dateutil_parser

from authenticity_system.agents.detectors.base_detector import HeuristicDetector
from authenticity_system.data_management.schemas import AgentResult, AnalysisRequest


@dataclass
class ReviewerProfile:
    """Numeric reviewer features extracted from userContext.

    Attributes:
        account_age_hours: Age of the reviewing account
        review_count: Total reviews the account has posted
        reviewed_apps: Distinct apps the account has reviewed
        reviews_last_24h: Reviews posted in the last 24 hours
    """

    account_age_hours: Optional[float] = None
    review_count: Optional[float] = None
    reviewed_apps: Optional[float] = None
    reviews_last_24h: Optional[float] = None

    def is_empty(self) -> bool:
        return all(
            v is None
            for v in (self.account_age_hours, self.review_count, self.reviewed_apps, self.reviews_last_24h)
        )


def read_number(context: Mapping[str, Any], key: str) -> Optional[float]:
    value = context.get(key)
    if isinstance(value, bool) or value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def read_age_from_timestamp(
    context: Mapping[str, Any],
    key: str,
    now: Optional[datetime] = None,
) -> Optional[float]:
    """
    Account age in hours from an ISO-8601 creation timestamp.

    Naive timestamps are taken as UTC. Unparseable values and timestamps in the
    future yield None.
    """
    value = context.get(key)
    if isinstance(value, datetime):
        created = value
    elif isinstance(value, str) and value.strip():
        try:
            created = dateutil_parser.isoparse(value.strip())
        except (ValueError, OverflowError):
            return None
    else:
        return None

    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    age = ((now or datetime.now(timezone.utc)) - created).total_seconds() / 3600
    return age if age >= 0 else None


def extract_profile(context: Mapping[str, Any], now: Optional[datetime] = None) -> ReviewerProfile:
    """
    Read the recognised keys; anything non-numeric is ignored.

    Account age comes from accountAgeHours, then accountAgeDays, then the
    accountCreatedAt timestamp measured against now.
    """
    age_hours = read_number(context, "accountAgeHours")
    if age_hours is None:
        age_days = read_number(context, "accountAgeDays")
        if age_days is not None:
            age_hours = age_days * 24
    if age_hours is None:
        age_hours = read_age_from_timestamp(context, "accountCreatedAt", now)
    return ReviewerProfile(
        account_age_hours=age_hours,
        review_count=read_number(context, "reviewCount"),
        reviewed_apps=read_number(context, "reviewedApps"),
        reviews_last_24h=read_number(context, "reviewsLast24h"),
    )


class BehaviorDetector(HeuristicDetector):
    """
    Scores account age, review volume and posting bursts.

    | Signal                                      | Points |
    |---------------------------------------------|--------|
    | Account younger than 24 hours               | +30    |
    | Bulk reviewer (> 50 reviews)                | +15    |
    | Single-purpose account (1 reviewed app)     | +20    |
    | New account (< 7 days) with > 5 reviews     | +20    |
    | Burst (>= 5 reviews in last 24 hours)       | +25    |

    Abstains (no signal) when userContext carries none of the recognised keys.
    """

    AGENT_ID = "behavior"

    NEW_ACCOUNT_HOURS = 24
    YOUNG_ACCOUNT_HOURS = 7 * 24
    BULK_REVIEW_COUNT = 50
    YOUNG_ACCOUNT_REVIEW_COUNT = 5
    BURST_REVIEW_COUNT = 5

    NEW_ACCOUNT_POINTS = 30
    BULK_REVIEWER_POINTS = 15
    SINGLE_PURPOSE_POINTS = 20
    YOUNG_PROLIFIC_POINTS = 20
    BURST_POINTS = 25

    def __init__(self):
        super().__init__(
            name="Behavioral Signals",
            description="Reviewer account age, volume and posting bursts",
        )

    def get_capabilities(self) -> list[str]:
        return ["account_age", "review_volume", "single_purpose_accounts", "posting_bursts"]

    def detect(self, request: AnalysisRequest) -> Optional[AgentResult]:
        profile = extract_profile(request.user_context or {})
        if profile.is_empty():
            return None

        score = 0
        evidence: list[str] = []
        age = profile.account_age_hours
        count = profile.review_count

        if age is not None and age < self.NEW_ACCOUNT_HOURS:
            score += self.NEW_ACCOUNT_POINTS
            evidence.append(f"Account created {age:.0f} hours ago")

        if count is not None and count > self.BULK_REVIEW_COUNT:
            score += self.BULK_REVIEWER_POINTS
            evidence.append(f"Bulk reviewer ({count:.0f} reviews)")

        if profile.reviewed_apps is not None and profile.reviewed_apps == 1:
            score += self.SINGLE_PURPOSE_POINTS
            evidence.append("Single-purpose account (reviewed only this app)")

        if (
            age is not None
            and count is not None
            and age < self.YOUNG_ACCOUNT_HOURS
            and count > self.YOUNG_ACCOUNT_REVIEW_COUNT
        ):
            score += self.YOUNG_PROLIFIC_POINTS
            evidence.append(f"{count:.0f} reviews from an account under a week old")

        burst = profile.reviews_last_24h
        if burst is not None and burst >= self.BURST_REVIEW_COUNT:
            score += self.BURST_POINTS
            evidence.append(f"Posting burst ({burst:.0f} reviews in 24 hours)")

        if not evidence:
            evidence.append("Reviewer history shows no anomalies")

        return self.build_result(score, evidence, raw_score=profile.__dict__.copy())


__all__ = [
    "BehaviorDetector",
    "ReviewerProfile",
    "extract_profile",
    "read_number",
    "read_age_from_timestamp",
]
