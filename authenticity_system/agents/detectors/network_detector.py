"""Coordinated-account network detector."""

from typing import Optional

from authenticity_system.agents.detectors.base_detector import HeuristicDetector
from authenticity_system.agents.detectors.behavior_detector import read_number
from authenticity_system.data_management.schemas import AgentResult, AnalysisRequest


class NetworkDetector(HeuristicDetector):
    """
    Scores device and account reuse signals supplied in userContext.

    Recognised keys:
        sharedDeviceAccounts: Accounts seen on the reviewer's device
        sharedIpAccounts: Accounts seen behind the reviewer's IP
        linkedFlaggedAccounts: Linked accounts already flagged as fake
        clusterRatio: Share of co-reviewers in the reviewer's cluster (0-1)
    """

    AGENT_ID = "network"

    SHARED_DEVICE_THRESHOLD = 3
    SHARED_IP_THRESHOLD = 5
    CLUSTER_RATIO_THRESHOLD = 0.1

    SHARED_DEVICE_POINTS = 35
    SHARED_IP_POINTS = 25
    FLAGGED_LINK_POINTS = 30
    CLUSTER_POINTS = 30

    def __init__(self):
        super().__init__(
            name="Network Analysis",
            description="Shared devices, shared IPs and coordinated clusters",
        )

    def get_capabilities(self) -> list[str]:
        return ["device_sharing", "ip_sharing", "flagged_links", "review_clusters"]

    def detect(self, request: AnalysisRequest) -> Optional[AgentResult]:
        context = request.user_context or {}
        devices = read_number(context, "sharedDeviceAccounts")
        ips = read_number(context, "sharedIpAccounts")
        flagged = read_number(context, "linkedFlaggedAccounts")
        cluster = read_number(context, "clusterRatio")

        if devices is None and ips is None and flagged is None and cluster is None:
            return None

        score = 0
        evidence: list[str] = []

        if devices is not None and devices >= self.SHARED_DEVICE_THRESHOLD:
            score += self.SHARED_DEVICE_POINTS
            evidence.append(f"{devices:.0f} accounts share the reviewer's device")

        if ips is not None and ips >= self.SHARED_IP_THRESHOLD:
            score += self.SHARED_IP_POINTS
            evidence.append(f"{ips:.0f} accounts share the reviewer's IP address")

        if flagged is not None and flagged > 0:
            score += self.FLAGGED_LINK_POINTS
            evidence.append(f"Linked to {flagged:.0f} previously flagged account(s)")

        if cluster is not None and cluster > self.CLUSTER_RATIO_THRESHOLD:
            score += self.CLUSTER_POINTS
            evidence.append(f"Part of a coordinated review cluster ({cluster:.0%} of co-reviewers)")

        if not evidence:
            evidence.append("No coordinated-account signals")

        raw = {
            "shared_device_accounts": devices,
            "shared_ip_accounts": ips,
            "linked_flagged_accounts": flagged,
            "cluster_ratio": cluster,
        }
        return self.build_result(score, evidence, raw_score=raw)


__all__ = ["NetworkDetector"]
