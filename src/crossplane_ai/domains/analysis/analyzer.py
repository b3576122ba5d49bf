"""Deterministic health analysis over discovered resources."""

from __future__ import annotations

from collections.abc import Sequence

from crossplane_ai.domains.analysis.models import (
    AnalysisResult,
    Issue,
    Priority,
    Recommendation,
    ResourceRow,
    Severity,
)
from crossplane_ai.models.common import ResourceRecord, ResourceStatus

# Below this score the collection gets an investigation recommendation
HEALTHY_THRESHOLD = 80

# More distinct providers than this counts as multi-cloud
MULTI_CLOUD_PROVIDERS = 2


def health_score(healthy: int, total: int) -> int:
    """Percentage of healthy resources, rounded half up. 0 for an empty set."""
    if total <= 0:
        return 0
    return int(100 * healthy / total + 0.5)


def _issues(records: Sequence[ResourceRecord], health_check: bool) -> list[Issue]:
    issues = []
    for record in records:
        if record.status == ResourceStatus.NOT_READY:
            issues.append(
                Issue(
                    severity=Severity.WARNING,
                    description=f"Resource {record.name} is in {record.status.value} state",
                    resource_name=record.name,
                    resolution="Check resource events and provider status",
                )
            )
        elif health_check and record.status == ResourceStatus.UNKNOWN:
            issues.append(
                Issue(
                    severity=Severity.INFO,
                    description=f"Resource {record.name} does not report readiness",
                    resource_name=record.name,
                    resolution="Verify the provider controller is reconciling this resource",
                )
            )
    return issues


def _recommendations(
    records: Sequence[ResourceRecord],
    score: int,
    health_check: bool,
) -> list[Recommendation]:
    if not records:
        return [
            Recommendation(
                title="Install Crossplane Providers",
                description=(
                    "No Crossplane resources found. Install providers and create "
                    "compositions to get started."
                ),
                impact="Enable infrastructure management through Crossplane",
                priority=Priority.HIGH,
            )
        ]

    recommendations = []
    if score < HEALTHY_THRESHOLD:
        recommendations.append(
            Recommendation(
                title="Investigate Resource Issues",
                description=(
                    "Some resources are not in ready state. Check logs and events "
                    "for troubleshooting."
                ),
                impact="Improve system reliability and performance",
                priority=Priority.HIGH,
            )
        )

    if len({r.provider for r in records}) > MULTI_CLOUD_PROVIDERS:
        recommendations.append(
            Recommendation(
                title="Multi-Cloud Management",
                description=(
                    "Consider implementing consistent policies across multiple cloud providers."
                ),
                impact="Better governance and cost optimization",
                priority=Priority.MEDIUM,
            )
        )

    if health_check and any(r.status == ResourceStatus.UNKNOWN for r in records):
        recommendations.append(
            Recommendation(
                title="Review Resources Without Readiness",
                description=(
                    "Some resources have no Ready condition yet. Confirm their providers "
                    "are installed and healthy."
                ),
                impact="Complete visibility into resource health",
                priority=Priority.LOW,
            )
        )

    recommendations.append(
        Recommendation(
            title="Enable Monitoring and Alerting",
            description=(
                "Set up monitoring for your Crossplane resources to track health and performance."
            ),
            impact="Proactive issue detection and resolution",
            priority=Priority.MEDIUM,
        )
    )
    return recommendations


def analyze(records: Sequence[ResourceRecord], health_check: bool = False) -> AnalysisResult:
    """Compute the health analysis of a resource collection.

    Pure function of its inputs. Every NotReady resource yields one
    Warning issue. With ``health_check`` set, resources with no readiness
    information also yield Info issues.

    Args:
        records: Discovered resources.
        health_check: Whether to include the detailed readiness checks.

    Returns:
        The analysis, with no narrative summary.
    """
    total = len(records)
    healthy = sum(1 for r in records if r.status == ResourceStatus.READY)
    score = health_score(healthy, total)
    issues = _issues(records, health_check)

    return AnalysisResult(
        total_count=total,
        healthy_count=healthy,
        issue_count=len(issues),
        health_score=score,
        resources=[ResourceRow.from_record(r) for r in records],
        issues=issues,
        recommendations=_recommendations(records, score, health_check),
    )
