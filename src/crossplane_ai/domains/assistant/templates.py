"""Deterministic response templates.

Used whenever the completion service is not configured or fails. Every
template is a pure function of its inputs.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from crossplane_ai.domains.analysis.models import Priority, Suggestion
from crossplane_ai.models.common import ResourceRecord, ResourceStatus

# Kinds treated as databases when counting for suggestions
DATABASE_KINDS = frozenset({"dbinstances", "databaseinstances", "servers"})


def _bullets(lines: Sequence[str]) -> str:
    return "\n".join(f"- {line}" for line in lines)


def _names(records: Sequence[ResourceRecord], limit: int = 5) -> str:
    names = [r.name for r in records[:limit]]
    more = len(records) - len(names)
    text = ", ".join(names)
    if more > 0:
        text += f" and {more} more"
    return text


def _not_ready(records: Sequence[ResourceRecord]) -> list[ResourceRecord]:
    return [r for r in records if r.status == ResourceStatus.NOT_READY]


def summary_response(request: str, records: Sequence[ResourceRecord]) -> str:
    """Overview of what the cluster contains."""
    if not records:
        return (
            "Resource Summary:\n\n"
            "No Crossplane resources were found in the cluster.\n"
            "Install a provider and create a composition to get started."
        )

    providers = Counter(r.provider for r in records)
    kinds = Counter(r.kind for r in records)
    ready = sum(1 for r in records if r.is_ready)

    lines = [f"{count} {provider}" for provider, count in sorted(providers.items())]
    kind_lines = [f"{count} {kind}" for kind, count in sorted(kinds.items())]
    return (
        "Resource Summary:\n\n"
        f"Your Crossplane cluster contains {len(records)} resources "
        f"({ready} ready).\n\n"
        f"By provider:\n{_bullets(lines)}\n\n"
        f"By kind:\n{_bullets(kind_lines)}\n\n"
        "Quick tips:\n"
        + _bullets(
            [
                "Use 'crossplane-ai analyze' for a detailed health check",
                "Run 'crossplane-ai suggest optimize' for optimization recommendations",
                "Try 'crossplane-ai ask \"show me failing resources\"' for troubleshooting",
            ]
        )
    )


def aws_response(request: str, records: Sequence[ResourceRecord]) -> str:
    """AWS resources managed by Crossplane."""
    aws = [r for r in records if r.provider == "aws"]
    if not aws:
        return (
            "AWS Resources:\n\n"
            "No AWS resources managed by Crossplane were found. "
            "Check that provider-aws is installed and configured."
        )

    failing = _not_ready(aws)
    lines = [f"{r.name} ({r.kind}, {r.status.value})" for r in aws]
    text = f"AWS Resources:\n\nFound {len(aws)} AWS resources managed by Crossplane:\n{_bullets(lines)}"
    if failing:
        text += f"\n\n{len(failing)} not ready: {_names(failing)}. Check their events for errors."
    else:
        text += (
            "\n\nAll AWS resources are healthy. Consider reviewing RDS instances "
            "for performance optimization opportunities."
        )
    return text


def database_response(request: str, records: Sequence[ResourceRecord]) -> str:
    """Database-focused insights."""
    databases = [r for r in records if r.kind in DATABASE_KINDS]
    if not databases:
        return (
            "Database Analysis:\n\n"
            "No database instances were found. Use 'crossplane-ai generate \"postgres "
            "database\"' to create one."
        )

    failing = _not_ready(databases)
    state = (
        "All databases are in 'Ready' state"
        if not failing
        else f"{len(failing)} database(s) not ready: {_names(failing)}"
    )
    return (
        "Database Analysis:\n\n"
        f"Found {len(databases)} database instances: {_names(databases)}\n\n"
        + _bullets(
            [
                state,
                "Consider enabling automated backups for production databases",
                "Review connection pooling settings for better performance",
            ]
        )
    )


def troubleshooting_response(request: str, records: Sequence[ResourceRecord]) -> str:
    """Steps for diagnosing resources that are not ready."""
    failing = _not_ready(records)
    header = (
        f"{len(failing)} resource(s) not ready: {_names(failing)}\n\n"
        if failing
        else "No resources are currently reporting NotReady.\n\n"
    )
    steps = [
        "Check resource events for error messages",
        "Verify provider credentials are valid",
        "Ensure required dependencies are available",
        "Check network connectivity to cloud provider APIs",
    ]
    numbered = "\n".join(f"{i}. {step}" for i, step in enumerate(steps, start=1))
    return f"Troubleshooting Not Ready Resources:\n\n{header}{numbered}"


def cost_response(request: str, records: Sequence[ResourceRecord]) -> str:
    """Cost optimization hints."""
    return (
        "Cost Optimization Insights:\n\n"
        f"Reviewed {len(records)} resources. Recommendations:\n"
        + _bullets(
            [
                "Consider using spot instances for non-critical workloads",
                "Review instance sizes, some might be over-provisioned",
                "Enable auto-scaling to optimize resource usage",
                "Use reserved instances for predictable workloads",
            ]
        )
    )


def generic_response(request: str, records: Sequence[ResourceRecord]) -> str:
    """Fallback answer that quotes the request verbatim."""
    providers = sorted({r.provider for r in records})
    failing = _not_ready(records)
    health = (
        "All resources appear to be healthy"
        if not failing
        else f"{len(failing)} of {len(records)} resources are not ready"
    )
    return (
        f"I understand you're asking about: {request}\n\n"
        "Based on your Crossplane resources, here's what I can tell you:\n"
        + _bullets(
            [
                f"Your cluster has {len(records)} resources across "
                f"{len(providers)} providers ({', '.join(providers) or 'none'})",
                health,
                "Consider running 'crossplane-ai analyze' for detailed insights",
            ]
        )
        + "\n\nFeel free to ask more specific questions about your resources!"
    )


def analysis_summary(
    total: int,
    healthy: int,
    score: int,
    issue_names: Sequence[str],
) -> str:
    """One-paragraph narrative for an analysis result."""
    if total == 0:
        return "No Crossplane resources found in the cluster."
    text = f"{healthy} of {total} resources are ready (health score {score}%)."
    if issue_names:
        text += f" Resources needing attention: {', '.join(issue_names)}."
    else:
        text += " No issues detected."
    return text


# Suggestion categories and the aliases that select them
CATEGORY_ALIASES = {
    "database": "database",
    "db": "database",
    "security": "security",
    "optimize": "optimization",
    "optimization": "optimization",
    "network": "networking",
    "networking": "networking",
}


def normalize_category(category: str | None) -> str:
    """Map a user-supplied category onto a known suggestion table."""
    if not category:
        return "general"
    return CATEGORY_ALIASES.get(category.strip().lower(), "general")


def suggestion_table(category: str | None, records: Sequence[ResourceRecord]) -> list[Suggestion]:
    """Template suggestions for a category, with counts taken from the records."""
    name = normalize_category(category)
    db_count = sum(1 for r in records if r.kind in DATABASE_KINDS or "database" in r.name.lower())
    healthy = sum(1 for r in records if r.is_ready)
    providers = sum(1 for r in records if r.kind == "providers")

    if name == "database":
        return [
            Suggestion(
                title=f"Enable Automated Backups for {db_count} Database Resources",
                description="Configure automated backups for your RDS instances to ensure data protection",
                priority=Priority.HIGH,
                category="Reliability",
                example='spec:\n  backupRetentionPeriod: 7\n  backupWindow: "03:00-04:00"',
            ),
            Suggestion(
                title="Implement Read Replicas",
                description="Add read replicas to distribute read traffic and improve performance",
                priority=Priority.MEDIUM,
                category="Performance",
            ),
            Suggestion(
                title=f"Configure Multi-AZ Deployment (Based on {healthy} healthy resources)",
                description="Enable Multi-AZ for high availability and automatic failover",
                priority=Priority.HIGH,
                category="Reliability",
                example="spec:\n  forProvider:\n    multiAZ: true",
            ),
        ]
    if name == "security":
        return [
            Suggestion(
                title="Enable Encryption at Rest",
                description="Encrypt your databases and storage resources to enhance security",
                priority=Priority.HIGH,
                category="Security",
            ),
            Suggestion(
                title="Review IAM Policies",
                description="Audit and tighten IAM policies to follow principle of least privilege",
                priority=Priority.HIGH,
                category="Security",
            ),
            Suggestion(
                title="Enable VPC Security Groups",
                description="Configure proper security groups to restrict network access",
                priority=Priority.MEDIUM,
                category="Security",
            ),
        ]
    if name == "optimization":
        return [
            Suggestion(
                title="Right-size Resources",
                description="Analyze resource utilization and adjust instance sizes accordingly",
                priority=Priority.MEDIUM,
                category="Cost",
            ),
            Suggestion(
                title="Implement Auto-scaling",
                description="Configure auto-scaling groups to optimize resource usage",
                priority=Priority.MEDIUM,
                category="Performance",
            ),
            Suggestion(
                title="Use Reserved Instances",
                description="Consider reserved instances for predictable workloads to reduce costs",
                priority=Priority.LOW,
                category="Cost",
            ),
        ]
    if name == "networking":
        return [
            Suggestion(
                title="Configure VPC Peering",
                description="Set up VPC peering for secure cross-region communication",
                priority=Priority.MEDIUM,
                category="Networking",
            ),
            Suggestion(
                title="Implement Load Balancers",
                description="Use Application Load Balancers to distribute traffic efficiently",
                priority=Priority.HIGH,
                category="Networking",
            ),
            Suggestion(
                title="Set up VPN Gateway",
                description="Configure VPN gateway for secure on-premises connectivity",
                priority=Priority.LOW,
                category="Networking",
            ),
        ]
    return [
        Suggestion(
            title=f"Health Check {len(records)} Resources",
            description="Run regular health checks on all Crossplane resources",
            priority=Priority.MEDIUM,
            category="Monitoring",
        ),
        Suggestion(
            title=f"Update {providers} Providers",
            description="Keep your Crossplane providers up to date for latest features and security fixes",
            priority=Priority.LOW,
            category="Maintenance",
        ),
        Suggestion(
            title="Implement Monitoring",
            description="Set up comprehensive monitoring for all your infrastructure resources",
            priority=Priority.HIGH,
            category="Monitoring",
        ),
        Suggestion(
            title="Create Backup Strategy",
            description="Develop and implement a comprehensive backup and disaster recovery plan",
            priority=Priority.HIGH,
            category="Reliability",
        ),
    ]
