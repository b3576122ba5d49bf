"""Turn raw API objects into ResourceRecords.

Cluster data is heterogeneous, so nothing in this module raises: missing
or malformed fields degrade to defaults.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from crossplane_ai.clients.base import CRDDefinition
from crossplane_ai.domains.resources.crds import PLATFORM_GROUPS
from crossplane_ai.models.common import ResourceRecord, ResourceStatus
from crossplane_ai.utils.paths import get_path, get_typed

PLATFORM_PROVIDER = "crossplane"
UNKNOWN_PROVIDER = "unknown"


def infer_provider(group: str) -> str:
    """Infer the cloud provider from an API group.

    ``rds.aws.crossplane.io`` -> ``aws``; Crossplane's own groups map to
    ``crossplane``; a group without a dot is ``unknown``.
    """
    if group in PLATFORM_GROUPS:
        return PLATFORM_PROVIDER

    parts = group.split(".")
    if len(parts) >= 2 and parts[1]:
        return parts[1]

    return UNKNOWN_PROVIDER


def infer_status(obj: Any) -> ResourceStatus:
    """Derive readiness from ``status.ready`` or the Ready condition."""
    ready = get_path(obj, "status.ready")
    if isinstance(ready, bool):
        return ResourceStatus.READY if ready else ResourceStatus.NOT_READY

    conditions = get_typed(obj, "status.conditions", list) or []
    for condition in conditions:
        if get_path(condition, "type") == "Ready":
            if get_path(condition, "status") == "True":
                return ResourceStatus.READY
            return ResourceStatus.NOT_READY

    return ResourceStatus.UNKNOWN


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an RFC 3339 timestamp string or pass a datetime through."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_age(created: datetime | None, now: datetime | None = None) -> str:
    """Render time since ``created`` at minute resolution.

    Examples: ``<1m``, ``42m``, ``3h5m``, ``2d4h``. Returns an empty
    string when the creation time is unknown.
    """
    if created is None:
        return ""

    now = now or datetime.now(timezone.utc)
    minutes = int((now - created).total_seconds() // 60)
    if minutes < 1:
        return "<1m"

    days, remainder = divmod(minutes, 24 * 60)
    hours, mins = divmod(remainder, 60)
    if days:
        return f"{days}d{hours}h" if hours else f"{days}d"
    if hours:
        return f"{hours}h{mins}m" if mins else f"{hours}h"
    return f"{mins}m"


def _string_map(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): str(v) for k, v in value.items() if v is not None}


def classify(
    obj: Any,
    crd: CRDDefinition,
    now: Callable[[], datetime] | None = None,
) -> ResourceRecord:
    """Build a ResourceRecord from one raw API object.

    Args:
        obj: Raw object as returned by the API server (nested dicts).
        crd: The kind that was queried to obtain ``obj``.
        now: Clock override for age computation.

    Returns:
        The normalized record. Never raises.
    """
    created = parse_timestamp(get_path(obj, "metadata.creationTimestamp"))
    spec = get_typed(obj, "spec", dict) or {}

    return ResourceRecord(
        name=str(get_path(obj, "metadata.name", "")),
        namespace=str(get_path(obj, "metadata.namespace", "")),
        kind=crd.plural,
        provider=infer_provider(crd.group),
        status=infer_status(obj),
        age=format_age(created, now() if now else None),
        labels=_string_map(get_path(obj, "metadata.labels")),
        raw_spec=dict(spec),
    )
