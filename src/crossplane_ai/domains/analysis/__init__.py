"""Analysis domain - resource health scoring and recommendations."""

from crossplane_ai.domains.analysis.analyzer import analyze, health_score
from crossplane_ai.domains.analysis.models import (
    AnalysisResult,
    Issue,
    Priority,
    Recommendation,
    ResourceRow,
    Severity,
    Suggestion,
)

__all__ = [
    "AnalysisResult",
    "Issue",
    "Priority",
    "Recommendation",
    "ResourceRow",
    "Severity",
    "Suggestion",
    "analyze",
    "health_score",
]
