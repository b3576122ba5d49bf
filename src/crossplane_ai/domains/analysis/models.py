"""Pydantic models for resource analysis and suggestions."""

from enum import Enum

from pydantic import BaseModel, Field

from crossplane_ai.models.common import ResourceRecord, ResourceStatus


class Severity(str, Enum):
    """Issue severity levels."""

    WARNING = "Warning"
    INFO = "Info"


class Priority(str, Enum):
    """Recommendation and suggestion priorities."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Issue(BaseModel):
    """A problem detected on one resource."""

    severity: Severity = Field(..., description="Issue severity")
    description: str = Field(..., description="What is wrong")
    resource_name: str = Field("", description="Name of the affected resource")
    resolution: str = Field("", description="Suggested next step")


class Recommendation(BaseModel):
    """An action recommended for the resource collection as a whole."""

    title: str = Field(..., description="Short title")
    description: str = Field(..., description="What to do")
    priority: Priority = Field(Priority.MEDIUM, description="Priority")
    impact: str | None = Field(None, description="Expected benefit")


class ResourceRow(BaseModel):
    """One resource as shown in analysis output."""

    name: str
    kind: str
    status: ResourceStatus
    provider: str
    age: str = ""

    @classmethod
    def from_record(cls, record: ResourceRecord) -> "ResourceRow":
        """Create from a discovered ResourceRecord."""
        return cls(
            name=record.name,
            kind=record.kind,
            status=record.status,
            provider=record.provider,
            age=record.age,
        )


class AnalysisResult(BaseModel):
    """Aggregate health view over a resource collection."""

    total_count: int = Field(0, ge=0, description="Number of resources analyzed")
    healthy_count: int = Field(0, ge=0, description="Number of Ready resources")
    issue_count: int = Field(0, ge=0, description="Number of issues found")
    health_score: int = Field(0, ge=0, le=100, description="Percentage of Ready resources")
    resources: list[ResourceRow] = Field(default_factory=list, description="Analyzed resources")
    issues: list[Issue] = Field(default_factory=list, description="Detected issues")
    recommendations: list[Recommendation] = Field(
        default_factory=list, description="Recommended actions"
    )
    summary: str | None = Field(None, description="Narrative summary")


class Suggestion(BaseModel):
    """An improvement suggestion for one category of infrastructure."""

    title: str = Field(..., description="Short title")
    description: str = Field(..., description="What to change and why")
    priority: Priority = Field(Priority.MEDIUM, description="Priority")
    category: str = Field("general", description="Suggestion category")
    example: str | None = Field(None, description="Example spec snippet")
