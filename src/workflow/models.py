"""Workflow report models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from src.vectorstore.models import SearchHit


class StepStatus(str, Enum):
    """Outcome of a workflow step."""

    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"


class StepResult(BaseModel):
    """Result of one workflow step.

    Attributes:
        step: Step name.
        status: Step outcome.
        message: Human-readable summary.
        duration_seconds: Wall time spent in the step.
        error: Structured error, when the step failed.
    """

    step: str = Field(description="Step name")
    status: StepStatus = Field(description="Step outcome")
    message: str = Field(default="", description="Summary")
    duration_seconds: float = Field(default=0.0, description="Step duration")
    error: dict[str, Any] | None = Field(default=None, description="Structured error")


class WorkflowReport(BaseModel):
    """Summary of a workflow run.

    Attributes:
        backend: Backend the run talked to.
        collection: Collection name.
        steps: Step results in execution order.
        inserted_count: Records inserted by this run.
        hits: Ranked search results.
        aborted: Whether a step failure stopped the run.
    """

    backend: str = Field(description="Backend name")
    collection: str = Field(description="Collection name")
    steps: list[StepResult] = Field(default_factory=list, description="Step results")
    inserted_count: int = Field(default=0, description="Records inserted")
    hits: list[SearchHit] = Field(default_factory=list, description="Search hits")
    aborted: bool = Field(default=False, description="Run stopped early")

    @property
    def succeeded(self) -> bool:
        """True when the run finished and no step failed."""
        return not self.aborted and all(
            s.status != StepStatus.FAILED for s in self.steps
        )

    def step(self, name: str) -> StepResult | None:
        """Get the result of a step by name."""
        return next((s for s in self.steps if s.step == name), None)
