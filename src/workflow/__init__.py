"""Collection workflow module."""

from src.workflow.models import StepResult, StepStatus, WorkflowReport
from src.workflow.runner import VectorWorkflow

__all__ = [
    "StepResult",
    "StepStatus",
    "VectorWorkflow",
    "WorkflowReport",
]
