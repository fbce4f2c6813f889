"""Workflow layer for worktree-wizard."""

from .orchestrator import (
    WorktreeOrchestrator,
    WorkflowStep,
    SummonResult,
    BanishOutcome,
    BanishResult,
)

__all__ = [
    "WorktreeOrchestrator",
    "WorkflowStep",
    "SummonResult",
    "BanishOutcome",
    "BanishResult",
]
