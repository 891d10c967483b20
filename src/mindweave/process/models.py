"""Process step model and step-list editing helpers.

A process is an ordered list of ProcessStep records. Actions flow to the
step with the next step number; decisions fan out through labelled
branches that may point anywhere in the list (including backwards).

Editing helpers never mutate their input: they return a fresh list with
step numbers recomputed from list order.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from uuid import uuid4


class StepType(Enum):
    """Kinds of process steps."""

    ACTION = "action"
    DECISION = "decision"


@dataclass
class ProcessBranch:
    """One labelled outcome of a decision step.

    Attributes:
        label: Condition text shown on the edge (e.g. "Yes").
        target_step_id: Step this branch leads to, or None when unresolved.
        id: Stable branch identifier.
    """

    label: str
    target_step_id: str | None = None
    id: str = field(default_factory=lambda: uuid4().hex)

    @property
    def is_resolved(self) -> bool:
        """True if the branch points at a step."""
        return bool(self.target_step_id)


@dataclass
class ProcessStep:
    """A single step in a process flow.

    Attributes:
        id: Unique step identifier.
        step_number: 1-based position in the list.
        type: Action or decision.
        action: Short title.
        description: Longer instruction text.
        role: Who performs the step.
        is_end_state: For actions, terminates the path.
        branches: For decisions, the ordered outcomes.
    """

    id: str = field(default_factory=lambda: uuid4().hex)
    step_number: int = 1
    type: StepType = StepType.ACTION
    action: str = ""
    description: str = ""
    role: str = ""
    is_end_state: bool = False
    branches: list[ProcessBranch] = field(default_factory=list)

    @property
    def is_decision(self) -> bool:
        return self.type == StepType.DECISION

    def copy(self) -> ProcessStep:
        """Return a copy with independent branch records."""
        return replace(self, branches=[replace(b) for b in self.branches])


def renumber_steps(steps: list[ProcessStep]) -> list[ProcessStep]:
    """Return copies of steps numbered 1..n in list order."""
    result = []
    for i, step in enumerate(steps):
        copied = step.copy()
        copied.step_number = i + 1
        result.append(copied)
    return result


def find_step(steps: list[ProcessStep], step_id: str) -> ProcessStep | None:
    """Find a step by ID."""
    for step in steps:
        if step.id == step_id:
            return step
    return None


def insert_step_after(
    steps: list[ProcessStep],
    index: int,
    action: str = "New Step",
    description: str = "Describe step...",
    role: str = "User",
) -> list[ProcessStep]:
    """Insert a new action step after position ``index``.

    Args:
        steps: Current step list.
        index: 0-based list position to insert after (-1 inserts at the front).
        action: Title for the new step.
        description: Description for the new step.
        role: Role for the new step.

    Returns:
        New renumbered list containing the inserted step.
    """
    new_step = ProcessStep(action=action, description=description, role=role)
    updated = list(steps)
    updated.insert(index + 1, new_step)
    return renumber_steps(updated)


def delete_step(steps: list[ProcessStep], step_id: str) -> list[ProcessStep]:
    """Remove a step and renumber the rest.

    Branches that targeted the removed step are left pointing at its ID;
    the flow projector skips targets that no longer exist.
    """
    return renumber_steps([s for s in steps if s.id != step_id])


def add_branch(
    steps: list[ProcessStep], step_id: str, label: str = "New Condition"
) -> list[ProcessStep]:
    """Append an unresolved branch to a step."""
    result = []
    for step in steps:
        copied = step.copy()
        if copied.id == step_id:
            copied.branches.append(ProcessBranch(label=label))
        result.append(copied)
    return result


def update_branch(
    steps: list[ProcessStep],
    step_id: str,
    branch_id: str,
    label: str | None = None,
    target_step_id: str | None = None,
) -> list[ProcessStep]:
    """Change a branch's label and/or target.

    An empty-string ``target_step_id`` clears the target.
    """
    result = []
    for step in steps:
        copied = step.copy()
        if copied.id == step_id:
            for branch in copied.branches:
                if branch.id != branch_id:
                    continue
                if label is not None:
                    branch.label = label
                if target_step_id is not None:
                    branch.target_step_id = target_step_id or None
        result.append(copied)
    return result


__all__ = [
    "StepType",
    "ProcessBranch",
    "ProcessStep",
    "renumber_steps",
    "find_step",
    "insert_step_after",
    "delete_step",
    "add_branch",
    "update_branch",
]
