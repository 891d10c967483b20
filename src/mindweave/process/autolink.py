"""Link the happy path of freshly generated decisions.

Generated step lists often leave every decision branch unresolved. For
each such decision we point the most "positive" branch at the following
step so the flow reads end to end without manual wiring.
"""

from __future__ import annotations

from mindweave.process.models import ProcessStep

POSITIVE_KEYWORDS = ("yes", "success", "pass", "ok", "true", "confirmed", "valid")


def pick_positive_branch(labels: list[str]) -> int:
    """Index of the first label containing a positive keyword, else 0."""
    for i, label in enumerate(labels):
        lowered = label.lower()
        if any(keyword in lowered for keyword in POSITIVE_KEYWORDS):
            return i
    return 0


def auto_link_decisions(steps: list[ProcessStep]) -> list[ProcessStep]:
    """Resolve one branch per fully unresolved decision.

    A decision qualifies when it has branches, none of them targets a
    step, and another step follows it in the list. Decisions with any
    resolved branch are left alone.

    Args:
        steps: Ordered steps. Not modified.

    Returns:
        New list of step copies.
    """
    result = []
    for index, step in enumerate(steps):
        copied = step.copy()
        following = steps[index + 1] if index + 1 < len(steps) else None
        if (
            copied.is_decision
            and copied.branches
            and following is not None
            and not any(b.is_resolved for b in copied.branches)
        ):
            chosen = pick_positive_branch([b.label for b in copied.branches])
            copied.branches[chosen].target_step_id = following.id
        result.append(copied)
    return result


__all__ = ["POSITIVE_KEYWORDS", "pick_positive_branch", "auto_link_decisions"]
