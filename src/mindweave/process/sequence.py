"""Sequence diagram text for a process.

Builds Mermaid ``sequenceDiagram`` source from a step list: one
participant per role, a note for steps that stay with the same role, a
message when work is handed to another role, and an ``alt`` block per
decision. The text is handed to an external renderer.
"""

from __future__ import annotations

import re

from mindweave.process.models import ProcessStep

DEFAULT_ROLE = "User"

_UNSAFE = re.compile(r'[:;"\[\](){}<>]')
_SPACES = re.compile(r"\s+")


def sanitize_text(text: str, max_length: int = 35) -> str:
    """Strip characters that break Mermaid syntax and truncate."""
    if not text:
        return ""
    clean = _SPACES.sub(" ", _UNSAFE.sub(" ", text).strip())
    if len(clean) > max_length:
        clean = clean[:max_length] + "..."
    return clean


def steps_to_sequence_diagram(steps: list[ProcessStep]) -> str:
    """Render steps as Mermaid sequence diagram source.

    Args:
        steps: Process steps, in any order.

    Returns:
        Diagram source, or "" for an empty list.
    """
    if not steps:
        return ""

    roles: list[str] = []
    for step in steps:
        role = step.role or DEFAULT_ROLE
        if role not in roles:
            roles.append(role)
    role_ids = {role: f"P{i}" for i, role in enumerate(roles)}

    lines = ["sequenceDiagram", "\tautonumber"]
    for role in roles:
        lines.append(f"\tparticipant {role_ids[role]} as {sanitize_text(role, 20)}")
    lines.append("")

    ordered = sorted(steps, key=lambda s: s.step_number)
    last_role = ordered[0].role or DEFAULT_ROLE

    for index, step in enumerate(ordered):
        role = step.role or DEFAULT_ROLE
        current_id = role_ids[role]
        last_id = role_ids.get(last_role, "P0")
        label = sanitize_text(step.action, 40)

        if index > 0 and role != last_role:
            lines.append(f"\t{last_id}->>{current_id}: {label}")
        else:
            lines.append(f"\tNote over {current_id}: {label}")

        if step.is_decision and step.branches:
            lines.append(f"\talt {sanitize_text(step.action, 20)}?")
            for i, branch in enumerate(step.branches):
                branch_label = sanitize_text(branch.label, 15)
                if i > 0:
                    lines.append(f"\telse {branch_label}")
                lines.append(f"\t\tNote over {current_id}: [{branch_label} Path]")
            lines.append("\tend")

        last_role = role

    return "\n".join(lines) + "\n"


__all__ = ["sanitize_text", "steps_to_sequence_diagram"]
