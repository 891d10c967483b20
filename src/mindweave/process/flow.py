"""Process flow projection - step list to display tree.

Steps form a graph that may contain cycles (a decision branch can point
back to an earlier step). For layout we need a tree, so the projector
walks from the first step and:

- follows an action to the step with the next step number, unless it is
  an end state;
- fans a decision out into one child per branch, labelled with the
  branch label; unresolved branches become placeholder leaves;
- stops at any step already on the current path and emits a loop node
  instead, which guarantees termination.

A step reachable along two separate paths is projected twice.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from uuid import uuid4

from mindweave.events import EventKind, EventSink, emit
from mindweave.process.models import ProcessStep

UNDEFINED_PATH_TITLE = "Undefined Path"
LOOP_ROLE = "Process Cycle"


class FlowNodeKind(Enum):
    """Kinds of nodes in a projected flow tree."""

    STEP = "step"
    PLACEHOLDER = "placeholder"
    LOOP = "loop"


@dataclass
class FlowNode:
    """A node in the projected flow tree.

    Attributes:
        id: Step ID for real steps; synthetic for placeholders and loops.
        kind: Real step, unresolved-branch placeholder, or loop marker.
        title: Display title.
        step: The projected step (for loops, the step looped back to).
        label: Branch label on the edge from the parent, if any.
        role: Display role.
        children: Child nodes.
    """

    id: str
    kind: FlowNodeKind
    title: str
    step: ProcessStep | None = None
    label: str | None = None
    role: str = ""
    children: list[FlowNode] = field(default_factory=list)

    def walk(self):
        """Iterate this node and descendants, pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


def loop_title(step: ProcessStep) -> str:
    return f"↩ Loop to Step {step.step_number}"


def _loop_node(step: ProcessStep) -> FlowNode:
    return FlowNode(
        id=f"loop-{step.id}-{uuid4().hex[:9]}",
        kind=FlowNodeKind.LOOP,
        title=loop_title(step),
        step=step,
        role=LOOP_ROLE,
    )


def build_flow_tree(
    steps: list[ProcessStep], events: EventSink | None = None
) -> FlowNode | None:
    """Project a step list into a tree rooted at the lowest-numbered step.

    Args:
        steps: Process steps, in any order.
        events: Optional sink for ``cycle_detected`` events.

    Returns:
        Root FlowNode, or None for an empty list.
    """
    if not steps:
        return None

    by_id = {s.id: s for s in steps}
    by_number: dict[int, ProcessStep] = {}
    for s in steps:
        by_number.setdefault(s.step_number, s)

    def _project(step: ProcessStep, on_path: frozenset[str]) -> tuple[FlowNode, list[Any]]:
        # Returns the node and what goes below it, in order: either a
        # finished placeholder node or a (step, edge label) pair to expand.
        if step.id in on_path:
            emit(
                events,
                EventKind.CYCLE_DETECTED,
                f"Cycle back to step {step.step_number}",
                step_id=step.id,
            )
            return _loop_node(step), []

        node = FlowNode(
            id=step.id,
            kind=FlowNodeKind.STEP,
            title=step.action,
            step=step,
            role=step.role,
        )
        below: list[Any] = []
        if step.is_decision:
            for branch in step.branches:
                if branch.target_step_id:
                    target = by_id.get(branch.target_step_id)
                    if target is not None:
                        below.append((target, branch.label))
                else:
                    below.append(
                        FlowNode(
                            id=f"missing-{branch.id}",
                            kind=FlowNodeKind.PLACEHOLDER,
                            title=UNDEFINED_PATH_TITLE,
                            label=branch.label,
                        )
                    )
        elif not step.is_end_state:
            following = by_number.get(step.step_number + 1)
            if following is not None:
                below.append((following, None))
        return node, below

    first = min(steps, key=lambda s: s.step_number)
    root: FlowNode | None = None
    # Explicit stack so long step chains cannot exhaust the interpreter stack
    stack: list[tuple[Any, FlowNode | None, frozenset[str]]] = [
        ((first, None), None, frozenset())
    ]
    while stack:
        item, parent, on_path = stack.pop()
        if isinstance(item, FlowNode):
            node, below = item, []
        else:
            step, label = item
            node, below = _project(step, on_path)
            node.label = label
            on_path = on_path | {step.id}
        if parent is None:
            root = node
        else:
            parent.children.append(node)
        for entry in reversed(below):
            stack.append((entry, node, on_path))
    return root


def count_nodes(root: FlowNode | None) -> int:
    """Number of nodes in a projected tree."""
    return sum(1 for _ in root.walk()) if root else 0


def _flow_fields(node: FlowNode) -> dict[str, Any]:
    result: dict[str, Any] = {
        "id": node.id,
        "type": node.kind.value,
        "title": node.title,
        "role": node.role,
        "children": [],
    }
    if node.label is not None:
        result["label"] = node.label
    if node.step is not None:
        result["stepId"] = node.step.id
        result["stepNumber"] = node.step.step_number
        result["isEndState"] = node.step.is_end_state
        result["isDecision"] = node.step.is_decision
    return result


def flow_tree_to_dict(node: FlowNode) -> dict[str, Any]:
    """Serialize a projected tree for a rendering collaborator."""
    result = _flow_fields(node)
    stack = [(node, result)]
    while stack:
        current, data = stack.pop()
        for child in current.children:
            child_data = _flow_fields(child)
            data["children"].append(child_data)
            stack.append((child, child_data))
    return result


__all__ = [
    "UNDEFINED_PATH_TITLE",
    "FlowNodeKind",
    "FlowNode",
    "build_flow_tree",
    "count_nodes",
    "flow_tree_to_dict",
    "loop_title",
]
