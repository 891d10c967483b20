"""Process module - Step lists and their projections.

Exports:
- StepType, ProcessBranch, ProcessStep: step model
- build_flow_tree, FlowNode, FlowNodeKind: flow projection with cycle handling
- auto_link_decisions: happy-path linking for generated decisions
- steps_to_sequence_diagram: Mermaid sequence diagram source
"""

from mindweave.process.autolink import POSITIVE_KEYWORDS, auto_link_decisions
from mindweave.process.flow import FlowNode, FlowNodeKind, build_flow_tree, flow_tree_to_dict
from mindweave.process.models import (
    ProcessBranch,
    ProcessStep,
    StepType,
    add_branch,
    delete_step,
    insert_step_after,
    renumber_steps,
    update_branch,
)
from mindweave.process.sequence import steps_to_sequence_diagram

__all__ = [
    "StepType",
    "ProcessBranch",
    "ProcessStep",
    "renumber_steps",
    "insert_step_after",
    "delete_step",
    "add_branch",
    "update_branch",
    "FlowNode",
    "FlowNodeKind",
    "build_flow_tree",
    "flow_tree_to_dict",
    "POSITIVE_KEYWORDS",
    "auto_link_decisions",
    "steps_to_sequence_diagram",
]
