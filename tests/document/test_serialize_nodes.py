"""Tests for dict/JSON conversion of nodes, steps and systems views."""

import pytest

from mindweave.document.MapNode import DataSource, MapNode, NodeType, SuggestedPrompts
from mindweave.document.serialize import (
    node_from_dict,
    node_to_dict,
    step_from_dict,
    step_to_dict,
    systems_from_dict,
    systems_to_dict,
    to_markdown_outline,
)
from mindweave.process.models import StepType


class TestNodeDicts:
    """Tests for node_to_dict() / node_from_dict()."""

    def test_camel_case_keys(self):
        node = MapNode(
            label="A",
            id="a",
            node_type=NodeType.PROCESS,
            cached_details="Text",
            details_locked=True,
            collapsed=True,
            watched_node_ids=["b"],
            is_flagged_for_review=True,
            flagged_source_ids=["b"],
            source=DataSource.USER,
        )
        data = node_to_dict(node)
        assert data["nodeType"] == "process"
        assert data["cachedDetails"] == "Text"
        assert data["detailsLocked"] is True
        assert data["_collapsed"] is True
        assert data["watchedNodeIds"] == ["b"]
        assert data["isFlaggedForReview"] is True
        assert data["flaggedSourceIds"] == ["b"]
        assert data["source"] == "user"

    def test_optional_fields_omitted(self):
        data = node_to_dict(MapNode(label="A"))
        assert "cachedDetails" not in data
        assert "cachedProcess" not in data
        assert "_collapsed" not in data
        assert "isFlaggedForReview" not in data

    def test_round_trip_preserves_tree(self, sample_tree, approval_steps):
        sample_tree.children[1].cached_process = approval_steps
        sample_tree.suggested_prompts = SuggestedPrompts(expand="More?")
        restored = node_from_dict(node_to_dict(sample_tree))
        assert node_to_dict(restored) == node_to_dict(sample_tree)
        assert restored.children[1].cached_process[1].branches[1].target_step_id == "s1"

    def test_missing_id_gets_fresh_one(self):
        node = node_from_dict({"label": "No id"})
        assert node.id

    def test_minimal_dict_defaults(self):
        node = node_from_dict({"label": "A", "children": [{"label": "B"}]})
        assert node.node_type == NodeType.INFO
        assert node.children[0].label == "B"
        assert node.source is None

    def test_invalid_enum(self):
        with pytest.raises(ValueError):
            node_from_dict({"label": "A", "nodeType": "sideways"})

    def test_suggested_prompts_extra_keys_ignored(self):
        node = node_from_dict({"label": "A", "suggestedPrompts": {"expand": "x", "other": 1}})
        assert node.suggested_prompts == SuggestedPrompts(expand="x")


class TestStepDicts:
    """Tests for step_to_dict() / step_from_dict()."""

    def test_decision_step(self, approval_steps):
        data = step_to_dict(approval_steps[1])
        assert data["stepNumber"] == 2
        assert data["type"] == "decision"
        assert data["branches"][0] == {"id": "b-yes", "label": "Yes", "targetStepId": "s3"}

    def test_end_state_flag(self, approval_steps):
        assert step_to_dict(approval_steps[2])["isEndState"] is True
        assert "isEndState" not in step_to_dict(approval_steps[0])

    def test_empty_target_is_unresolved(self):
        step = step_from_dict(
            {"type": "decision", "action": "Q", "branches": [{"label": "Yes", "targetStepId": ""}]}
        )
        assert step.type == StepType.DECISION
        assert step.branches[0].target_step_id is None


class TestSystemsDicts:
    """Tests for systems_to_dict() / systems_from_dict()."""

    def test_round_trip(self, systems_view):
        systems_view.interactions[0].sequence_diagram = "sequenceDiagram\n"
        restored = systems_from_dict(systems_to_dict(systems_view))
        assert restored == systems_view

    def test_object_endpoints_accepted(self):
        view = systems_from_dict(
            {
                "actors": [{"id": "a", "name": "A"}, {"id": "b", "name": "B"}],
                "interactions": [
                    {"source": {"id": "a"}, "target": "b", "activity": "Go", "data": "D"}
                ],
            }
        )
        assert view.interactions[0].source == "a"
        assert view.interactions[0].id


class TestMarkdownOutline:
    """Tests for to_markdown_outline()."""

    def test_numbered_headings(self, sample_tree):
        text = to_markdown_outline(sample_tree)
        assert text.startswith("# Flight Ops\n")
        assert "## 1.1 Planning" in text
        assert "### 1.1.2 Fuel" in text
        assert "## 1.2 Execution" in text
        assert "Winds aloft" in text

    def test_without_descriptions(self, sample_tree):
        assert "Winds aloft" not in to_markdown_outline(sample_tree, include_descriptions=False)

    def test_flagged_marker(self, sample_tree):
        sample_tree.children[1].is_flagged_for_review = True
        assert "> Flagged for review" in to_markdown_outline(sample_tree)
