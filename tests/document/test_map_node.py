"""Tests for MapNode."""

import pytest

from mindweave.document.MapNode import DataSource, MapNode, NodeType


class TestMapNodeApply:
    """Tests for field patches."""

    def test_apply_sets_fields(self):
        node = MapNode(label="Old")
        node.apply({"label": "New", "collapsed": True})
        assert node.label == "New"
        assert node.collapsed is True

    def test_apply_rejects_unknown_field(self):
        node = MapNode(label="A")
        with pytest.raises(ValueError, match="Unknown node fields"):
            node.apply({"colour": "red"})

    def test_apply_rejects_id_change(self):
        node = MapNode(label="A", id="a")
        with pytest.raises(ValueError, match="id cannot be changed"):
            node.apply({"id": "b"})

    def test_apply_allows_same_id(self):
        node = MapNode(label="A", id="a")
        node.apply({"id": "a", "label": "B"})
        assert node.label == "B"


class TestMapNodeClone:
    """Tests for deep copies."""

    def test_clone_is_independent(self, sample_tree):
        clone = sample_tree.clone()
        clone.children[0].label = "Changed"
        clone.children[0].children.append(MapNode(label="Extra"))

        assert sample_tree.children[0].label == "Planning"
        assert len(sample_tree.children[0].children) == 2

    def test_clone_keeps_ids(self, sample_tree):
        clone = sample_tree.clone()
        assert [n.id for n in clone.walk()] == [n.id for n in sample_tree.walk()]

    def test_fresh_ids_are_new(self, sample_tree):
        original = {n.id for n in sample_tree.walk()}
        copied = sample_tree.copy_with_fresh_ids()
        ids = [n.id for n in copied.walk()]
        assert len(set(ids)) == 5
        assert original.isdisjoint(ids)
        assert [n.label for n in copied.walk()] == [n.label for n in sample_tree.walk()]

    def test_fresh_ids_remap_internal_watches(self, sample_tree):
        copied = sample_tree.copy_with_fresh_ids()
        plan, execution = copied.children
        weather, fuel = plan.children
        assert fuel.watched_node_ids == [weather.id]
        assert execution.watched_node_ids == [plan.id]

    def test_fresh_ids_keep_external_watches(self, sample_tree):
        fuel = sample_tree.children[0].children[1]
        fuel.flagged_source_ids = ["weather"]
        copied = fuel.copy_with_fresh_ids()
        assert copied.id != "fuel"
        assert copied.watched_node_ids == ["weather"]
        assert copied.flagged_source_ids == ["weather"]
        assert fuel.id == "fuel"


class TestMapNodeTraversal:
    """Tests for walk() and find()."""

    def test_walk_pre_order(self, sample_tree):
        assert [n.id for n in sample_tree.walk()] == ["root", "plan", "weather", "fuel", "exec"]

    def test_walk_post_order(self, sample_tree):
        assert [n.id for n in sample_tree.walk("post")] == [
            "weather",
            "fuel",
            "plan",
            "exec",
            "root",
        ]

    def test_walk_level_order(self, sample_tree):
        assert [n.id for n in sample_tree.walk("level")] == [
            "root",
            "plan",
            "exec",
            "weather",
            "fuel",
        ]

    def test_walk_unknown_order(self, sample_tree):
        with pytest.raises(ValueError):
            list(sample_tree.walk("sideways"))

    def test_find_watchers(self, sample_tree):
        found = list(sample_tree.find(lambda n: bool(n.watched_node_ids)))
        assert [n.id for n in found] == ["fuel", "exec"]


class TestMapNodeDefaults:
    """Tests for default values."""

    def test_defaults(self):
        node = MapNode(label="A")
        assert node.id
        assert node.node_type == NodeType.INFO
        assert node.children == []
        assert node.cached_details is None
        assert node.is_flagged_for_review is False
        assert node.source is None

    def test_unique_ids(self):
        assert MapNode(label="A").id != MapNode(label="A").id

    def test_leaf_and_counts(self, sample_tree):
        assert sample_tree.child_count() == 2
        assert not sample_tree.is_leaf
        assert sample_tree.children[1].is_leaf

    def test_content_flags(self):
        node = MapNode(label="A", cached_details="text", source=DataSource.USER)
        assert node.has_details
        assert not node.has_process
