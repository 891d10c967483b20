"""Tests for SystemsView editing and queries."""

import pytest

from mindweave.systems.models import ActorType, slugify_actor_name


class TestSystemsQueries:
    """Tests for lookup helpers."""

    def test_data_types_sorted_unique(self, systems_view):
        assert systems_view.data_types() == ["X", "Y", "Z"]

    def test_interactions_for(self, systems_view):
        assert [i.id for i in systems_view.interactions_for("C")] == ["i2", "i3"]

    def test_default_root_prefers_aircraft(self, systems_view):
        assert systems_view.default_root_id() == "A"
        view = systems_view.add_actor("Aircraft FMS")
        assert view.default_root_id() == "aircraft-fms"


class TestSystemsEditing:
    """Tests for the editing API."""

    def test_add_actor(self, systems_view):
        view = systems_view.add_actor("  Ground Station ", ActorType.EXTERNAL)
        actor = view.find_actor("ground-station")
        assert actor.name == "Ground Station"
        assert actor.type == ActorType.EXTERNAL
        assert systems_view.find_actor("ground-station") is None

    def test_add_actor_rejects_duplicates_and_blank(self, systems_view):
        view = systems_view.add_actor("Delta")
        with pytest.raises(ValueError):
            view.add_actor("delta")
        with pytest.raises(ValueError):
            view.add_actor("   ")

    def test_add_interaction_defaults_payload(self, systems_view):
        view = systems_view.add_interaction("B", "A", "Acknowledge")
        assert view.interactions[-1].data == "Signal"
        assert len(systems_view.interactions) == 4

    def test_add_interaction_validation(self, systems_view):
        with pytest.raises(KeyError):
            systems_view.add_interaction("A", "ghost", "Go")
        with pytest.raises(ValueError):
            systems_view.add_interaction("A", "B", " ")

    def test_delete_actor_cascades(self, systems_view):
        view = systems_view.delete_actor("C")
        assert view.find_actor("C") is None
        assert [i.id for i in view.interactions] == ["i1", "i4"]
        assert view.dangling_interactions() == []

    def test_delete_interaction(self, systems_view):
        view = systems_view.delete_interaction("i3")
        assert [i.id for i in view.interactions] == ["i1", "i2", "i4"]

    def test_set_sequence_diagram(self, systems_view):
        view = systems_view.set_sequence_diagram("i2", "sequenceDiagram\n")
        assert view.find_interaction("i2").sequence_diagram == "sequenceDiagram\n"
        assert systems_view.find_interaction("i2").sequence_diagram is None
        with pytest.raises(KeyError):
            systems_view.set_sequence_diagram("nope", "x")

    def test_slugify(self):
        assert slugify_actor_name(" Air  Traffic Control ") == "air-traffic-control"
