"""Tests for session files."""

import json
from datetime import datetime

import pytest

from mindweave.document.serialize import node_to_dict
from mindweave.persistence import (
    Session,
    SessionFormatError,
    dump_session,
    load_session,
    open_document,
    parse_session,
    save_session,
    session_filename,
)


@pytest.fixture
def session(sample_tree, systems_view):
    return Session(
        mind_map=sample_tree,
        session_name="ADS-C Study",
        original_text="ADS-C lets ATC receive reports.",
        systems_view=systems_view,
        tuning={"readerRole": "Pilot"},
        theme="dark",
        settings={"reviewPrompts": True},
    )


class TestSessionFilename:
    """Tests for session_filename()."""

    def test_sanitized_name(self):
        when = datetime(2024, 5, 1, 12, 30, 15, 250000)
        assert session_filename("ADS-C: Study!", when) == (
            "ADS-C--Study--2024-05-01T12-30-15-250.json"
        )

    def test_empty_name(self):
        assert session_filename("", datetime(2024, 1, 1)).startswith("session-")

    def test_long_name_truncated(self):
        name = session_filename("x" * 80, datetime(2024, 1, 1))
        assert name.startswith("x" * 50 + "-2024")


class TestSessionRoundTrip:
    """Tests for dump/parse and save/load."""

    def test_json_keys(self, session):
        data = json.loads(dump_session(session))
        assert data["sessionName"] == "ADS-C Study"
        assert data["originalText"].startswith("ADS-C")
        assert data["mindMap"]["id"] == "root"
        assert data["systemsView"]["actors"][0]["id"] == "A"
        assert data["tuning"] == {"readerRole": "Pilot"}
        assert data["theme"] == "dark"
        assert "timestamp" in data

    def test_parse_restores_fields(self, session):
        loaded = parse_session(dump_session(session))
        assert loaded.session_name == "ADS-C Study"
        assert loaded.systems_view == session.systems_view
        assert loaded.settings == {"reviewPrompts": True}
        assert loaded.timestamp is not None

    def test_load_collapses_all_but_root(self, session):
        loaded = parse_session(dump_session(session))
        assert loaded.mind_map.collapsed is False
        assert all(n.collapsed for n in loaded.mind_map.walk() if n is not loaded.mind_map)

    def test_save_and_load_file(self, session, tmp_path):
        path = save_session(session, tmp_path / "s.json")
        loaded = load_session(path)
        assert [n.id for n in loaded.mind_map.walk()] == [
            n.id for n in session.mind_map.walk()
        ]

    def test_save_into_directory(self, session, tmp_path):
        path = save_session(session, tmp_path)
        assert path.parent == tmp_path
        assert path.name.startswith("ADS-C-Study-")

    def test_minimal_session(self, sample_tree):
        loaded = parse_session(json.dumps({"mindMap": node_to_dict(sample_tree)}))
        assert loaded.session_name == "Untitled Session"
        assert loaded.systems_view is None
        assert loaded.original_text == ""


class TestSessionErrors:
    """Tests for SessionFormatError."""

    def test_invalid_json(self):
        with pytest.raises(SessionFormatError):
            parse_session("{not json")

    def test_missing_mind_map(self):
        with pytest.raises(SessionFormatError, match="mindMap"):
            parse_session(json.dumps({"sessionName": "x"}))

    def test_bad_node_data(self):
        with pytest.raises(SessionFormatError):
            parse_session(json.dumps({"mindMap": {"label": "A", "nodeType": "odd"}}))


class TestOpenDocument:
    """Tests for open_document()."""

    def test_single_imported_entry(self, session):
        loaded = parse_session(dump_session(session))
        document = open_document(loaded, capacity=5)
        assert len(document.history) == 1
        assert document.history.current.description == "Imported Session"
        assert document.history.capacity == 5
        assert document.source_text == session.original_text
