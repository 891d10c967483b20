"""Tests for Mermaid sequence diagram text."""

from mindweave.process.models import ProcessStep
from mindweave.process.sequence import sanitize_text, steps_to_sequence_diagram


class TestSanitizeText:
    """Tests for sanitize_text()."""

    def test_strips_mermaid_syntax(self):
        assert sanitize_text('Check "fuel": (main)') == "Check fuel main"

    def test_truncates(self):
        assert sanitize_text("abcdefghij", max_length=4) == "abcd..."

    def test_empty(self):
        assert sanitize_text("") == ""


class TestStepsToSequenceDiagram:
    """Tests for steps_to_sequence_diagram()."""

    def test_empty(self):
        assert steps_to_sequence_diagram([]) == ""

    def test_participants_and_messages(self, approval_steps):
        text = steps_to_sequence_diagram(approval_steps)
        lines = text.splitlines()
        assert lines[0] == "sequenceDiagram"
        assert "\tparticipant P0 as Pilot" in lines
        assert "\tparticipant P1 as Dispatcher" in lines
        assert "\tNote over P0: Submit request" in lines
        assert "\tP0->>P1: Approved" in lines
        assert "\tNote over P1: Archive" in lines
        assert text.endswith("\n")

    def test_decision_alt_block(self, approval_steps):
        lines = steps_to_sequence_diagram(approval_steps).splitlines()
        start = lines.index("\talt Approved?")
        assert lines[start + 1] == "\t\tNote over P1: [Yes Path]"
        assert lines[start + 2] == "\telse No"
        assert lines[start + 3] == "\t\tNote over P1: [No Path]"
        assert lines[start + 4] == "\tend"

    def test_default_role(self):
        text = steps_to_sequence_diagram([ProcessStep(action="Go")])
        assert "participant P0 as User" in text
