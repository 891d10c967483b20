"""Tests for step list editing helpers."""

from mindweave.process.models import (
    ProcessStep,
    add_branch,
    delete_step,
    find_step,
    insert_step_after,
    renumber_steps,
    update_branch,
)


class TestRenumberSteps:
    """Tests for renumber_steps()."""

    def test_numbers_by_position(self):
        steps = [ProcessStep(id="a", step_number=7), ProcessStep(id="b", step_number=3)]
        result = renumber_steps(steps)
        assert [s.step_number for s in result] == [1, 2]
        assert [s.step_number for s in steps] == [7, 3]


class TestStepEditing:
    """Tests for insert/delete helpers."""

    def test_insert_after(self, approval_steps):
        result = insert_step_after(approval_steps, 0, action="Review")
        assert [s.action for s in result][:2] == ["Submit request", "Review"]
        assert result[1].role == "User"
        assert [s.step_number for s in result] == [1, 2, 3, 4]
        assert len(approval_steps) == 3

    def test_insert_at_front(self, approval_steps):
        result = insert_step_after(approval_steps, -1)
        assert result[0].action == "New Step"
        assert result[1].id == "s1"

    def test_delete_renumbers(self, approval_steps):
        result = delete_step(approval_steps, "s2")
        assert [(s.id, s.step_number) for s in result] == [("s1", 1), ("s3", 2)]

    def test_find_step(self, approval_steps):
        assert find_step(approval_steps, "s3").action == "Archive"
        assert find_step(approval_steps, "zz") is None


class TestBranchEditing:
    """Tests for add_branch() / update_branch()."""

    def test_add_branch(self, approval_steps):
        result = add_branch(approval_steps, "s2")
        assert [b.label for b in result[1].branches] == ["Yes", "No", "New Condition"]
        assert not result[1].branches[2].is_resolved
        assert len(approval_steps[1].branches) == 2

    def test_update_branch_label_and_target(self, approval_steps):
        result = update_branch(approval_steps, "s2", "b-no", label="Rejected", target_step_id="s3")
        branch = result[1].branches[1]
        assert branch.label == "Rejected"
        assert branch.target_step_id == "s3"
        assert approval_steps[1].branches[1].label == "No"

    def test_empty_target_clears(self, approval_steps):
        result = update_branch(approval_steps, "s2", "b-yes", target_step_id="")
        assert result[1].branches[0].target_step_id is None
