"""Shared pytest fixtures for mindweave tests."""

import pytest


@pytest.fixture
def sample_tree():
    """Small mind map.

    Flight Ops (root)
    ├── Planning (plan)
    │   ├── Weather (weather)
    │   └── Fuel (fuel)        watches weather
    └── Execution (exec)       watches plan
    """
    from mindweave.document.MapNode import MapNode

    weather = MapNode(label="Weather", id="weather", description="Winds aloft")
    fuel = MapNode(label="Fuel", id="fuel", watched_node_ids=["weather"])
    plan = MapNode(label="Planning", id="plan", children=[weather, fuel])
    execution = MapNode(label="Execution", id="exec", watched_node_ids=["plan"])
    return MapNode(
        label="Flight Ops",
        id="root",
        description="Everything about a flight",
        children=[plan, execution],
    )


@pytest.fixture
def events():
    """Recording event sink."""
    from mindweave.events import RecordingSink

    return RecordingSink()


@pytest.fixture
def document(sample_tree, events):
    """MindMapDocument loaded with the sample tree."""
    from mindweave.document.builder import MindMapDocument

    return MindMapDocument(root=sample_tree, events=events, source_text="Flight manual")


@pytest.fixture
def approval_steps():
    """Submit -> Approved? (Yes: Archive, No: back to Submit) -> Archive (end)."""
    from mindweave.process.models import ProcessBranch, ProcessStep, StepType

    return [
        ProcessStep(id="s1", step_number=1, action="Submit request", role="Pilot"),
        ProcessStep(
            id="s2",
            step_number=2,
            type=StepType.DECISION,
            action="Approved",
            role="Dispatcher",
            branches=[
                ProcessBranch(label="Yes", target_step_id="s3", id="b-yes"),
                ProcessBranch(label="No", target_step_id="s1", id="b-no"),
            ],
        ),
        ProcessStep(
            id="s3",
            step_number=3,
            action="Archive",
            role="Dispatcher",
            is_end_state=True,
        ),
    ]


@pytest.fixture
def systems_view():
    """Three actors, four interactions.

    A -> B (X), B -> C (X), A -> C (Y), A -> B (Z)
    """
    from mindweave.systems.models import (
        ActorType,
        SystemActor,
        SystemInteraction,
        SystemsView,
    )

    return SystemsView(
        actors=[
            SystemActor(id="A", name="alpha", type=ActorType.PERSON),
            SystemActor(id="B", name="Bravo"),
            SystemActor(id="C", name="Charlie", type=ActorType.EXTERNAL),
        ],
        interactions=[
            SystemInteraction("A", "B", "Send", "X", id="i1"),
            SystemInteraction("B", "C", "Forward", "X", id="i2"),
            SystemInteraction("A", "C", "Report", "Y", id="i3"),
            SystemInteraction("A", "B", "Ping", "Z", id="i4"),
        ],
        activities=["Send", "Forward", "Report", "Ping"],
    )
