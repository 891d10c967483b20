"""Systems view model - actors and the interactions between them.

A SystemsView is a flat mesh: actors plus directed, labelled
interactions. Editing helpers return new views and keep the invariant
that every interaction references existing actors.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from uuid import uuid4

_PREFERRED_ROOT = re.compile(r"aircraft|pilot", re.IGNORECASE)


class ActorType(Enum):
    """Kinds of actors in a systems view."""

    PERSON = "person"
    SYSTEM = "system"
    EXTERNAL = "external"


@dataclass(frozen=True)
class SystemActor:
    """A participant in the mesh."""

    id: str
    name: str
    type: ActorType = ActorType.SYSTEM


@dataclass
class SystemInteraction:
    """A directed interaction between two actors.

    Attributes:
        source: ID of the initiating actor.
        target: ID of the receiving actor.
        activity: What happens (e.g. "Request clearance").
        data: Payload exchanged (e.g. "Flight plan").
        sequence_diagram: Cached diagram text for this interaction.
        id: Unique interaction ID.
    """

    source: str
    target: str
    activity: str
    data: str
    sequence_diagram: str | None = None
    id: str = field(default_factory=lambda: uuid4().hex)

    def touches(self, actor_id: str) -> bool:
        """True if the actor is either endpoint."""
        return self.source == actor_id or self.target == actor_id


def slugify_actor_name(name: str) -> str:
    """Derive an actor ID from a display name."""
    return re.sub(r"\s+", "-", name.strip()).lower()


@dataclass
class SystemsView:
    """Actors, interactions and the activity vocabulary of a mesh."""

    actors: list[SystemActor] = field(default_factory=list)
    interactions: list[SystemInteraction] = field(default_factory=list)
    activities: list[str] = field(default_factory=list)

    def find_actor(self, actor_id: str) -> SystemActor | None:
        """Find actor by ID."""
        for actor in self.actors:
            if actor.id == actor_id:
                return actor
        return None

    def find_interaction(self, interaction_id: str) -> SystemInteraction | None:
        for interaction in self.interactions:
            if interaction.id == interaction_id:
                return interaction
        return None

    def interactions_for(self, actor_id: str) -> list[SystemInteraction]:
        """Interactions in which the actor takes part, in list order."""
        return [i for i in self.interactions if i.touches(actor_id)]

    def data_types(self) -> list[str]:
        """Sorted unique payload labels."""
        return sorted({i.data for i in self.interactions})

    def default_root_id(self) -> str | None:
        """Pick a sensible root actor for tree projection.

        Prefers an actor whose name mentions an aircraft or pilot,
        otherwise the first actor.
        """
        for actor in self.actors:
            if _PREFERRED_ROOT.search(actor.name):
                return actor.id
        return self.actors[0].id if self.actors else None

    # ─────────────────────────────────────────────────────────────────────
    # Editing API (returns new views)
    # ─────────────────────────────────────────────────────────────────────

    def add_actor(self, name: str, actor_type: ActorType = ActorType.SYSTEM) -> SystemsView:
        """Add an actor whose ID is derived from its name.

        Raises:
            ValueError: If the name is blank or the derived ID exists.
        """
        if not name.strip():
            raise ValueError("Actor name is required")
        actor_id = slugify_actor_name(name)
        if self.find_actor(actor_id) is not None:
            raise ValueError(f"Actor '{actor_id}' already exists")
        actor = SystemActor(id=actor_id, name=name.strip(), type=actor_type)
        return replace(self, actors=[*self.actors, actor])

    def add_interaction(
        self, source: str, target: str, activity: str, data: str = ""
    ) -> SystemsView:
        """Add an interaction between two existing actors.

        A blank payload defaults to "Signal".

        Raises:
            KeyError: If either actor is missing.
            ValueError: If the activity is blank.
        """
        for actor_id in (source, target):
            if self.find_actor(actor_id) is None:
                raise KeyError(f"Actor '{actor_id}' not found")
        if not activity.strip():
            raise ValueError("Activity is required")
        interaction = SystemInteraction(
            source=source,
            target=target,
            activity=activity.strip(),
            data=data.strip() or "Signal",
        )
        return replace(self, interactions=[*self.interactions, interaction])

    def delete_interaction(self, interaction_id: str) -> SystemsView:
        """Remove an interaction. Unknown IDs leave the view unchanged."""
        return replace(
            self, interactions=[i for i in self.interactions if i.id != interaction_id]
        )

    def delete_actor(self, actor_id: str) -> SystemsView:
        """Remove an actor and every interaction that references it."""
        return replace(
            self,
            actors=[a for a in self.actors if a.id != actor_id],
            interactions=[i for i in self.interactions if not i.touches(actor_id)],
        )

    def set_sequence_diagram(self, interaction_id: str, text: str) -> SystemsView:
        """Cache diagram text on one interaction.

        Raises:
            KeyError: If the interaction is missing.
        """
        if self.find_interaction(interaction_id) is None:
            raise KeyError(f"Interaction '{interaction_id}' not found")
        return replace(
            self,
            interactions=[
                replace(i, sequence_diagram=text) if i.id == interaction_id else i
                for i in self.interactions
            ],
        )

    def dangling_interactions(self) -> list[SystemInteraction]:
        """Interactions whose endpoints do not resolve to actors."""
        ids = {a.id for a in self.actors}
        return [i for i in self.interactions if i.source not in ids or i.target not in ids]


__all__ = [
    "ActorType",
    "SystemActor",
    "SystemInteraction",
    "SystemsView",
    "slugify_actor_name",
]
