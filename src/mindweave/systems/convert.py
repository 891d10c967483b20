"""Convert systems-view content into mind-map nodes.

Used when the user adds an actor, an interaction or a payload concept
from the systems view into the main document.
"""

from __future__ import annotations

from mindweave.document.MapNode import DataSource, MapNode, NodeNature, NodeType
from mindweave.systems.models import SystemActor, SystemInteraction, SystemsView


def concept_to_node(label: str) -> MapNode:
    """Node for an abstract data type / concept."""
    return MapNode(
        label=label,
        description="Data Type / System Concept",
        node_type=NodeType.INFO,
        nature=NodeNature.FACT,
        source=DataSource.AI,
    )


def interaction_to_node(interaction: SystemInteraction) -> MapNode:
    """Node for a single interaction, labelled by its payload."""
    return MapNode(
        label=interaction.data,
        description=f"Activity: {interaction.activity}",
        node_type=NodeType.PROCESS,
        nature=NodeNature.FACT,
        source=DataSource.AI,
    )


def actor_to_node(view: SystemsView, actor: SystemActor) -> MapNode:
    """Node for an actor with one child per related interaction.

    Each child is labelled by the payload and described relative to the
    actor ("<activity> to X" when the actor initiates, "from X" otherwise).
    """
    children = []
    for rel in view.interactions_for(actor.id):
        is_source = rel.source == actor.id
        other = view.find_actor(rel.target if is_source else rel.source)
        other_name = other.name if other else "Unknown"
        direction = "to" if is_source else "from"
        children.append(
            MapNode(
                label=rel.data,
                description=f"{rel.activity} {direction} {other_name}",
                node_type=NodeType.PROCESS,
                nature=NodeNature.FACT,
                source=DataSource.AI,
            )
        )
    return MapNode(
        label=actor.name,
        description=f"System Actor: {actor.type.value}",
        node_type=NodeType.INFO,
        nature=NodeNature.FACT,
        source=DataSource.AI,
        children=children,
    )


__all__ = ["concept_to_node", "interaction_to_node", "actor_to_node"]
