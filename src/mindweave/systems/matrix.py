"""Adjacency matrix of actor interactions, and its CSV export."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field

from mindweave.systems.models import SystemActor, SystemInteraction, SystemsView

CORNER_HEADER = "Initiator \\ Target"


def cell_key(source_id: str, target_id: str) -> str:
    """Key of the directed cell for a source/target pair."""
    return f"{source_id}-{target_id}"


@dataclass
class AdjacencyMatrix:
    """Interactions grouped by directed actor pair.

    Attributes:
        rows: Actors sorted by name (initiators).
        cols: Same actors (targets).
        cells: Interactions per "<source>-<target>" key, in list order.
    """

    rows: list[SystemActor]
    cols: list[SystemActor]
    cells: dict[str, list[SystemInteraction]] = field(default_factory=dict)

    def cell(self, source_id: str, target_id: str) -> list[SystemInteraction]:
        """Interactions from source to target (empty if none)."""
        return self.cells.get(cell_key(source_id, target_id), [])


def build_matrix(view: SystemsView) -> AdjacencyMatrix:
    """Group a view's interactions into an adjacency matrix.

    Args:
        view: Actors and interactions. Not modified.

    Returns:
        AdjacencyMatrix with name-sorted headers.
    """
    sorted_actors = sorted(view.actors, key=lambda a: a.name.casefold())
    cells: dict[str, list[SystemInteraction]] = {}
    for link in view.interactions:
        cells.setdefault(cell_key(link.source, link.target), []).append(link)
    return AdjacencyMatrix(rows=sorted_actors, cols=list(sorted_actors), cells=cells)


def format_cell(interactions: list[SystemInteraction]) -> str:
    """Render a cell as "[activity] data; ..."."""
    return "; ".join(f"[{i.activity}] {i.data}" for i in interactions)


def matrix_to_csv(matrix: AdjacencyMatrix) -> str:
    """Flatten a matrix to CSV.

    The first row holds target names, the first column initiator names.

    Args:
        matrix: Matrix from build_matrix().

    Returns:
        CSV string.
    """
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")

    writer.writerow([CORNER_HEADER, *(col.name for col in matrix.cols)])
    for row in matrix.rows:
        writer.writerow(
            [row.name, *(format_cell(matrix.cell(row.id, col.id)) for col in matrix.cols)]
        )

    return output.getvalue()


__all__ = [
    "CORNER_HEADER",
    "AdjacencyMatrix",
    "cell_key",
    "build_matrix",
    "format_cell",
    "matrix_to_csv",
]
