from __future__ import annotations

from pathlib import Path

import graphviz

from roomgraph.common.types import RoomType
from roomgraph.engine.state import Graph

ROOM_COLORS = {
    RoomType.START: "palegreen",
    RoomType.MID: "khaki",
    RoomType.END: "lightcoral",
}


def room_map(graph: Graph) -> graphviz.Graph:
    g = graphviz.Graph(graph_attr={"overlap": "false"})
    for room in graph:
        g.node(
            room.name,
            label=f"{room.name}\n{room.room_type.label()}",
            shape="rectangle",
            style="filled, rounded",
            fillcolor=ROOM_COLORS[room.room_type],
        )
    drawn: set[frozenset[str]] = set()
    for room in graph:
        for target in room.connections:
            edge = frozenset((room.name, target))
            if edge in drawn:
                continue
            drawn.add(edge)
            g.edge(room.name, target)
    return g


def save_room_map(graph: Graph, path: str | Path) -> str:
    """Write DOT source only; rendering needs the Graphviz binaries."""
    path = Path(path)
    return room_map(graph).save(filename=path.name, directory=str(path.parent))
