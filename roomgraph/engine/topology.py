from __future__ import annotations

from collections import deque

from roomgraph.common.types import RoomType
from roomgraph.engine.state import Graph


def reachable_component(graph: Graph, start: str) -> set[str]:
    visited: set[str] = {start}
    queue = deque([start])
    while queue:
        cur = queue.popleft()
        room = graph.get(cur)
        if room is None:
            continue
        for n in room.connections:
            if n not in visited:
                visited.add(n)
                queue.append(n)
    return visited


def end_reachable(graph: Graph) -> bool:
    starts = graph.rooms_of_type(RoomType.START)
    ends = graph.rooms_of_type(RoomType.END)
    if len(starts) != 1 or len(ends) != 1:
        return False
    return ends[0].name in reachable_component(graph, starts[0].name)


def structural_violations(graph: Graph) -> list[str]:
    """Return a description of every broken edge or role invariant.

    Rules:
    - Exactly one START and one END room.
    - Every target names a room in the graph.
    - No self edges and no duplicate edges.
    - Edges are symmetric.
    """
    problems: list[str] = []
    for room_type in (RoomType.START, RoomType.END):
        count = len(graph.rooms_of_type(room_type))
        if count != 1:
            problems.append(f"expected exactly one {room_type.value}, found {count}")
    for room in graph:
        seen: set[str] = set()
        for target in room.connections:
            if target == room.name:
                problems.append(f"{room.name} connects to itself")
            elif target in seen:
                problems.append(f"{room.name} lists {target} more than once")
            elif target not in graph.rooms:
                problems.append(f"{room.name} connects to unknown room {target}")
            elif not graph.rooms[target].connects_to(room.name):
                problems.append(f"{room.name} -> {target} has no matching connection back")
            seen.add(target)
    return problems
