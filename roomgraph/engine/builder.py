from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from roomgraph.common.constants import (
    MAX_CONNECTIONS,
    MAX_NAME_CHARS,
    MIN_CONNECTIONS,
    NUM_ROOMS,
    ROOM_NAMES,
)
from roomgraph.common.errors import ConfigurationError
from roomgraph.common.types import RoomType
from roomgraph.engine.state import Graph, Room
from roomgraph.engine.topology import end_reachable

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10_000
DEFAULT_MAX_REBUILDS = 100


class GraphBuilder:
    """Random room graph construction under per-room degree bounds."""

    def __init__(
        self,
        names: Sequence[str] = ROOM_NAMES,
        graph_size: int = NUM_ROOMS,
        min_degree: int = MIN_CONNECTIONS,
        max_degree: int = MAX_CONNECTIONS,
        rng: random.Random | None = None,
        seed: int | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        max_rebuilds: int = DEFAULT_MAX_REBUILDS,
    ) -> None:
        self.names = list(names)
        self.graph_size = graph_size
        self.min_degree = min_degree
        self.max_degree = max_degree
        self.rng = rng if rng is not None else random.Random(seed)
        self.max_attempts = max_attempts
        self.max_rebuilds = max_rebuilds
        self._check_parameters()

    def build(self) -> Graph:
        """Build a graph whose END room is reachable from its START room."""
        for attempt in range(self.max_rebuilds + 1):
            graph = self._init_rooms()
            while not self._is_graph_full(graph):
                self._add_random_connection(graph)
            if end_reachable(graph):
                return graph
            logger.warning("Rebuilding graph: END unreachable from START (attempt %s)", attempt + 1)
        raise ConfigurationError(
            f"No connected graph after {self.max_rebuilds + 1} builds; "
            f"size={self.graph_size} degree={self.min_degree}..{self.max_degree}"
        )

    # Internal helpers

    def _check_parameters(self) -> None:
        if len(set(self.names)) != len(self.names):
            raise ConfigurationError("Room name pool contains duplicates")
        for name in self.names:
            if not name or len(name) > MAX_NAME_CHARS or any(c.isspace() for c in name):
                raise ConfigurationError(
                    f"Invalid room name {name!r}: 1..{MAX_NAME_CHARS} chars, no whitespace"
                )
        if self.graph_size < 2:
            raise ConfigurationError("A graph needs at least a START and an END room")
        if self.graph_size > len(self.names):
            raise ConfigurationError(
                f"Graph size {self.graph_size} exceeds name pool of {len(self.names)}"
            )
        if self.min_degree < 1 or self.min_degree > self.max_degree:
            raise ConfigurationError(
                f"Invalid degree range {self.min_degree}..{self.max_degree}"
            )
        if self.min_degree > self.graph_size - 1:
            raise ConfigurationError(
                f"Minimum degree {self.min_degree} needs more than {self.graph_size} rooms"
            )
        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be positive")

    def _init_rooms(self) -> Graph:
        names = list(self.names)
        # Fisher-Yates; j is drawn from [0, i] inclusive
        for i in range(len(names) - 1, 0, -1):
            j = self.rng.randint(0, i)
            names[i], names[j] = names[j], names[i]
        graph = Graph()
        chosen = names[: self.graph_size]
        for idx, name in enumerate(chosen):
            if idx == 0:
                room_type = RoomType.START
            elif idx == len(chosen) - 1:
                room_type = RoomType.END
            else:
                room_type = RoomType.MID
            graph.add_room(Room(name=name, room_type=room_type))
        return graph

    def _is_graph_full(self, graph: Graph) -> bool:
        return all(room.degree >= self.min_degree for room in graph)

    def _add_random_connection(self, graph: Graph) -> None:
        rooms = list(graph)
        for _ in range(self.max_attempts):
            room_a = self.rng.choice(rooms)
            if room_a.degree >= self.max_degree:
                continue
            room_b = self.rng.choice(rooms)
            if (
                room_b is room_a
                or room_b.degree >= self.max_degree
                or room_a.connects_to(room_b.name)
            ):
                continue
            graph.connect(room_a.name, room_b.name)
            return
        raise ConfigurationError(
            f"No valid connection found in {self.max_attempts} draws; "
            f"size={self.graph_size} degree={self.min_degree}..{self.max_degree}"
        )


def build_graph(
    names: Sequence[str] = ROOM_NAMES,
    graph_size: int = NUM_ROOMS,
    min_degree: int = MIN_CONNECTIONS,
    max_degree: int = MAX_CONNECTIONS,
    rng: random.Random | None = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    max_rebuilds: int = DEFAULT_MAX_REBUILDS,
) -> Graph:
    return GraphBuilder(
        names,
        graph_size=graph_size,
        min_degree=min_degree,
        max_degree=max_degree,
        rng=rng,
        max_attempts=max_attempts,
        max_rebuilds=max_rebuilds,
    ).build()
