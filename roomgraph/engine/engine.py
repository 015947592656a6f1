from __future__ import annotations

import logging

from roomgraph.common.errors import InvalidInputError, SessionFinishedError
from roomgraph.common.types import Command, CommandType, RoomType
from roomgraph.engine.clock import TimeQueryTask
from roomgraph.engine.state import Graph, PlayerSession, Room

logger = logging.getLogger(__name__)


class NavigationEngine:
    """Player navigation over a loaded, read-only room graph."""

    def __init__(self, graph: Graph, clock: TimeQueryTask | None = None) -> None:
        self.graph = graph
        self.clock = clock
        self.session = PlayerSession.begin(graph.start)

    def start(self) -> None:
        """Arm the time query so a ``time`` request can be served."""
        if self.clock is not None and not self.clock.armed:
            self.clock.arm()

    def close(self) -> None:
        if self.clock is not None:
            self.clock.close()

    @property
    def current(self) -> Room:
        return self.session.current

    @property
    def path(self) -> list[str]:
        return list(self.session.path)

    @property
    def steps(self) -> int:
        return self.session.steps

    @property
    def finished(self) -> bool:
        return self.session.finished

    def find_room(self, name: str) -> Room | None:
        return self.graph.get(name)

    def list_connections(self, room: Room | None = None) -> list[str]:
        room = room if room is not None else self.session.current
        return list(room.connections)

    def move(self, name: str) -> Room:
        """Walk to a connected room; state is untouched on failure."""
        if self.session.finished:
            raise SessionFinishedError("The END room has already been reached")
        if not self.session.current.connects_to(name):
            raise InvalidInputError(name)
        target = self.graph.get(name)
        if target is None:
            raise InvalidInputError(name)
        self.session.current = target
        self.session.path.append(target.name)
        if target.room_type == RoomType.END:
            self.session.finished = True
            logger.info("END room %s reached in %s steps", target.name, self.session.steps)
        return target

    def query_time(self) -> str:
        if self.clock is None:
            raise RuntimeError("No time query task configured")
        return self.clock.request()

    def execute(self, command: Command) -> str | Room:
        """Run a parsed prompt command: a timestamp for TIME, the new room for MOVE."""
        if command.cmd == CommandType.TIME:
            return self.query_time()
        return self.move(command.arg or "")
