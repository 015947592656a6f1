from __future__ import annotations

from dataclasses import dataclass, field

from roomgraph.common.types import RoomType


@dataclass
class Room:
    name: str
    room_type: RoomType = RoomType.MID
    connections: list[str] = field(default_factory=list)

    @property
    def degree(self) -> int:
        return len(self.connections)

    def connects_to(self, name: str) -> bool:
        return name in self.connections


@dataclass
class Graph:
    """Rooms keyed by name, in creation (or file) order."""

    rooms: dict[str, Room] = field(default_factory=dict)

    def add_room(self, room: Room) -> None:
        if room.name in self.rooms:
            raise ValueError(f"Duplicate room name {room.name!r}")
        self.rooms[room.name] = room

    def connect(self, a: str, b: str) -> None:
        """Add the undirected edge a-b as two directed entries."""
        if a == b:
            raise ValueError(f"Room {a!r} cannot connect to itself")
        room_a = self.rooms[a]
        room_b = self.rooms[b]
        if room_a.connects_to(b) or room_b.connects_to(a):
            raise ValueError(f"Rooms {a!r} and {b!r} are already connected")
        room_a.connections.append(b)
        room_b.connections.append(a)

    def get(self, name: str) -> Room | None:
        return self.rooms.get(name)

    def rooms_of_type(self, room_type: RoomType) -> list[Room]:
        return [r for r in self.rooms.values() if r.room_type == room_type]

    @property
    def start(self) -> Room:
        return _single(self.rooms_of_type(RoomType.START), RoomType.START)

    @property
    def end(self) -> Room:
        return _single(self.rooms_of_type(RoomType.END), RoomType.END)

    def __len__(self) -> int:
        return len(self.rooms)

    def __iter__(self):
        return iter(self.rooms.values())


def _single(rooms: list[Room], room_type: RoomType) -> Room:
    if len(rooms) != 1:
        raise ValueError(f"Expected exactly one {room_type.value}, found {len(rooms)}")
    return rooms[0]


@dataclass
class PlayerSession:
    current: Room
    path: list[str]
    finished: bool = False

    @classmethod
    def begin(cls, start: Room) -> PlayerSession:
        return cls(current=start, path=[start.name], finished=start.room_type == RoomType.END)

    @property
    def steps(self) -> int:
        return len(self.path) - 1
