from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator, model_validator

from roomgraph.common.constants import MAX_NAME_CHARS
from roomgraph.common.types import RoomType
from roomgraph.engine.state import Room

MAX_RECORD_CONNECTIONS = 64


def _check_name(value: str) -> str:
    if any(c.isspace() for c in value):
        raise ValueError("room names cannot contain whitespace")
    return value


class RoomRecord(BaseModel):
    """One room as read from (or written to) a room file."""

    name: str = Field(min_length=1, max_length=MAX_NAME_CHARS)
    room_type: RoomType
    connections: List[str] = Field(min_length=1, max_length=MAX_RECORD_CONNECTIONS)

    @field_validator("name")
    @classmethod
    def _name_token(cls, value: str) -> str:
        return _check_name(value)

    @field_validator("connections")
    @classmethod
    def _connection_tokens(cls, value: List[str]) -> List[str]:
        for target in value:
            if not target:
                raise ValueError("empty connection name")
            _check_name(target)
        if len(set(value)) != len(value):
            raise ValueError("duplicate connection")
        return value

    @model_validator(mode="after")
    def _no_self_connection(self) -> RoomRecord:
        if self.name in self.connections:
            raise ValueError(f"{self.name} connects to itself")
        return self

    def to_room(self) -> Room:
        return Room(name=self.name, room_type=self.room_type, connections=list(self.connections))

    @classmethod
    def from_room(cls, room: Room) -> RoomRecord:
        return cls(name=room.name, room_type=room.room_type, connections=list(room.connections))
