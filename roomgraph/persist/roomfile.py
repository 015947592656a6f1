"""Line-oriented room file codec.

ROOM NAME: <name>
CONNECTION 1: <target>
...
ROOM TYPE: <START_ROOM|MID_ROOM|END_ROOM>
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import ValidationError

from roomgraph.common.errors import ParseError
from roomgraph.persist.models import RoomRecord

NAME_LABEL = "ROOM NAME:"
CONNECTION_LABEL = "CONNECTION"
TYPE_LABEL = "ROOM TYPE:"


def render_room(record: RoomRecord) -> str:
    lines = [f"{NAME_LABEL} {record.name}"]
    for idx, target in enumerate(record.connections, start=1):
        lines.append(f"{CONNECTION_LABEL} {idx}: {target}")
    lines.append(f"{TYPE_LABEL} {record.room_type.label()}")
    return "\n".join(lines) + "\n"


def _last_token(text: str) -> str:
    return text.rsplit(" ", 1)[-1]


def parse_room(lines: Iterable[str], source: str | None = None) -> RoomRecord:
    """Parse a room record; the first non-CONNECTION line is the type line."""
    it = iter(line.rstrip("\r\n") for line in lines)
    line = next(it, None)
    if line is None or not line.startswith(NAME_LABEL):
        raise ParseError(f"expected {NAME_LABEL!r} on line 1", source)
    name = _last_token(line[len(NAME_LABEL):])

    connections: list[str] = []
    line = next(it, None)
    while line is not None and line.startswith(CONNECTION_LABEL):
        label, sep, rest = line.partition(":")
        if not sep or not label[len(CONNECTION_LABEL):].strip().isdigit():
            raise ParseError(f"malformed connection line {line!r}", source)
        connections.append(_last_token(rest))
        line = next(it, None)

    if line is None or not line.startswith(TYPE_LABEL):
        raise ParseError(f"expected {TYPE_LABEL!r} after connections", source)
    type_token = _last_token(line[len(TYPE_LABEL):])

    trailing = [extra for extra in it if extra.strip()]
    if trailing:
        raise ParseError(f"unexpected content after room type: {trailing[0]!r}", source)

    try:
        return RoomRecord(name=name, room_type=type_token, connections=connections)
    except ValidationError as exc:
        raise ParseError(_describe(exc), source) from exc


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)
