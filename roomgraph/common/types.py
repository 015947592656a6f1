from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from roomgraph.common.constants import TIME_COMMAND


class RoomType(str, Enum):
    START = "START_ROOM"
    MID = "MID_ROOM"
    END = "END_ROOM"

    def label(self) -> str:
        return self.value


class CommandType(str, Enum):
    MOVE = "MOVE"
    TIME = "TIME"


@dataclass(frozen=True)
class Command:
    cmd: CommandType
    arg: str | None = None


def parse_command(line: str) -> Command:
    """Interpret one line of prompt input.

    Only the trailing newline is stripped; room names are matched exactly.
    """
    text = line.rstrip("\r\n")
    if text == TIME_COMMAND:
        return Command(CommandType.TIME)
    return Command(CommandType.MOVE, text)
