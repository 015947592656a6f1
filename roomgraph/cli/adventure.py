#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from typing import TextIO

from roomgraph.common.config import settings
from roomgraph.common.errors import InvalidInputError, RoomGraphError, StorageError
from roomgraph.common.types import parse_command
from roomgraph.engine.clock import TimeQueryTask
from roomgraph.engine.engine import NavigationEngine
from roomgraph.engine.state import Room
from roomgraph.persist.files import PathTranscript, RoomFileStore, TimestampRecord

logger = logging.getLogger(__name__)

PROMPT = "WHERE TO? >"
INVALID_ROOM = "HUH? I DON'T UNDERSTAND THAT ROOM. TRY AGAIN"
VICTORY = "YOU HAVE FOUND THE END ROOM. CONGRATULATIONS!"


def render_room(room: Room) -> str:
    return (
        f"CURRENT ROOM: {room.name}\n"
        f"POSSIBLE CONNECTIONS: {', '.join(room.connections)}.\n"
    )


def run_game(
    engine: NavigationEngine,
    transcript: PathTranscript,
    stdin: TextIO,
    stdout: TextIO,
) -> int:
    """Drive the prompt loop until the END room is reached or input runs out."""
    transcript.reset()
    transcript.append(engine.current.name)
    engine.start()
    try:
        while not engine.finished:
            stdout.write(render_room(engine.current))
            stdout.write(PROMPT)
            stdout.flush()
            line = stdin.readline()
            if not line:
                stdout.write("\n")
                logger.warning("Input closed before the END room was reached")
                return 1
            command = parse_command(line)
            try:
                result = engine.execute(command)
            except InvalidInputError:
                stdout.write(f"\n{INVALID_ROOM}\n\n")
                continue
            except StorageError as exc:
                logger.error("%s", exc)
                stdout.write("\nUNABLE TO GET THE TIME\n\n")
                continue
            if isinstance(result, str):
                stdout.write(f"\n{result}\n\n")
                continue
            transcript.append(result.name)
            stdout.write("\n")

        stdout.write(f"{VICTORY}\n")
        stdout.write(f"YOU TOOK {engine.steps} STEPS. YOUR PATH TO VICTORY WAS:\n")
        for name in transcript.read():
            stdout.write(f"{name}\n")
        stdout.flush()
        return 0
    finally:
        engine.close()
        transcript.remove()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Walk the most recently built room graph from START to END."
    )
    parser.add_argument(
        "--rooms-dir",
        type=pathlib.Path,
        help="Play this rooms directory instead of the most recent one.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show verbose logging output."
    )
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    logging.basicConfig(
        level=logging.INFO if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    store = RoomFileStore(".", prefix=settings.rooms_prefix)
    try:
        if args.rooms_dir:
            graph = store.load_graph(args.rooms_dir)
        else:
            graph = store.load_latest()
        clock = TimeQueryTask(TimestampRecord(settings.time_file))
        engine = NavigationEngine(graph, clock=clock)
        transcript = PathTranscript.for_process(".", prefix=settings.transcript_prefix)
        return run_game(engine, transcript, sys.stdin, sys.stdout)
    except RoomGraphError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
