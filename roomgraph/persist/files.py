from __future__ import annotations

import logging
import os
import time
from collections.abc import Iterable
from pathlib import Path

from roomgraph.common.constants import (
    ROOM_FILE_SUFFIX,
    ROOMS_DIR_PREFIX,
    TIME_FILE,
    TRANSCRIPT_PREFIX,
)
from roomgraph.common.errors import DiscoveryError, ParseError, StorageError
from roomgraph.engine.state import Graph
from roomgraph.engine.topology import structural_violations
from roomgraph.persist.base import GraphStore
from roomgraph.persist.models import RoomRecord
from roomgraph.persist.roomfile import parse_room, render_room

logger = logging.getLogger(__name__)


def select_latest(entries: Iterable[tuple[str, float]], prefix: str = ROOMS_DIR_PREFIX) -> str:
    """Pick the most recently modified entry whose name starts with ``prefix``.

    Only a strictly greater mtime replaces the current choice, so the first
    entry wins an exact tie.
    """
    best: str | None = None
    best_mtime = 0.0
    for name, mtime in entries:
        if not name.startswith(prefix):
            continue
        if best is None or mtime > best_mtime:
            best = name
            best_mtime = mtime
    if best is None:
        raise DiscoveryError(f"No directory starting with {prefix!r} found")
    return best


def scan_directories(root: Path) -> list[tuple[str, float]]:
    """List (name, mtime) for every subdirectory of ``root``."""
    try:
        with os.scandir(root) as it:
            return [
                (entry.name, entry.stat().st_mtime)
                for entry in it
                if entry.is_dir(follow_symlinks=True)
            ]
    except OSError as exc:
        raise StorageError(f"Unable to scan {root}: {exc}") from exc


class RoomFileStore(GraphStore):
    """Graphs stored as one text file per room inside ``<prefix><token>`` directories."""

    def __init__(self, root: str | Path = ".", prefix: str = ROOMS_DIR_PREFIX) -> None:
        self.root = Path(root)
        self.prefix = prefix

    def new_directory_name(self) -> str:
        return f"{self.prefix}{os.getpid()}.{time.time_ns()}"

    def save_graph(self, graph: Graph) -> str:
        records = [RoomRecord.from_room(room) for room in graph]
        base = self.new_directory_name()
        dir_path = self.root / base
        try:
            suffix = 0
            while True:
                try:
                    dir_path.mkdir(mode=0o755)
                    break
                except FileExistsError:
                    # coarse clocks can repeat a timestamp within one process
                    suffix += 1
                    dir_path = self.root / f"{base}.{suffix}"
            for record in records:
                room_path = dir_path / f"{record.name}{ROOM_FILE_SUFFIX}"
                room_path.write_text(render_room(record), encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Unable to write rooms to {dir_path}: {exc}") from exc
        logger.info("Wrote %s rooms to %s", len(records), dir_path)
        return str(dir_path)

    def latest_directory(self) -> Path:
        return self.root / select_latest(scan_directories(self.root), self.prefix)

    def load_latest(self) -> Graph:
        dir_path = self.latest_directory()
        logger.info("Loading rooms from %s", dir_path)
        return self.load_graph(dir_path)

    def load_graph(self, dir_path: str | Path) -> Graph:
        dir_path = Path(dir_path)
        try:
            room_files = sorted(p for p in dir_path.iterdir() if p.is_file())
        except OSError as exc:
            raise StorageError(f"Unable to list {dir_path}: {exc}") from exc
        if not room_files:
            raise ParseError("no room files", str(dir_path))

        graph = Graph()
        for room_path in room_files:
            try:
                with room_path.open("r", encoding="utf-8") as fh:
                    record = parse_room(fh, source=room_path.name)
            except UnicodeDecodeError as exc:
                raise ParseError(f"not valid UTF-8 text ({exc.reason})", room_path.name) from exc
            except OSError as exc:
                raise StorageError(f"Unable to read {room_path}: {exc}") from exc
            try:
                graph.add_room(record.to_room())
            except ValueError as exc:
                raise ParseError(str(exc), room_path.name) from exc

        problems = structural_violations(graph)
        if problems:
            raise ParseError("; ".join(problems), str(dir_path))
        return graph


class PathTranscript:
    """Append-only record of visited rooms, one name per line."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @classmethod
    def for_process(cls, root: str | Path = ".", prefix: str = TRANSCRIPT_PREFIX) -> PathTranscript:
        return cls(Path(root) / f"{prefix}{os.getpid()}")

    def reset(self) -> None:
        try:
            self.path.write_text("", encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Unable to create {self.path}: {exc}") from exc

    def append(self, name: str) -> None:
        try:
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(f"{name}\n")
        except OSError as exc:
            raise StorageError(f"Unable to append to {self.path}: {exc}") from exc

    def read(self) -> list[str]:
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                return [line.rstrip("\n") for line in fh if line.strip()]
        except OSError as exc:
            raise StorageError(f"Unable to read {self.path}: {exc}") from exc

    def remove(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Unable to delete {self.path}: {exc}") from exc


class TimestampRecord:
    """Single-slot time string stored in a file, overwritten on every write."""

    def __init__(self, path: str | Path = TIME_FILE) -> None:
        self.path = Path(path)

    def write(self, text: str) -> None:
        with self.path.open("w", encoding="utf-8") as fh:
            fh.write(text)

    def read(self) -> str:
        with self.path.open("r", encoding="utf-8") as fh:
            return fh.readline().rstrip("\n")
