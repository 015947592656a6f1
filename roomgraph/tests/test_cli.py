import io
import sys
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from roomgraph.cli import adventure, buildrooms
from roomgraph.common.errors import ConfigurationError
from roomgraph.common.types import RoomType
from roomgraph.engine.builder import GraphBuilder
from roomgraph.engine.clock import TimeQueryTask
from roomgraph.engine.engine import NavigationEngine
from roomgraph.engine.state import Graph, Room
from roomgraph.persist.base import GraphStore
from roomgraph.persist.files import PathTranscript, RoomFileStore, TimestampRecord


class DummyStore(GraphStore):
    def __init__(self) -> None:
        self.saved: list[Graph] = []

    def save_graph(self, graph: Graph) -> str:
        self.saved.append(graph)
        return f"memory.{len(self.saved)}"

    def load_latest(self) -> Graph:
        return self.saved[-1]


def _house() -> Graph:
    graph = Graph()
    graph.add_room(Room("Kitchen", RoomType.START))
    graph.add_room(Room("Attic", RoomType.MID))
    graph.add_room(Room("Library", RoomType.MID))
    graph.add_room(Room("Study", RoomType.END))
    graph.connect("Kitchen", "Attic")
    graph.connect("Kitchen", "Library")
    graph.connect("Library", "Study")
    return graph


def _play(tmpdir: str, lines: list[str], now=None) -> tuple[int, str, Path]:
    record = TimestampRecord(Path(tmpdir) / "currentTime.txt")
    clock = TimeQueryTask(record, now=now) if now else TimeQueryTask(record)
    engine = NavigationEngine(_house(), clock=clock)
    transcript = PathTranscript(Path(tmpdir) / "tmpfile.1")
    out = io.StringIO()
    status = adventure.run_game(engine, transcript, io.StringIO("".join(lines)), out)
    return status, out.getvalue(), transcript.path


def test_build_and_save_uses_store():
    store = DummyStore()
    graph, name = buildrooms.build_and_save(GraphBuilder(seed=2), store)
    assert name == "memory.1"
    assert store.load_latest() is graph


def test_bad_configuration_writes_nothing():
    store = DummyStore()
    builder = GraphBuilder(graph_size=5, min_degree=3, max_degree=3, seed=1, max_attempts=100)
    with pytest.raises(ConfigurationError):
        buildrooms.build_and_save(builder, store)
    assert store.saved == []


def test_full_game_transcript():
    with tempfile.TemporaryDirectory() as tmpdir:
        status, output, transcript_path = _play(tmpdir, ["Library\n", "Study\n"])
        assert not transcript_path.exists()
    assert status == 0
    assert output == (
        "CURRENT ROOM: Kitchen\n"
        "POSSIBLE CONNECTIONS: Attic, Library.\n"
        "WHERE TO? >\n"
        "CURRENT ROOM: Library\n"
        "POSSIBLE CONNECTIONS: Kitchen, Study.\n"
        "WHERE TO? >\n"
        "YOU HAVE FOUND THE END ROOM. CONGRATULATIONS!\n"
        "YOU TOOK 2 STEPS. YOUR PATH TO VICTORY WAS:\n"
        "Kitchen\n"
        "Library\n"
        "Study\n"
    )


def test_invalid_room_redisplays_same_room():
    with tempfile.TemporaryDirectory() as tmpdir:
        status, output, _ = _play(tmpdir, ["Cellar\n", "Library\n", "Study\n"])
    assert status == 0
    assert output.startswith(
        "CURRENT ROOM: Kitchen\n"
        "POSSIBLE CONNECTIONS: Attic, Library.\n"
        "WHERE TO? >\n"
        "HUH? I DON'T UNDERSTAND THAT ROOM. TRY AGAIN\n\n"
        "CURRENT ROOM: Kitchen\n"
    )
    assert "YOU TOOK 2 STEPS." in output


def test_time_prints_stamp_between_blank_lines():
    with tempfile.TemporaryDirectory() as tmpdir:
        status, output, _ = _play(
            tmpdir,
            ["time\n", "time\n", "Library\n", "Study\n"],
            now=lambda: datetime(2016, 9, 13, 13, 3),
        )
        assert (Path(tmpdir) / "currentTime.txt").read_text(encoding="utf-8") == (
            "1:03pm, Tuesday, September 13, 2016"
        )
    stamp_block = "WHERE TO? >\n1:03pm, Tuesday, September 13, 2016\n\nCURRENT ROOM: Kitchen\n"
    assert output.count(stamp_block) == 2
    assert "YOU TOOK 2 STEPS." in output


def test_end_of_input_exits_non_zero():
    with tempfile.TemporaryDirectory() as tmpdir:
        status, output, transcript_path = _play(tmpdir, ["Library\n"])
        assert not transcript_path.exists()
    assert status == 1
    assert "CONGRATULATIONS" not in output


def test_buildrooms_then_adventure(monkeypatch, capsys):
    with tempfile.TemporaryDirectory() as tmpdir:
        monkeypatch.chdir(tmpdir)
        assert buildrooms.main(["--seed", "5", "--output-map", "map.dot"]) == 0
        rooms_dirs = [p for p in Path(tmpdir).iterdir() if p.name.startswith("rooms.")]
        assert len(rooms_dirs) == 1
        assert len(list(rooms_dirs[0].iterdir())) == 7
        dot = (Path(tmpdir) / "map.dot").read_text(encoding="utf-8")
        assert "START_ROOM" in dot and "END_ROOM" in dot

        graph = RoomFileStore(tmpdir).load_latest()
        route = _shortest_route(graph)
        monkeypatch.setattr(sys, "stdin", io.StringIO("".join(f"{n}\n" for n in route[1:])))
        assert adventure.main([]) == 0
        out = capsys.readouterr().out
        assert f"YOU TOOK {len(route) - 1} STEPS." in out
        assert out.rstrip("\n").endswith("\n".join(route))
        assert not any(p.name.startswith("tmpfile.") for p in Path(tmpdir).iterdir())


def test_adventure_without_rooms_fails(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        monkeypatch.chdir(tmpdir)
        assert adventure.main([]) == 1


def _shortest_route(graph: Graph) -> list[str]:
    start, end = graph.start.name, graph.end.name
    previous = {start: None}
    queue = [start]
    while queue:
        cur = queue.pop(0)
        if cur == end:
            break
        for n in graph.rooms[cur].connections:
            if n not in previous:
                previous[n] = cur
                queue.append(n)
    route = [end]
    while previous[route[-1]] is not None:
        route.append(previous[route[-1]])
    return list(reversed(route))


def test_failed_time_query_keeps_playing():
    def broken_now():
        raise ValueError("clock unavailable")

    with tempfile.TemporaryDirectory() as tmpdir:
        status, output, _ = _play(tmpdir, ["time\n", "Library\n", "Study\n"], now=broken_now)
    assert status == 0
    assert "WHERE TO? >\nUNABLE TO GET THE TIME\n\nCURRENT ROOM: Kitchen\n" in output
    assert "YOU TOOK 2 STEPS." in output


def test_adventure_with_undecodable_room_file_fails(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        monkeypatch.chdir(tmpdir)
        rooms = Path(tmpdir) / "rooms.1"
        rooms.mkdir()
        (rooms / "Kitchen_room").write_bytes(b"ROOM NAME: Kit\xffchen\n")
        assert adventure.main([]) == 1
