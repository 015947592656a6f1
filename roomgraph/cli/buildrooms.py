#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import pathlib
import sys

from roomgraph.common.config import settings
from roomgraph.common.errors import RoomGraphError
from roomgraph.engine.builder import GraphBuilder
from roomgraph.engine.state import Graph
from roomgraph.persist.base import GraphStore
from roomgraph.persist.dot import save_room_map
from roomgraph.persist.files import RoomFileStore

logger = logging.getLogger(__name__)


def build_and_save(builder: GraphBuilder, store: GraphStore) -> tuple[Graph, str]:
    """Build the whole graph first so nothing is written for a bad configuration."""
    graph = builder.build()
    return graph, store.save_graph(graph)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Create a new rooms directory holding a random room graph."
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=settings.random_seed,
        help="Number to use for initializing the random number generator.",
    )
    parser.add_argument(
        "--output-dir",
        type=pathlib.Path,
        default=pathlib.Path("."),
        help="Directory in which the rooms directory is created.",
    )
    parser.add_argument(
        "--output-map",
        type=pathlib.Path,
        help="Also export the room graph in DOT format.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show verbose logging output."
    )
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    logging.basicConfig(
        level=logging.INFO if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        builder = GraphBuilder(
            graph_size=settings.graph_size,
            min_degree=settings.min_degree,
            max_degree=settings.max_degree,
            seed=args.seed,
            max_attempts=settings.max_attempts,
            max_rebuilds=settings.max_rebuilds,
        )
        store = RoomFileStore(args.output_dir, prefix=settings.rooms_prefix)
        graph, dir_name = build_and_save(builder, store)
        if args.output_map:
            save_room_map(graph, args.output_map)
    except RoomGraphError as exc:
        logger.error("%s", exc)
        return 1
    except OSError as exc:
        logger.error("Unable to write room map: %s", exc)
        return 1

    if args.verbose:
        print(dir_name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
