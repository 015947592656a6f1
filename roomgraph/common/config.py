from __future__ import annotations

import os
from dataclasses import dataclass

from roomgraph.common.constants import (
    MAX_CONNECTIONS,
    MIN_CONNECTIONS,
    NUM_ROOMS,
    ROOMS_DIR_PREFIX,
    TIME_FILE,
    TRANSCRIPT_PREFIX,
)


def _env_int_or_none(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    return int(value)


@dataclass(frozen=True)
class Settings:
    """Runtime settings loaded from environment variables.

    CLI flags take precedence over these values.
    """

    rooms_prefix: str = os.getenv("ROOMGRAPH_ROOMS_PREFIX", ROOMS_DIR_PREFIX)
    graph_size: int = int(os.getenv("ROOMGRAPH_GRAPH_SIZE", str(NUM_ROOMS)))
    min_degree: int = int(os.getenv("ROOMGRAPH_MIN_DEGREE", str(MIN_CONNECTIONS)))
    max_degree: int = int(os.getenv("ROOMGRAPH_MAX_DEGREE", str(MAX_CONNECTIONS)))
    random_seed: int | None = _env_int_or_none(os.getenv("ROOMGRAPH_RANDOM_SEED"))
    max_attempts: int = int(os.getenv("ROOMGRAPH_MAX_ATTEMPTS", "10000"))
    max_rebuilds: int = int(os.getenv("ROOMGRAPH_MAX_REBUILDS", "100"))
    time_file: str = os.getenv("ROOMGRAPH_TIME_FILE", TIME_FILE)
    transcript_prefix: str = os.getenv("ROOMGRAPH_TRANSCRIPT_PREFIX", TRANSCRIPT_PREFIX)
    log_level: str = os.getenv("ROOMGRAPH_LOG_LEVEL", "WARNING").upper()


settings = Settings()
