from __future__ import annotations

from abc import ABC, abstractmethod

from roomgraph.engine.state import Graph


class GraphStore(ABC):
    """Abstract storage for generated room graphs."""

    @abstractmethod
    def save_graph(self, graph: Graph) -> str:
        """Persist a graph and return the identifier of its new location."""
        raise NotImplementedError

    @abstractmethod
    def load_latest(self) -> Graph:
        raise NotImplementedError
