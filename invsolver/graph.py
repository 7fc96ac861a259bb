"""Solve graph: equations as nodes, constraint lists as edges."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import networkx as nx

from .model import Equation, equation_from_dict, equation_to_dict
from .printer import equation_to_infix

__all__ = ["EquationGraph"]

logger = logging.getLogger("invsolver.graph")


class EquationGraph:
    """Undirected graph whose node payload is an :class:`Equation`.

    Node indices are dense integers handed out in insertion order, so a child
    always has a larger index than the node it was derived from.
    """

    def __init__(self) -> None:
        self.graph = nx.Graph()
        self._next_index = 0

    @classmethod
    def new(cls, equation: Equation) -> Tuple["EquationGraph", int]:
        graph = cls()
        return graph, graph.add_node(equation)

    def add_node(self, equation: Equation) -> int:
        index = self._next_index
        self._next_index += 1
        self.graph.add_node(index, equation=equation)
        return index

    def add_path(self, equation: Equation, constraints: List[str], parent: int) -> int:
        """Add ``equation`` as a child of ``parent`` and return its index."""
        if parent not in self.graph:
            raise KeyError(f"no node {parent} in graph")
        child = self.add_node(equation)
        self.graph.add_edge(parent, child, constraints=list(constraints))
        return child

    def __getitem__(self, index: int) -> Equation:
        return self.graph.nodes[index]["equation"]

    def __setitem__(self, index: int, equation: Equation) -> None:
        self.graph.nodes[index]["equation"] = equation

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    def __contains__(self, index: object) -> bool:
        return index in self.graph

    def nodes(self) -> Iterator[Tuple[int, Equation]]:
        for index, data in self.graph.nodes(data=True):
            yield index, data["equation"]

    def edges(self) -> Iterator[Tuple[int, int, List[str]]]:
        for u, v, data in self.graph.edges(data=True):
            source, target = (u, v) if u < v else (v, u)
            yield source, target, data["constraints"]

    def constraints(self, a: int, b: int) -> List[str]:
        return self.graph.edges[a, b]["constraints"]

    def path(self, source: int, target: int) -> List[int]:
        return nx.shortest_path(self.graph, source, target)

    # ------------------------------------------------------------------
    # serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [{"id": i, "equation": equation_to_dict(eq)} for i, eq in self.nodes()],
            "edges": [
                {"source": s, "target": t, "constraints": list(c)} for s, t, c in self.edges()
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EquationGraph":
        graph = cls()
        for node in sorted(data.get("nodes", []), key=lambda n: n["id"]):
            graph.graph.add_node(int(node["id"]), equation=equation_from_dict(node["equation"]))
        for edge in data.get("edges", []):
            graph.graph.add_edge(
                int(edge["source"]), int(edge["target"]), constraints=list(edge.get("constraints", []))
            )
        graph._next_index = max(graph.graph.nodes, default=-1) + 1
        return graph

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> "EquationGraph":
        return cls.from_dict(json.loads(text))

    def to_dot(self) -> str:
        lines = ["graph solve {"]
        for index, equation in self.nodes():
            lines.append(f'    {index} [label="{_escape(equation_to_infix(equation))}"];')
        for source, target, constraints in self.edges():
            label = _escape(", ".join(constraints))
            lines.append(f'    {source} -- {target} [label="{label}"];')
        lines.append("}")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # rendering
    # ------------------------------------------------------------------
    def render(self, path: str | Path, *, root: int = 0) -> str:
        """Draw the graph in layers by distance from ``root`` to a PNG file."""
        # Lazy import so the package works without matplotlib unless a picture is requested
        try:
            import matplotlib  # type: ignore
        except Exception as exc:  # pragma: no cover - environment-dependent
            raise RuntimeError("matplotlib is required to render the solve graph") from exc
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt  # type: ignore

        layered = self.graph.copy()
        depths = nx.single_source_shortest_path_length(layered, root) if root in layered else {}
        for index in layered.nodes:
            layered.nodes[index]["layer"] = depths.get(index, 0)
        pos = nx.multipartite_layout(layered, subset_key="layer", align="horizontal", scale=2.0)

        fig = plt.figure(figsize=(min(24, max(6, 2 * len(layered))), 7))
        nx.draw_networkx_nodes(layered, pos, node_size=300, node_color="#97c2fc")
        labels = {i: equation_to_infix(eq) for i, eq in self.nodes()}
        nx.draw_networkx_labels(layered, pos, labels=labels, font_size=8)
        nx.draw_networkx_edges(layered, pos)
        edge_labels = {(s, t): ", ".join(c) for s, t, c in self.edges() if c}
        if edge_labels:
            nx.draw_networkx_edge_labels(layered, pos, edge_labels=edge_labels, font_size=7)
        plt.axis("off")
        plt.tight_layout()
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(out, format="png", dpi=150, bbox_inches="tight")
        plt.close(fig)
        logger.info("solve graph rendered to %s", out)
        return str(out)


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')
