import json
from pathlib import Path

import pytest

from invsolver.graph import EquationGraph
from invsolver.model import Equation, number, simple_mul, variable


def _small_graph() -> EquationGraph:
    graph, root = EquationGraph.new(Equation([simple_mul(number(2), variable("x")), number(6)]))
    child = graph.add_path(Equation([variable("x"), number(3)]), ["2 != 0"], root)
    graph.add_path(Equation([variable("x"), number(3)]), [], child)
    return graph


def test_add_path_links_child_to_parent() -> None:
    graph = _small_graph()
    assert len(graph) == 3
    assert graph.constraints(0, 1) == ["2 != 0"]
    assert graph.constraints(2, 1) == []
    assert graph.path(0, 2) == [0, 1, 2]


def test_add_path_rejects_unknown_parent() -> None:
    graph, _ = EquationGraph.new(Equation([variable("x"), number(1)]))
    with pytest.raises(KeyError):
        graph.add_path(Equation([variable("x"), number(1)]), [], 7)


def test_to_dict_shape() -> None:
    data = _small_graph().to_dict()
    assert [n["id"] for n in data["nodes"]] == [0, 1, 2]
    assert data["edges"][0] == {"source": 0, "target": 1, "constraints": ["2 != 0"]}
    assert data["nodes"][1]["equation"]["sides"][1] == {"sign": "+", "number": "3"}


def test_json_round_trip() -> None:
    graph = _small_graph()
    restored = EquationGraph.from_json(graph.to_json())
    assert restored.to_dict() == graph.to_dict()
    assert restored.add_node(Equation([variable("y"), number(0)])) == 3
    json.loads(graph.to_json(indent=None))


def test_to_dot_lists_nodes_and_labelled_edges() -> None:
    dot = _small_graph().to_dot()
    assert dot.startswith("graph solve {")
    assert '0 [label="2 * x = 6"];' in dot
    assert '0 -- 1 [label="2 != 0"];' in dot


def test_render_writes_png(tmp_path: Path) -> None:
    out = _small_graph().render(tmp_path / "solve.png")
    path = Path(out)
    assert path.exists()
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
