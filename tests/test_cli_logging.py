import json
import logging
from pathlib import Path
from typing import Any, Iterator

import pytest

from invsolver import cli


@pytest.fixture
def isolated_logging() -> Iterator[None]:
    root = logging.getLogger()
    old_handlers = root.handlers[:]
    old_level = root.level
    for h in old_handlers:
        root.removeHandler(h)

    pkg_logger = logging.getLogger("invsolver")
    pkg_old_handlers = pkg_logger.handlers[:]
    pkg_old_level = pkg_logger.level
    pkg_old_propagate = pkg_logger.propagate
    try:
        yield
    finally:
        for h in old_handlers:
            root.addHandler(h)
        root.setLevel(old_level)
        for h in pkg_logger.handlers[len(pkg_old_handlers):]:
            pkg_logger.removeHandler(h)
        pkg_logger.setLevel(pkg_old_level)
        pkg_logger.propagate = pkg_old_propagate


def test_log_level_is_isolated(isolated_logging: None, capsys: Any) -> None:
    logging.getLogger().debug("root debug")
    cli.main(["2*x = 6", "--log-level", "DEBUG"])
    captured = capsys.readouterr()
    assert "DEBUG:invsolver." in captured.err
    assert "root debug" not in captured.err
    assert "x = 3    where 2 != 0" in captured.out


def test_default_level_keeps_stderr_quiet(isolated_logging: None, capsys: Any) -> None:
    cli.main(["--demo"])
    captured = capsys.readouterr()
    assert captured.err == ""
    assert captured.out.strip() == "x = 2    where 2 != 0"


def test_solver_errors_exit_with_message(isolated_logging: None) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["x + y = 1"])
    assert str(exc.value.code).startswith("Error: ")


def test_skip_policy_and_verify(isolated_logging: None, capsys: Any) -> None:
    cli.main(["x + y = 1", "--on-unsupported", "skip"])
    assert capsys.readouterr().out.strip() == "x + y = 1"
    cli.main(["x + 3 = 7", "--verify"])
    assert capsys.readouterr().out.strip() == "x = 4    [verified]"


def test_json_and_rpn_output(isolated_logging: None, tmp_path: Path, capsys: Any) -> None:
    out = tmp_path / "graph.json"
    cli.main(["2*x = 6", "--rpn", "--json", str(out)])
    assert capsys.readouterr().out.strip() == "x = 3    where 2 != 0"
    data = json.loads(out.read_text("utf-8"))
    assert len(data["nodes"]) == 3
    assert data["edges"][0]["constraints"] == ["2 != 0"]


def test_environment_config_is_applied(isolated_logging: None, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INVSOLVER_MAX_DEPTH", "1")
    with pytest.raises(SystemExit) as exc:
        cli.main(["2*x + 3 = 7"])
    assert "deeper than 1" in str(exc.value.code)
