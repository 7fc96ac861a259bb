import pytest

from invsolver.config import DEFAULT_CONFIG, SolverConfig


def test_defaults() -> None:
    assert DEFAULT_CONFIG.max_normalize_iterations == 64
    assert DEFAULT_CONFIG.max_depth == 64
    assert DEFAULT_CONFIG.match_mode == "bijective"
    assert DEFAULT_CONFIG.on_unsupported == "raise"
    assert DEFAULT_CONFIG.unknown_inverse_format == "{name}"


def test_from_env_reads_prefixed_variables() -> None:
    config = SolverConfig.from_env(
        {
            "INVSOLVER_MAX_DEPTH": "5",
            "INVSOLVER_MATCH_MODE": "ANY_PAIR",
            "INVSOLVER_UNKNOWN_INVERSE_FORMAT": "inv_{name}",
            "UNRELATED": "1",
        }
    )
    assert config.max_depth == 5
    assert config.match_mode == "any_pair"
    assert config.unknown_inverse_format == "inv_{name}"
    assert config.on_unsupported == "raise"


def test_from_env_uses_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INVSOLVER_ON_UNSUPPORTED", "skip")
    assert SolverConfig.from_env().on_unsupported == "skip"


def test_with_overrides_ignores_none() -> None:
    config = DEFAULT_CONFIG.with_overrides(max_depth=3, match_mode=None)
    assert config.max_depth == 3
    assert config.match_mode == "bijective"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_depth": 0},
        {"max_normalize_iterations": 0},
        {"match_mode": "fuzzy"},
        {"on_unsupported": "ignore"},
        {"unknown_inverse_format": "inverse"},
    ],
)
def test_invalid_values_rejected(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        SolverConfig(**kwargs)
