"""Solver configuration.

Defaults live in :mod:`invsolver.constants`; every field can be overridden via
an ``INVSOLVER_``-prefixed environment variable, and the CLI flags override the
environment in turn.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Mapping

from .constants import DEFAULTS, ENV_PREFIX

_MATCH_MODES = ("bijective", "any_pair")
_UNSUPPORTED_POLICIES = ("raise", "skip")


@dataclass(frozen=True)
class SolverConfig:
    """Knobs for normalization, matching and the solve-graph search."""

    max_normalize_iterations: int = DEFAULTS["max_normalize_iterations"]
    max_depth: int = DEFAULTS["max_depth"]
    match_mode: str = DEFAULTS["match_mode"]
    on_unsupported: str = DEFAULTS["on_unsupported"]
    unknown_inverse_format: str = DEFAULTS["unknown_inverse_format"]

    def __post_init__(self) -> None:
        if self.max_normalize_iterations < 1:
            raise ValueError("max_normalize_iterations must be >= 1")
        if self.max_depth < 1:
            raise ValueError("max_depth must be >= 1")
        if self.match_mode not in _MATCH_MODES:
            raise ValueError(f"match_mode must be one of {_MATCH_MODES}, got {self.match_mode!r}")
        if self.on_unsupported not in _UNSUPPORTED_POLICIES:
            raise ValueError(
                f"on_unsupported must be one of {_UNSUPPORTED_POLICIES}, got {self.on_unsupported!r}"
            )
        if "{name}" not in self.unknown_inverse_format:
            raise ValueError("unknown_inverse_format must contain '{name}'")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SolverConfig":
        env = os.environ if environ is None else environ
        kwargs: dict[str, Any] = {}
        for key in ("max_normalize_iterations", "max_depth"):
            raw = env.get(ENV_PREFIX + key.upper())
            if raw is not None and raw.strip():
                kwargs[key] = int(raw)
        for key in ("match_mode", "on_unsupported", "unknown_inverse_format"):
            raw = env.get(ENV_PREFIX + key.upper())
            if raw:
                kwargs[key] = raw.strip().lower() if key != "unknown_inverse_format" else raw
        return cls(**kwargs)

    def with_overrides(self, **overrides: Any) -> "SolverConfig":
        """Return a copy with every non-``None`` override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


DEFAULT_CONFIG = SolverConfig()

__all__ = ["SolverConfig", "DEFAULT_CONFIG"]
