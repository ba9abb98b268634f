"""Configuration helpers for the ranking engine."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

from .errors import ConfigurationError


@dataclass(frozen=True)
class EngineConfig:
    """Typed wrapper around the engine configuration dictionary."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    @property
    def damping_factor(self) -> float:
        return float(self.raw.get("damping_factor", DEFAULTS["damping_factor"]))

    @property
    def iterations(self) -> int:
        return int(self.raw.get("iterations", DEFAULTS["iterations"]))

    @property
    def page_rank_weight(self) -> float:
        return float(self.raw.get("page_rank_weight", DEFAULTS["page_rank_weight"]))

    @property
    def top_k(self) -> int:
        return int(self.raw.get("top_k", DEFAULTS["top_k"]))

    @property
    def dedupe_edges(self) -> bool:
        return bool(self.raw.get("dedupe_edges", DEFAULTS["dedupe_edges"]))

    @property
    def workers(self) -> int:
        return int(self.raw.get("workers", DEFAULTS["workers"]))

    def file_name(self, kind: str) -> str:
        files = self.raw.get("files", {})
        return files.get(kind, DEFAULTS["files"][kind])


DEFAULTS: Dict[str, Any] = {
    "damping_factor": 0.85,
    "iterations": 10,
    "page_rank_weight": 1.0,
    "top_k": 10,
    "dedupe_edges": False,
    "workers": 1,
    "files": {
        "registry": "url.tsv",
        "edges": "id-graph.tsv",
    },
}


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Load configuration from YAML, merging with defaults."""

    data: Dict[str, Any] = DEFAULTS.copy()
    data["files"] = dict(DEFAULTS["files"])

    if path is not None and Path(path).exists():
        with Path(path).open("r", encoding="utf-8") as stream:
            user = yaml.safe_load(stream) or {}
        if not isinstance(user, dict):
            raise ConfigurationError(f"{path}: top-level YAML value must be a mapping")
        merge_into(data, user)

    config = EngineConfig(data)
    validate_config(config)
    return config


def merge_into(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge override into base dict."""

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_into(base[key], value)
        else:
            base[key] = value


def validate_config(config: EngineConfig) -> None:
    """Raise ConfigurationError when a value is out of range."""

    try:
        damping = config.damping_factor
        iterations = config.iterations
        top_k = config.top_k
        workers = config.workers
        weight = config.page_rank_weight
        dedupe = config.raw.get("dedupe_edges", DEFAULTS["dedupe_edges"])
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"invalid engine configuration: {exc}") from exc

    if not 0.0 <= damping <= 1.0:
        raise ConfigurationError(f"damping_factor must be within [0, 1], got {damping}")
    if iterations < 0:
        raise ConfigurationError(f"iterations must be non-negative, got {iterations}")
    if top_k < 1:
        raise ConfigurationError(f"top_k must be positive, got {top_k}")
    if workers < 1:
        raise ConfigurationError(f"workers must be at least 1, got {workers}")
    if not math.isfinite(weight):
        raise ConfigurationError(f"page_rank_weight must be finite, got {weight}")
    if not isinstance(dedupe, bool):
        raise ConfigurationError(f"dedupe_edges must be true or false, got {dedupe!r}")
