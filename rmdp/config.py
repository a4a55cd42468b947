"""Evaluation configuration: frozen, hashable, built from keywords or a dict.

Every evaluation routine accepts ``config=None``; ``None`` means
``DEFAULT_CONFIG``. Only the parallel sweep is configurable; the linear
solve has no knobs.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

# ─── Defaults ─────────────────────────────────────────────────────────────────

DEFAULT_PARALLEL_THRESHOLD: int = 512
"""State count below which sweeps run inline in the calling thread."""

DEFAULT_CHUNK_SIZE: int = 256
"""States handed to a worker per task."""


@dataclass(frozen=True)
class EvaluationConfig:
    """Parallelism settings for the per-state sweeps.

    Attributes:
        max_workers:        Thread-pool size; None lets the executor decide.
        parallel_threshold: Sweeps over fewer states run inline.
        chunk_size:         Contiguous states per worker task.
    """

    max_workers: int | None = None
    parallel_threshold: int = DEFAULT_PARALLEL_THRESHOLD
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self) -> None:
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1 or None, got {self.max_workers}.")
        if self.parallel_threshold < 0:
            raise ValueError(
                f"parallel_threshold must be >= 0, got {self.parallel_threshold}."
            )
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.chunk_size}.")

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> EvaluationConfig:
        """Build from a plain dict; unknown keys raise ValueError."""
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise ValueError(f"Unknown EvaluationConfig keys: {sorted(unknown)}")
        return cls(**d)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_CONFIG = EvaluationConfig()
