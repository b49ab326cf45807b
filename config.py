"""Solver configuration loaded from the environment."""

from __future__ import annotations

from dataclasses import dataclass
import os

# grau máximo de um pixel (4 vizinhos) + diagonal
MIN_ROW_CAPACITY = 5


@dataclass(frozen=True)
class Settings:
    """Runtime settings loaded from environment variables."""

    max_iters: int
    eps: float
    row_capacity: int
    report_every: int
    log_level: str

    @staticmethod
    def from_env() -> "Settings":
        """Create settings from environment variables with defaults."""
        def to_int(value: str | None, default: int) -> int:
            try:
                return int(value) if value is not None else default
            except ValueError:
                return default

        def to_float(value: str | None, default: float) -> float:
            try:
                return float(value) if value is not None else default
            except ValueError:
                return default

        max_iters = max(1, to_int(os.getenv("POISSON_MAX_ITERS"), 10000))
        eps = to_float(os.getenv("POISSON_EPS"), 0.01)
        if eps <= 0:
            eps = 0.01
        row_capacity = max(MIN_ROW_CAPACITY, to_int(os.getenv("POISSON_ROW_CAPACITY"), 8))
        report_every = max(1, to_int(os.getenv("POISSON_REPORT_EVERY"), 100))
        log_level = os.getenv("POISSON_LOG_LEVEL", "INFO").strip().upper() or "INFO"
        return Settings(
            max_iters=max_iters,
            eps=eps,
            row_capacity=row_capacity,
            report_every=report_every,
            log_level=log_level,
        )


settings = Settings.from_env()
