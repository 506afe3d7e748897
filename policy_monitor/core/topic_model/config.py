from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class ProjectionConfig:
    max_iter: int = 500  # BFGS iterations per document
    gtol: float = 1e-5  # gradient norm tolerance
