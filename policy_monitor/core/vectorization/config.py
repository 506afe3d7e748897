from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class VectorizationConfig:
    lowercase: bool = True
    remove_punctuation: bool = True
    remove_numbers: bool = True  # drop tokens that are purely digits
    min_token_len: int = 1  # drop tokens shorter than this
