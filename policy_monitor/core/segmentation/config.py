from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class SegmentationConfig:
    user_dict_path: Optional[Path] = None  # jieba user dictionary (word [freq] [tag])
    stopwords: FrozenSet[str] = field(default_factory=frozenset)
    excluded_tokens: FrozenSet[str] = field(default_factory=frozenset)
    hmm: bool = True  # jieba HMM for unknown words ("mix" segmentation)
    drop_symbols: bool = True  # drop whitespace / punctuation-only tokens
