from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Hashable, List, Tuple

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class AlignedDocument:
    indices: np.ndarray  # model vocabulary indices, ascending
    counts: np.ndarray  # term counts, same length as indices


@dataclass(frozen=True)
class AlignedCorpus:
    """
    Documents restricted to the model vocabulary.
    doc_ids[i] is the original row id of documents[i]; rows with no
    surviving token are listed in dropped_ids instead.
    """

    doc_ids: Tuple[Hashable, ...]
    documents: Tuple[AlignedDocument, ...]
    dropped_ids: Tuple[Hashable, ...]

    def __len__(self) -> int:
        return len(self.documents)


class VocabularyAligner(ABC):
    """Port: turn cleaned text into per-document counts over a fixed vocabulary."""

    @abstractmethod
    def align(self, cleaned: pd.Series) -> AlignedCorpus: ...

    @abstractmethod
    def tokens(self, text: str) -> List[str]: ...
