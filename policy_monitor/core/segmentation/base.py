from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional


class Segmenter(ABC):
    """Port: split raw Chinese text into a list of word tokens."""

    @abstractmethod
    def segment(self, text: Optional[str]) -> List[str]: ...
