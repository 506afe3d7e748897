from __future__ import annotations
from abc import ABC, abstractmethod


class TextCleaner(ABC):
    @abstractmethod
    def clean(self, text: str) -> str: ...
