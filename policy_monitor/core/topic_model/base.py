from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Protocol

from policy_monitor.core.topic_model.model import StmModel


class ModelCodecBase(Protocol):
    """Decode a model artifact on disk into an StmModel."""

    def load(self, path: Path) -> StmModel: ...


class TopicProjector(ABC):
    """Port: project aligned documents onto a fixed topic space."""

    @abstractmethod
    def project(self, corpus): ...
