from __future__ import annotations
from typing import Protocol
import pandas as pd


class DataFrameCodecBase(Protocol):
    """Encode/decode DataFrames (CSV, XLSX)."""

    media_type: str

    def to_bytes(self, df: pd.DataFrame) -> bytes: ...
    def from_bytes(self, b: bytes) -> pd.DataFrame: ...
