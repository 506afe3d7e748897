from __future__ import annotations
from io import BytesIO
from typing import Optional
import pandas as pd

from policy_monitor.core.file_handler.base import DataFrameCodecBase

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class CsvCodec(DataFrameCodecBase):
    media_type = "text/csv"

    def __init__(self, **to_csv_kwargs):
        # e.g., to_csv_kwargs: {"index": False}
        self._to_csv_kwargs = {"index": False, **to_csv_kwargs}

    def to_bytes(self, df: pd.DataFrame) -> bytes:
        buf = BytesIO()
        df.to_csv(buf, encoding="utf-8-sig", **self._to_csv_kwargs)
        return buf.getvalue()

    def from_bytes(self, b: bytes) -> pd.DataFrame:
        # utf-8-sig strips the BOM Excel adds to exported CSVs
        return pd.read_csv(BytesIO(b), encoding="utf-8-sig")


class ExcelCodec(DataFrameCodecBase):
    media_type = XLSX_MEDIA_TYPE

    def __init__(self, sheet_name: str = "Sheet1", **to_excel_kwargs):
        self.sheet_name = sheet_name
        self._to_excel_kwargs = {"index": False, **to_excel_kwargs}

    def to_bytes(self, df: pd.DataFrame) -> bytes:
        buf = BytesIO()
        with pd.ExcelWriter(buf, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=self.sheet_name, **self._to_excel_kwargs)
        return buf.getvalue()

    def from_bytes(self, b: bytes) -> pd.DataFrame:
        return pd.read_excel(BytesIO(b), engine="openpyxl")


CODECS = {".csv": CsvCodec, ".xlsx": ExcelCodec}


def codec_for_filename(filename: Optional[str]) -> Optional[DataFrameCodecBase]:
    name = (filename or "").lower()
    for ext, codec in CODECS.items():
        if name.endswith(ext):
            return codec()
    return None
