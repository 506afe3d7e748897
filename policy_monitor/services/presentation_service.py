from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from datetime import date
from io import BytesIO
from typing import Any, Dict, List, Literal, Optional

import matplotlib
import pandas as pd

from policy_monitor.core.aggregation.aggregator import TopicAggregator
from policy_monitor.core.file_handler.codec import ExcelCodec
from policy_monitor.services.scoring_service import ScoringResult

matplotlib.use("Agg")  # headless: charts are rendered to PNG bytes
import matplotlib.pyplot as plt

logger = logging.getLogger(__name__)

UPLOADED_SUFFIX = " (uploaded)"

CJK_FONTS = ["Noto Sans CJK SC", "Source Han Sans SC", "SimHei", "Microsoft YaHei"]


def _records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    # NaN -> null, timestamps -> ISO strings
    return json.loads(df.to_json(orient="records", force_ascii=False, date_format="iso"))


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: bytes
    media_type: str


class PresentationService:
    """Views and export built from a ScoringResult."""

    def __init__(
        self,
        aggregator: TopicAggregator,
        *,
        preview_rows: int = 5,
        top_n: int = 10,
        codec: Optional[ExcelCodec] = None,
    ):
        self.aggregator = aggregator
        self.preview_rows = preview_rows
        self.top_n = top_n
        self.codec = codec or ExcelCodec()

    # ------------- views -------------

    def preview(self, result: ScoringResult) -> List[Dict[str, Any]]:
        return _records(result.raw.head(self.preview_rows))

    def top_topics(self, result: ScoringResult) -> List[Dict[str, Any]]:
        return _records(self.aggregator.top_topics(result.theta, n=self.top_n))

    def groups(self, result: ScoringResult) -> List[Dict[str, Any]]:
        return _records(self.aggregator.group_totals(result.theta))

    def top_topics_chart(self, result: ScoringResult) -> bytes:
        top = self.aggregator.top_topics(result.theta, n=self.top_n)
        with plt.rc_context(
            {"font.sans-serif": CJK_FONTS + plt.rcParams["font.sans-serif"]}
        ):
            fig, ax = plt.subplots(figsize=(10, 6))
            try:
                # largest bar on top
                ax.barh(
                    list(top["label"])[::-1],
                    list(top["total_weight"])[::-1],
                    color="steelblue",
                )
                ax.set_title(f"Top {self.top_n} Topics in Uploaded Documents")
                ax.set_xlabel("Total weight")
                ax.tick_params(axis="y", labelsize=8)
                fig.tight_layout()
                buf = BytesIO()
                fig.savefig(buf, format="png", dpi=100)
            finally:
                plt.close(fig)
        return buf.getvalue()

    # ------------- export -------------

    def scored_frame(
        self, result: ScoringResult, by: Literal["topic", "group"] = "topic"
    ) -> pd.DataFrame:
        """Surviving input rows joined, by row id, to their scores."""
        if by == "group":
            scores = self.aggregator.group_scores(result.theta, result.doc_ids)
        else:
            scores = self.aggregator.label_theta(result.theta, result.doc_ids)
        rows = result.scored_rows
        clash = [c for c in rows.columns if c in set(scores.columns)]
        if clash:
            # score columns keep their names; the uploaded ones move aside
            logger.warning(f"⚠️ Uploaded columns renamed to avoid score names: {clash}")
            rows = rows.rename(columns={c: f"{c}{UPLOADED_SUFFIX}" for c in clash})
        return pd.concat([rows, scores.loc[rows.index]], axis=1)

    def top_topics_frame(self, result: ScoringResult) -> pd.DataFrame:
        """Per-document weights of the top-N topics, one row per scored row id."""
        frame = self.aggregator.top_topic_theta(
            result.theta, result.doc_ids, n=self.top_n
        )
        return frame.rename_axis("row_id").reset_index()

    def _export(self, df: pd.DataFrame, filename: str) -> ExportFile:
        content = self.codec.to_bytes(df)
        logger.info(f"📤 Export {filename}: {len(df)} rows x {len(df.columns)} columns")
        return ExportFile(
            filename=filename, content=content, media_type=self.codec.media_type
        )

    def export(
        self,
        result: ScoringResult,
        by: Literal["topic", "group"] = "topic",
        on: Optional[date] = None,
    ) -> ExportFile:
        filename = f"policy_scored_{(on or date.today()).isoformat()}.xlsx"
        return self._export(self.scored_frame(result, by=by), filename)

    def export_top_topics(self, result: ScoringResult) -> ExportFile:
        return self._export(
            self.top_topics_frame(result), f"top_{self.top_n}_topics.xlsx"
        )
