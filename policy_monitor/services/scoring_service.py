from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Hashable, Tuple
from uuid import uuid4

import numpy as np
import pandas as pd

from policy_monitor.messages.score_messages import MISSING_CONTENT_COLUMN
from policy_monitor.services.context import ScoringContext
from policy_monitor.utils.exceptions import BadRequestError
from policy_monitor.utils.telemetry import step

logger = logging.getLogger(__name__)

CONTENT_COLUMN = "Content"


@dataclass(frozen=True, eq=False)
class ScoringResult:
    """
    One scored upload. `raw` keeps every uploaded row (RangeIndex = row id);
    `doc_ids[i]` is the row id behind `theta[i]`. Rows in `dropped_ids` had no
    token known to the model and carry no scores.
    """

    filename: str
    raw: pd.DataFrame
    cleaned: pd.Series
    doc_ids: Tuple[Hashable, ...]
    dropped_ids: Tuple[Hashable, ...]
    theta: np.ndarray
    result_id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def scored_rows(self) -> pd.DataFrame:
        return self.raw.loc[list(self.doc_ids)]


class ScoringService:
    """
    Runs one upload through the pipeline:
      segment -> clean -> align to model vocabulary -> project -> result
    """

    def __init__(self, ctx: ScoringContext):
        self.ctx = ctx

    def normalize_text(self, text) -> str:
        tokens = self.ctx.segmenter.segment(text)
        return self.ctx.cleaner.clean(" ".join(tokens))

    def normalize(self, contents: pd.Series) -> pd.Series:
        return contents.map(self.normalize_text).astype(str)

    def score(self, df: pd.DataFrame, filename: str = "") -> ScoringResult:
        if CONTENT_COLUMN not in df.columns:
            raise BadRequestError(
                code="MISSING_CONTENT_COLUMN", message=MISSING_CONTENT_COLUMN
            )
        raw = df.reset_index(drop=True)

        with step("score.normalize", rows=len(raw)):
            cleaned = self.normalize(raw[CONTENT_COLUMN])

        with step("score.align"):
            corpus = self.ctx.aligner.align(cleaned)

        with step("score.project", docs=len(corpus)):
            projection = self.ctx.projector.project(corpus)

        if corpus.dropped_ids:
            logger.warning(
                f"⚠️ {len(corpus.dropped_ids)} of {len(raw)} rows have no token known "
                f"to the model and were not scored: {list(corpus.dropped_ids)[:20]}"
            )

        result = ScoringResult(
            filename=filename,
            raw=raw,
            cleaned=cleaned,
            doc_ids=projection.doc_ids,
            dropped_ids=corpus.dropped_ids,
            theta=projection.theta,
        )
        logger.info(
            f"✅ Scored {len(result.doc_ids)}/{len(raw)} rows of '{filename}' "
            f"(result {result.result_id})"
        )
        return result
