from __future__ import annotations
from typing import Hashable, Sequence

import numpy as np
import pandas as pd

from policy_monitor.core.resources.groups import TopicGroups, TopicLabels


class TopicAggregator:
    """
    Batch-level summaries of a theta matrix (documents x K, topic j in
    column j-1). Totals are sums over documents, not averages, so they scale
    with both topic prevalence and batch size.
    """

    def __init__(self, labels: TopicLabels, groups: TopicGroups):
        self.labels = labels
        self.groups = groups
        self._member_cols = [
            (name, np.asarray(groups.members(name), dtype=int) - 1)
            for name in groups.names
        ]
        self._group_of = groups.group_of()

    def label_theta(
        self, theta: np.ndarray, doc_ids: Sequence[Hashable]
    ) -> pd.DataFrame:
        """Theta as a frame indexed by original row id, columns '<id>: <label>'."""
        return pd.DataFrame(
            theta, index=pd.Index(list(doc_ids)), columns=self.labels.display_names
        )

    def topic_totals(self, theta: np.ndarray) -> pd.Series:
        k = len(self.labels)
        totals = np.asarray(theta, dtype=float).reshape(-1, k).sum(axis=0)
        return pd.Series(totals, index=pd.RangeIndex(1, k + 1, name="topic"))

    def top_topics(self, theta: np.ndarray, n: int = 10) -> pd.DataFrame:
        """n topics with the largest total weight; ties keep ascending topic id."""
        if np.asarray(theta).size == 0:
            return pd.DataFrame(columns=["topic", "label", "group", "total_weight"])
        totals = self.topic_totals(theta)
        ranked = sorted(totals.index, key=lambda t: (-totals[t], t))[:n]
        return pd.DataFrame(
            {
                "topic": [int(t) for t in ranked],
                "label": [self.labels.display_name(t) for t in ranked],
                "group": [self._group_of[int(t)] for t in ranked],
                "total_weight": [float(totals[t]) for t in ranked],
            }
        )

    def top_topic_theta(
        self, theta: np.ndarray, doc_ids: Sequence[Hashable], n: int = 10
    ) -> pd.DataFrame:
        """Per-document theta restricted to the n topics ranked by top_topics."""
        labelled = self.label_theta(theta, doc_ids)
        top = self.top_topics(theta, n=n)
        if top.empty:
            # all totals are zero: ascending topic id
            return labelled[self.labels.display_names[:n]]
        return labelled[list(top["label"])]

    def group_totals(self, theta: np.ndarray) -> pd.DataFrame:
        """Groups ranked by total weight, ties broken by group name."""
        if np.asarray(theta).size == 0:
            return pd.DataFrame(columns=["group", "total_weight"])
        totals = self.topic_totals(theta).to_numpy()
        rows = [
            {"group": name, "total_weight": float(totals[cols].sum())}
            for name, cols in self._member_cols
        ]
        rows.sort(key=lambda r: (-r["total_weight"], r["group"]))
        return pd.DataFrame(rows, columns=["group", "total_weight"])

    def group_scores(
        self, theta: np.ndarray, doc_ids: Sequence[Hashable]
    ) -> pd.DataFrame:
        """Per-document group weights (row sums over member topics)."""
        theta = np.asarray(theta, dtype=float).reshape(-1, len(self.labels))
        data = {name: theta[:, cols].sum(axis=1) for name, cols in self._member_cols}
        return pd.DataFrame(
            data, index=pd.Index(list(doc_ids)), columns=self.groups.names
        )
