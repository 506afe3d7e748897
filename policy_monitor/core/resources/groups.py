from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Tuple

import pandas as pd

from policy_monitor.utils.exceptions import ResourceFormatError, TopicGroupError


@dataclass(frozen=True)
class TopicLabels:
    """Topic id (1..K) -> human-readable label."""

    labels: Tuple[str, ...]

    def __len__(self) -> int:
        return len(self.labels)

    def label(self, topic_id: int) -> str:
        return self.labels[topic_id - 1]

    def display_name(self, topic_id: int) -> str:
        return f"{topic_id}: {self.label(topic_id)}"

    @property
    def display_names(self) -> List[str]:
        return [self.display_name(i) for i in range(1, len(self.labels) + 1)]

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        num_topics: int,
        id_col: str = "custom_topic",
        label_col: str = "names",
    ) -> "TopicLabels":
        missing = [c for c in (id_col, label_col) if c not in df.columns]
        if missing:
            raise ResourceFormatError(
                f"Topic label table is missing columns: {', '.join(missing)}"
            )
        ids = pd.to_numeric(df[id_col], errors="coerce")
        if ids.isna().any():
            raise ResourceFormatError("Topic label table has non-numeric topic ids.")
        by_id = dict(zip(ids.astype(int), df[label_col].fillna("").astype(str)))
        expected = set(range(1, num_topics + 1))
        if len(by_id) != len(df) or set(by_id) != expected:
            raise ResourceFormatError(
                f"Topic label table must list each topic 1..{num_topics} exactly once."
            )
        return cls(labels=tuple(by_id[i].strip() for i in sorted(by_id)))


@dataclass(frozen=True)
class TopicGroups:
    """
    Macro-groups of topics. Each topic id 1..K belongs to exactly one group;
    group order is the order of first appearance in the source table.
    """

    groups: Tuple[Tuple[str, Tuple[int, ...]], ...]

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self.groups]

    def members(self, name: str) -> Tuple[int, ...]:
        return dict(self.groups)[name]

    def group_of(self) -> Dict[int, str]:
        return {t: name for name, topics in self.groups for t in topics}

    def validate(self, num_topics: int) -> "TopicGroups":
        counts = Counter(t for _, topics in self.groups for t in topics)
        expected = set(range(1, num_topics + 1))
        unmapped = sorted(expected - set(counts))
        doubled = sorted(t for t, c in counts.items() if c > 1)
        unknown = sorted(set(counts) - expected)
        problems = []
        if unmapped:
            problems.append(f"unmapped topics {unmapped}")
        if doubled:
            problems.append(f"topics in more than one group {doubled}")
        if unknown:
            problems.append(f"unknown topic ids {unknown}")
        if problems:
            raise TopicGroupError(
                f"Topic groups must partition 1..{num_topics}: " + "; ".join(problems)
            )
        return self

    @classmethod
    def from_mapping(cls, mapping: Dict[str, List[int]]) -> "TopicGroups":
        return cls(
            groups=tuple((name, tuple(int(t) for t in ts)) for name, ts in mapping.items())
        )

    @classmethod
    def from_frame(
        cls, df: pd.DataFrame, topic_col: str = "topic", group_col: str = "group"
    ) -> "TopicGroups":
        missing = [c for c in (topic_col, group_col) if c not in df.columns]
        if missing:
            raise ResourceFormatError(
                f"Topic group table is missing columns: {', '.join(missing)}"
            )
        topics = pd.to_numeric(df[topic_col], errors="coerce")
        if topics.isna().any() or df[group_col].isna().any():
            raise TopicGroupError("Topic group table has empty or non-numeric cells.")
        mapping: Dict[str, List[int]] = {}
        for topic, group in zip(topics.astype(int), df[group_col].astype(str)):
            mapping.setdefault(group.strip(), []).append(int(topic))
        return cls.from_mapping(mapping)
