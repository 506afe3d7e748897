from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Optional, Tuple

import pandas as pd

from policy_monitor.core.config import Settings, settings as default_settings
from policy_monitor.core.resources.groups import TopicGroups, TopicLabels
from policy_monitor.utils.exceptions import ResourceFormatError, ResourceNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LexicalResources:
    user_dict_path: Path
    stopwords: FrozenSet[str]
    single_char_excluded: FrozenSet[str]
    cities: Tuple[str, ...]
    labels: TopicLabels
    groups: TopicGroups


def _require(path: Path) -> Path:
    if not path.is_file():
        raise ResourceNotFoundError(f"Required resource file not found: {path}")
    return path


def read_lines(path: Path) -> list[str]:
    """Non-empty, stripped lines of a UTF-8 word list (BOM tolerated)."""
    text = _require(path).read_text(encoding="utf-8-sig")
    return [line.strip() for line in text.splitlines() if line.strip()]


def read_table(path: Path) -> pd.DataFrame:
    try:
        return pd.read_csv(_require(path), encoding="utf-8-sig")
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ResourceFormatError(f"Cannot parse {path}: {e}") from e


def load_lexical_resources(
    cfg: Optional[Settings] = None, num_topics: Optional[int] = None
) -> LexicalResources:
    cfg = cfg or default_settings
    k = num_topics or cfg.NUM_TOPICS
    data_dir = Path(cfg.DATA_DIR)

    user_dict = _require(data_dir / cfg.USER_DICT_FILE)
    stopwords = frozenset(read_lines(data_dir / cfg.STOPWORDS_FILE))
    singles = frozenset(read_lines(data_dir / cfg.SINGLE_CHAR_FILE))
    cities = tuple(read_lines(data_dir / cfg.CITY_LIST_FILE))
    labels = TopicLabels.from_frame(read_table(data_dir / cfg.TOPIC_LABELS_FILE), k)
    groups = TopicGroups.from_frame(
        read_table(data_dir / cfg.TOPIC_GROUPS_FILE)
    ).validate(k)

    logger.info(
        f"✅ Lexical resources loaded: {len(stopwords)} stopwords, "
        f"{len(singles)} excluded single chars, {len(cities)} cities, "
        f"{len(labels)} topic labels, {len(groups.groups)} topic groups"
    )
    return LexicalResources(
        user_dict_path=user_dict,
        stopwords=stopwords,
        single_char_excluded=singles,
        cities=cities,
        labels=labels,
        groups=groups,
    )
