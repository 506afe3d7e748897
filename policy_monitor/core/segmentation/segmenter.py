from __future__ import annotations
import logging
import re
from typing import List, Optional

import jieba
import pandas as pd

from policy_monitor.core.segmentation.base import Segmenter
from policy_monitor.core.segmentation.config import SegmentationConfig

logger = logging.getLogger(__name__)

_re_symbol_only = re.compile(r"^[\W_]+$")


def _is_missing(text) -> bool:
    if text is None:
        return True
    return not isinstance(text, str) and bool(pd.isna(text))


class JiebaSegmenter(Segmenter):
    """
    Adapter: dictionary-aware jieba segmentation (MP + HMM) with stop-word
    and single-character exclusion filtering. Owns its own jieba.Tokenizer so
    the user dictionary never leaks into the global jieba instance.
    """

    def __init__(self, config: SegmentationConfig | None = None):
        self.cfg = config or SegmentationConfig()
        self._tk = jieba.Tokenizer()
        if self.cfg.user_dict_path is not None:
            self._tk.load_userdict(str(self.cfg.user_dict_path))
        self._tk.initialize()
        self._drop = self.cfg.stopwords | self.cfg.excluded_tokens
        logger.info(
            f"✅ jieba ready (user dict: {self.cfg.user_dict_path}, "
            f"{len(self._drop)} filtered tokens)"
        )

    def segment(self, text: Optional[str]) -> List[str]:
        if _is_missing(text):
            return []
        out: List[str] = []
        for tok in self._tk.lcut(str(text), HMM=self.cfg.hmm):
            tok = tok.strip()
            if not tok:
                continue
            if self.cfg.drop_symbols and _re_symbol_only.match(tok):
                continue
            if tok in self._drop:
                continue
            out.append(tok)
        return out
