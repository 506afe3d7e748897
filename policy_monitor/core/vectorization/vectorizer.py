from __future__ import annotations
import logging
import re
from typing import Dict, List

import numpy as np
import pandas as pd
from sklearn.feature_extraction.text import CountVectorizer

from policy_monitor.core.vectorization.base import (
    AlignedCorpus,
    AlignedDocument,
    VocabularyAligner,
)
from policy_monitor.core.vectorization.config import VectorizationConfig

logger = logging.getLogger(__name__)

_re_punct = re.compile(r"[^\w\s]|_")
_re_number = re.compile(r"^\d+(?:\.\d+)?$")


class ModelVocabularyAligner(VocabularyAligner):
    """
    Bag-of-words over whitespace tokens (CountVectorizer), then keep only
    tokens the trained model knows and re-index them to model positions.
    """

    def __init__(
        self, vocab_index: Dict[str, int], config: VectorizationConfig | None = None
    ):
        self.vocab_index = vocab_index
        self.cfg = config or VectorizationConfig()

    def tokens(self, text: str) -> List[str]:
        s = text or ""
        if self.cfg.lowercase:
            s = s.lower()
        if self.cfg.remove_punctuation:
            s = _re_punct.sub("", s)
        out: List[str] = []
        for t in s.split():
            if self.cfg.remove_numbers and _re_number.match(t):
                continue
            if len(t) < self.cfg.min_token_len:
                continue
            out.append(t)
        return out

    def _vectorizer(self) -> CountVectorizer:
        return CountVectorizer(
            tokenizer=self.tokens,
            token_pattern=None,
            lowercase=False,
        )

    def align(self, cleaned: pd.Series) -> AlignedCorpus:
        ids = list(cleaned.index)
        docs = [x if isinstance(x, str) else "" for x in cleaned]

        if not any(self.tokens(d) for d in docs):
            # CountVectorizer refuses an empty vocabulary
            logger.warning(f"⚠️ No tokens in any of {len(docs)} documents")
            return AlignedCorpus(doc_ids=(), documents=(), dropped_ids=tuple(ids))

        vect = self._vectorizer()
        X = vect.fit_transform(docs).tocsr()
        feature_to_model = np.array(
            [self.vocab_index.get(f, -1) for f in vect.get_feature_names_out()],
            dtype=np.int64,
        )

        kept_ids, kept_docs, dropped = [], [], []
        for row, doc_id in enumerate(ids):
            start, end = X.indptr[row], X.indptr[row + 1]
            model_idx = feature_to_model[X.indices[start:end]]
            counts = X.data[start:end]
            known = model_idx >= 0
            if not known.any():
                dropped.append(doc_id)
                continue
            order = np.argsort(model_idx[known])
            kept_ids.append(doc_id)
            kept_docs.append(
                AlignedDocument(
                    indices=model_idx[known][order],
                    counts=counts[known][order].astype(np.int64),
                )
            )

        logger.info(
            f"✅ Vocabulary alignment: {len(kept_docs)} kept, {len(dropped)} dropped "
            f"({len(vect.vocabulary_)} batch terms, "
            f"{int((feature_to_model >= 0).sum())} known to the model)"
        )
        return AlignedCorpus(
            doc_ids=tuple(kept_ids),
            documents=tuple(kept_docs),
            dropped_ids=tuple(dropped),
        )
