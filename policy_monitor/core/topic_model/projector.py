from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Hashable, Tuple

import numpy as np
from scipy.optimize import minimize
from scipy.special import logsumexp

from policy_monitor.core.topic_model.base import TopicProjector
from policy_monitor.core.topic_model.config import ProjectionConfig
from policy_monitor.core.topic_model.model import StmModel
from policy_monitor.core.vectorization.base import AlignedCorpus, AlignedDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectionResult:
    doc_ids: Tuple[Hashable, ...]
    theta: np.ndarray  # len(doc_ids) x K, rows on the simplex


def _softmax_with_reference(eta: np.ndarray) -> np.ndarray:
    full = np.append(eta, 0.0)
    theta = np.exp(full - logsumexp(full))
    return theta / theta.sum()


class StmProjector(TopicProjector):
    """
    Fits new documents to a fixed STM the way stm::fitNewDocuments does with
    the "Average" prevalence prior: for each document find the mode of the
    logistic-normal posterior over eta with beta, mu and sigma held fixed,
    then map eta to topic proportions.
    """

    def __init__(self, model: StmModel, config: ProjectionConfig | None = None):
        self.model = model
        self.cfg = config or ProjectionConfig()

    def _neg_log_posterior(
        self, eta: np.ndarray, log_beta_w: np.ndarray, counts: np.ndarray
    ) -> Tuple[float, np.ndarray]:
        full = np.append(eta, 0.0)
        log_norm = logsumexp(full)
        # log sum_k exp(eta_k) beta_kw, per word
        log_mix = logsumexp(log_beta_w + full[:, None], axis=0)
        n = counts.sum()

        diff = eta - self.model.mu
        prior = self.model.sigma_inv @ diff
        value = 0.5 * diff @ prior - (counts @ log_mix - n * log_norm)

        phi = np.exp(log_beta_w + full[:, None] - log_mix[None, :])
        theta = np.exp(full - log_norm)
        grad = prior - (phi @ counts - n * theta)[:-1]
        return float(value), grad

    def fit_document(self, doc: AlignedDocument) -> np.ndarray:
        log_beta_w = self.model.log_beta[:, doc.indices]
        counts = np.asarray(doc.counts, dtype=float)
        res = minimize(
            self._neg_log_posterior,
            x0=np.array(self.model.mu, dtype=float),
            args=(log_beta_w, counts),
            jac=True,
            method="BFGS",
            options={"maxiter": self.cfg.max_iter, "gtol": self.cfg.gtol},
        )
        if not res.success:
            logger.debug(f"BFGS stopped early: {res.message}")
        return _softmax_with_reference(res.x)

    def project(self, corpus: AlignedCorpus) -> ProjectionResult:
        k = self.model.num_topics
        theta = np.empty((len(corpus), k), dtype=float)
        for i, doc in enumerate(corpus.documents):
            theta[i] = self.fit_document(doc)
        return ProjectionResult(doc_ids=tuple(corpus.doc_ids), theta=theta)
