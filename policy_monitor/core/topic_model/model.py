from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Tuple

import numpy as np

from policy_monitor.utils.exceptions import ModelFormatError


@dataclass(frozen=True, eq=False)
class StmModel:
    """
    Parameters of a trained Structural Topic Model needed to project new
    documents. Never re-estimated.

      - vocab:     model vocabulary (V tokens, model order)
      - log_beta:  K x V log word-topic distributions
      - mu:        prior mean of eta, length K-1
      - sigma:     (K-1) x (K-1) prior covariance of eta
    """

    vocab: Tuple[str, ...]
    log_beta: np.ndarray
    mu: np.ndarray
    sigma: np.ndarray
    source: str = ""
    sigma_inv: np.ndarray = field(init=False, repr=False)
    vocab_index: Dict[str, int] = field(init=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "sigma_inv", np.linalg.pinv(self.sigma))
        object.__setattr__(
            self, "vocab_index", {w: i for i, w in enumerate(self.vocab)}
        )
        for arr in (self.log_beta, self.mu, self.sigma, self.sigma_inv):
            arr.setflags(write=False)

    @property
    def num_topics(self) -> int:
        return int(self.log_beta.shape[0])

    @property
    def vocab_size(self) -> int:
        return len(self.vocab)

    @classmethod
    def from_arrays(
        cls, vocab, log_beta, mu, sigma, *, source: str = ""
    ) -> "StmModel":
        """
        Build a model from raw arrays and check that the shapes agree.
        `mu` may be a (K-1) x D matrix of per-document means; its column
        average is used as the prior for new documents.
        """
        vocab = tuple(str(w) for w in np.asarray(vocab).ravel())
        log_beta = np.array(log_beta, dtype=float, ndmin=2)
        mu = np.array(mu, dtype=float)
        sigma = np.array(sigma, dtype=float, ndmin=2)

        k, v = log_beta.shape
        if k < 2:
            raise ModelFormatError(f"Model needs at least 2 topics, got {k}.")
        if v != len(vocab):
            raise ModelFormatError(
                f"log_beta has {v} columns but vocabulary has {len(vocab)} tokens."
            )
        if mu.ndim == 2:
            if mu.shape[0] != k - 1 and mu.shape[1] == k - 1:
                mu = mu.T
            mu = mu.mean(axis=1)
        mu = mu.ravel()
        if mu.shape != (k - 1,):
            raise ModelFormatError(f"mu must have length {k - 1}, got {mu.shape}.")
        if sigma.shape != (k - 1, k - 1):
            raise ModelFormatError(
                f"sigma must be {k - 1}x{k - 1}, got {sigma.shape[0]}x{sigma.shape[1]}."
            )
        return cls(vocab=vocab, log_beta=log_beta, mu=mu, sigma=sigma, source=source)
