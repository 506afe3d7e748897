from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Mapping

import numpy as np
import rdata

from policy_monitor.core.topic_model.base import ModelCodecBase
from policy_monitor.core.topic_model.model import StmModel
from policy_monitor.utils.exceptions import ModelFormatError

logger = logging.getLogger(__name__)

# names the STM object is saved under in R workspaces
_RDATA_OBJECT_NAMES = ("stm_model", "out")


def _field(obj: Mapping[str, Any], *path: str) -> Any:
    cur: Any = obj
    for name in path:
        if not isinstance(cur, Mapping) or name not in cur:
            raise ModelFormatError(f"STM object has no field '{'$'.join(path)}'.")
        cur = cur[name]
    return cur


class RDataModelCodec(ModelCodecBase):
    """Reads an `stm` object saved with R's save() (the released artifact)."""

    def __init__(self, object_names: tuple[str, ...] = _RDATA_OBJECT_NAMES):
        self.object_names = object_names

    def _read(self, path: Path) -> Mapping[str, Any]:
        constructors = {
            **rdata.conversion.DEFAULT_CLASS_MAP,
            "STM": lambda obj, attrs: obj,
        }
        try:
            return rdata.read_rda(path, constructor_dict=constructors)
        except Exception as e:
            raise ModelFormatError(f"Cannot read R workspace {path}: {e}") from e

    def load(self, path: Path) -> StmModel:
        workspace = self._read(path)
        name = next((n for n in self.object_names if n in workspace), None)
        if name is None:
            raise ModelFormatError(
                f"{path} contains none of {', '.join(self.object_names)} "
                f"(found: {', '.join(workspace) or 'nothing'})."
            )
        stm = workspace[name]
        logger.info(f"📦 Loaded R object '{name}' from {path}")

        logbeta = _field(stm, "beta", "logbeta")
        if isinstance(logbeta, (list, tuple)):
            # one matrix per content-covariate level; no content covariate here
            logbeta = logbeta[0]

        return StmModel.from_arrays(
            vocab=np.asarray(_field(stm, "vocab")),
            log_beta=np.asarray(logbeta),
            mu=np.asarray(_field(stm, "mu", "mu")),
            sigma=np.asarray(_field(stm, "sigma")),
            source=str(path),
        )


class NpzModelCodec(ModelCodecBase):
    """Reads a numpy archive with arrays vocab, log_beta, mu, sigma."""

    def load(self, path: Path) -> StmModel:
        try:
            with np.load(path, allow_pickle=False) as npz:
                arrays = {k: npz[k] for k in ("vocab", "log_beta", "mu", "sigma")}
        except KeyError as e:
            raise ModelFormatError(f"{path} is missing array {e}.") from e
        except (OSError, ValueError) as e:
            raise ModelFormatError(f"Cannot read numpy archive {path}: {e}") from e
        return StmModel.from_arrays(**arrays, source=str(path))

    @staticmethod
    def save(model: StmModel, path: Path) -> None:
        np.savez(
            path,
            vocab=np.asarray(model.vocab, dtype=str),
            log_beta=model.log_beta,
            mu=model.mu,
            sigma=model.sigma,
        )


def codec_for(path: Path) -> ModelCodecBase:
    suffix = Path(path).suffix.lower()
    if suffix in (".rdata", ".rda"):
        return RDataModelCodec()
    if suffix == ".npz":
        return NpzModelCodec()
    raise ModelFormatError(f"Unsupported model artifact type: {path}")
