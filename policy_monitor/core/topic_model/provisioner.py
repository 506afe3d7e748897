from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Optional

import requests

from policy_monitor.core.config import Settings, settings as default_settings
from policy_monitor.core.topic_model.codec import codec_for
from policy_monitor.core.topic_model.model import StmModel
from policy_monitor.utils.exceptions import ModelProvisioningError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class ModelProvisioner:
    """
    Makes sure the pre-trained model artifact exists locally and loads it.
    The artifact is fetched at most once, in a single attempt; any failure
    is fatal for startup.
    """

    def __init__(
        self,
        cfg: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
    ):
        self.cfg = cfg or default_settings
        self.session = session or requests.Session()

    @property
    def path(self) -> Path:
        return self.cfg.MODEL_PATH

    def _download(self, url: str, dest: Path) -> None:
        tmp = dest.with_name(dest.name + ".part")
        bytes_written = 0
        try:
            with self.session.get(
                url, stream=True, timeout=self.cfg.MODEL_DOWNLOAD_TIMEOUT
            ) as r:
                r.raise_for_status()
                with open(tmp, "wb") as f:
                    for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                        if not chunk:
                            continue
                        f.write(chunk)
                        bytes_written += len(chunk)
            os.replace(tmp, dest)
        except (requests.RequestException, OSError) as e:
            tmp.unlink(missing_ok=True)
            raise ModelProvisioningError(
                f"Could not download model from {url}: {e}"
            ) from e
        logger.info(f"✅ Downloaded model artifact ({bytes_written} bytes) to {dest}")

    def ensure_present(self) -> Path:
        dest = self.path
        if dest.exists():
            logger.info(f"📦 Using cached model artifact {dest}")
            return dest

        logger.info(f"⬇️ Model file not found. Downloading from {self.cfg.MODEL_URL}")
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ModelProvisioningError(
                f"Cannot create model directory {dest.parent}: {e}"
            ) from e
        self._download(self.cfg.MODEL_URL, dest)
        return dest

    def load(self) -> StmModel:
        path = self.ensure_present()
        model = codec_for(path).load(path)
        logger.info(
            f"✅ Topic model ready: K={model.num_topics}, vocab={model.vocab_size}"
        )
        return model
