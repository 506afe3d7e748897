# policy_monitor/middlewares/logging.py

import logging
import sys

from policy_monitor.core.config import settings


def setup_logging(level: int = logging.INFO):
    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers = []

    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    )

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    # jieba prints its dictionary-loading chatter at DEBUG
    logging.getLogger("jieba").setLevel(logging.WARNING)
    if settings.ENV == "production":
        logging.getLogger("matplotlib").setLevel(logging.WARNING)

    logger.info(f"✅ Logging system initialized (env={settings.ENV})")
