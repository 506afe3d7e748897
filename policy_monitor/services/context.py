from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

from policy_monitor.core.aggregation.aggregator import TopicAggregator
from policy_monitor.core.config import Settings, settings as default_settings
from policy_monitor.core.normalization.cleaner import ChineseTextCleaner
from policy_monitor.core.normalization.config import CleaningConfig
from policy_monitor.core.resources.loader import LexicalResources, load_lexical_resources
from policy_monitor.core.segmentation.config import SegmentationConfig
from policy_monitor.core.segmentation.segmenter import JiebaSegmenter
from policy_monitor.core.topic_model.model import StmModel
from policy_monitor.core.topic_model.projector import StmProjector
from policy_monitor.core.topic_model.provisioner import ModelProvisioner
from policy_monitor.core.vectorization.vectorizer import ModelVocabularyAligner
from policy_monitor.utils.exceptions import ModelFormatError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringContext:
    """
    Everything the pipeline needs that is loaded once at startup.
    Built before the app serves requests and only read afterwards.
    """

    settings: Settings
    model: StmModel
    resources: LexicalResources
    segmenter: JiebaSegmenter
    cleaner: ChineseTextCleaner
    aligner: ModelVocabularyAligner
    projector: StmProjector
    aggregator: TopicAggregator


def build_context(
    cfg: Optional[Settings] = None, *, provisioner: Optional[ModelProvisioner] = None
) -> ScoringContext:
    """Provision the model and load lexical resources; any failure is fatal."""
    cfg = cfg or default_settings
    model = (provisioner or ModelProvisioner(cfg)).load()
    if model.num_topics != cfg.NUM_TOPICS:
        raise ModelFormatError(
            f"Model has {model.num_topics} topics, expected {cfg.NUM_TOPICS}."
        )

    resources = load_lexical_resources(cfg, model.num_topics)

    segmenter = JiebaSegmenter(
        SegmentationConfig(
            user_dict_path=resources.user_dict_path,
            stopwords=resources.stopwords,
            excluded_tokens=resources.single_char_excluded,
        )
    )
    cleaner = ChineseTextCleaner(CleaningConfig(cities=resources.cities))

    logger.info("✅ Scoring context ready")
    return ScoringContext(
        settings=cfg,
        model=model,
        resources=resources,
        segmenter=segmenter,
        cleaner=cleaner,
        aligner=ModelVocabularyAligner(model.vocab_index),
        projector=StmProjector(model),
        aggregator=TopicAggregator(resources.labels, resources.groups),
    )
