"""
Offline scoring of a whole file, without the HTTP service.

    python -m policy_monitor.batch policies.xlsx results/

writes `top_10_topics.xlsx` (per-document weights of the ten heaviest
topics) and `policy_scored_results.xlsx` (input rows plus one column per
topic group) into the output directory.
"""

import argparse
import logging
from pathlib import Path
from typing import Dict, Optional, Sequence

from policy_monitor.core.config import settings
from policy_monitor.core.file_handler.codec import codec_for_filename
from policy_monitor.middlewares.logging import setup_logging
from policy_monitor.services.context import ScoringContext, build_context
from policy_monitor.services.presentation_service import PresentationService
from policy_monitor.services.scoring_service import ScoringService
from policy_monitor.utils.exceptions import APIException, StartupError

logger = logging.getLogger(__name__)

SCORED_RESULTS_FILENAME = "policy_scored_results.xlsx"


def run_batch(
    file_input: Path, output_dir: Path, ctx: ScoringContext
) -> Dict[str, Path]:
    codec = codec_for_filename(file_input.name)
    if codec is None:
        raise ValueError(f"Input file must be .csv or .xlsx: {file_input}")
    df = codec.from_bytes(file_input.read_bytes())

    result = ScoringService(ctx).score(df, file_input.name)
    presenter = PresentationService(
        ctx.aggregator,
        preview_rows=ctx.settings.PREVIEW_ROWS,
        top_n=ctx.settings.TOP_N_TOPICS,
    )

    output_dir.mkdir(parents=True, exist_ok=True)
    top = presenter.export_top_topics(result)
    scored = presenter.export(result, by="group")
    written = {
        "top_topics": output_dir / top.filename,
        "scored": output_dir / SCORED_RESULTS_FILENAME,
    }
    written["top_topics"].write_bytes(top.content)
    written["scored"].write_bytes(scored.content)

    logger.info(
        f"✅ Scored {len(result.doc_ids)}/{len(result.raw)} rows of {file_input} "
        f"-> {', '.join(str(p) for p in written.values())}"
    )
    return written


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Score a policy file against the topic model"
    )
    parser.add_argument(
        "file_input", type=Path, help="CSV or XLSX file with a 'Content' column"
    )
    parser.add_argument(
        "output_dir", type=Path, help="Directory for the scored spreadsheets"
    )
    args = parser.parse_args(argv)

    setup_logging()
    try:
        ctx = build_context(settings)
        run_batch(args.file_input, args.output_dir, ctx)
    except StartupError as e:
        logger.error(f"🚨 Scoring context could not be built: {e}")
        return 1
    except APIException as e:
        logger.error(f"❌ {e.detail['message']}")
        return 1
    except (OSError, ValueError) as e:
        logger.error(f"❌ Cannot score {args.file_input}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
