# policy_monitor/api/score.py

from typing import Literal
from fastapi import APIRouter, Depends, File, Query, Request, Response, UploadFile
from starlette.concurrency import run_in_threadpool
import pandas as pd
import logging

from policy_monitor.core.config import settings
from policy_monitor.middlewares.file_validators import validate_upload
from policy_monitor.middlewares.security import limiter
from policy_monitor.schemas.score import (
    GroupsResponse,
    PreviewResponse,
    ScoreData,
    ScoreResponse,
    TopTopicsResponse,
)
from policy_monitor.services.context import ScoringContext
from policy_monitor.services.presentation_service import PresentationService
from policy_monitor.services.result_store import ResultStore
from policy_monitor.services.scoring_service import CONTENT_COLUMN, ScoringResult, ScoringService
from policy_monitor.utils.exceptions import APIException, NotFoundError, ServerError
from policy_monitor.utils.response_builder import success_response
from policy_monitor.utils.telemetry import step
from policy_monitor.messages.score_messages import (
    EXPORT_FAILED,
    GROUPS_LOADED,
    PREVIEW_LOADED,
    RESULT_NOT_FOUND,
    SCORING_COMPLETED,
    SCORING_FAILED,
    TOP_TOPICS_LOADED,
)

router = APIRouter(prefix="/api/score", tags=["Scoring"])
logger = logging.getLogger(__name__)


def get_context(request: Request) -> ScoringContext:
    return request.app.state.context


def get_results(request: Request) -> ResultStore:
    return request.app.state.results


def get_result(
    result_id: str, results: ResultStore = Depends(get_results)
) -> ScoringResult:
    result = results.get(result_id)
    if result is None:
        raise NotFoundError(code="RESULT_NOT_FOUND", message=RESULT_NOT_FOUND)
    return result


def get_presenter(ctx: ScoringContext = Depends(get_context)) -> PresentationService:
    return PresentationService(
        ctx.aggregator,
        preview_rows=ctx.settings.PREVIEW_ROWS,
        top_n=ctx.settings.TOP_N_TOPICS,
    )


@router.post("/", response_model=ScoreResponse)
@limiter.limit(lambda: settings.UPLOAD_RATE_LIMIT)
async def score_upload(
    request: Request,
    file: UploadFile = File(...),
    validated: tuple[bytes, pd.DataFrame] = Depends(validate_upload([CONTENT_COLUMN])),
    ctx: ScoringContext = Depends(get_context),
    results: ResultStore = Depends(get_results),
    presenter: PresentationService = Depends(get_presenter),
):
    """
    Score every row of the uploaded table against the topic model.
    The result is kept in memory; the views and the download below read it
    back by `result_id`.
    """
    contents, df = validated
    try:
        result = await run_in_threadpool(
            ScoringService(ctx).score, df, file.filename or ""
        )
        results.put(result)

        with step("score.response.build", rows=len(result.raw)):
            return success_response(
                message=SCORING_COMPLETED,
                data=ScoreData(
                    result_id=result.result_id,
                    filename=result.filename,
                    created_at=result.created_at,
                    record_count=len(result.raw),
                    scored_count=len(result.doc_ids),
                    dropped_row_ids=[int(i) for i in result.dropped_ids],
                    preview=presenter.preview(result),
                ),
            )

    except APIException:
        raise

    except Exception as e:
        logger.exception(f"❌ Unexpected scoring error for '{file.filename}': {e}")
        raise ServerError(code="SCORING_FAILED", message=SCORING_FAILED)


@router.get("/{result_id}/preview", response_model=PreviewResponse)
def preview(
    result: ScoringResult = Depends(get_result),
    presenter: PresentationService = Depends(get_presenter),
):
    return success_response(message=PREVIEW_LOADED, data=presenter.preview(result))


@router.get("/{result_id}/topics", response_model=TopTopicsResponse)
def top_topics(
    result: ScoringResult = Depends(get_result),
    presenter: PresentationService = Depends(get_presenter),
):
    return success_response(
        message=TOP_TOPICS_LOADED, data=presenter.top_topics(result)
    )


@router.get("/{result_id}/topics/chart")
def top_topics_chart(
    result: ScoringResult = Depends(get_result),
    presenter: PresentationService = Depends(get_presenter),
):
    with step("score.chart", result_id=result.result_id):
        png = presenter.top_topics_chart(result)
    return Response(content=png, media_type="image/png")


@router.get("/{result_id}/groups", response_model=GroupsResponse)
def groups(
    result: ScoringResult = Depends(get_result),
    presenter: PresentationService = Depends(get_presenter),
):
    return success_response(message=GROUPS_LOADED, data=presenter.groups(result))


@router.get("/{result_id}/download")
def download(
    by: Literal["topic", "group"] = Query("topic"),
    result: ScoringResult = Depends(get_result),
    presenter: PresentationService = Depends(get_presenter),
):
    try:
        with step("score.export", result_id=result.result_id, by=by):
            export = presenter.export(result, by=by)
    except Exception as e:
        logger.exception(f"❌ Export failed for result {result.result_id}: {e}")
        raise ServerError(code="EXPORT_FAILED", message=EXPORT_FAILED)

    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )
