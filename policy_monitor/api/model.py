# policy_monitor/api/model.py

from fastapi import APIRouter, Request

from policy_monitor.schemas.score import ModelInfo, ModelInfoResponse
from policy_monitor.utils.response_builder import success_response
from policy_monitor.messages.score_messages import MODEL_INFO_LOADED

router = APIRouter(prefix="/api/model", tags=["Model"])


@router.get("", response_model=ModelInfoResponse)
def model_info(request: Request):
    ctx = request.app.state.context
    return success_response(
        message=MODEL_INFO_LOADED,
        data=ModelInfo(
            num_topics=ctx.model.num_topics,
            vocab_size=ctx.model.vocab_size,
            source=ctx.model.source,
            top_n=ctx.settings.TOP_N_TOPICS,
            groups=list(ctx.aggregator.groups.names),
            results_cached=len(request.app.state.results),
        ),
    )
