from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel
from policy_monitor.schemas.common import BaseResponse


class ScoreData(BaseModel):
    result_id: str
    filename: str
    created_at: datetime
    record_count: int
    scored_count: int
    dropped_row_ids: List[int]
    preview: List[Dict[str, Any]]


class ScoreResponse(BaseResponse):
    data: ScoreData


class PreviewResponse(BaseResponse):
    data: List[Dict[str, Any]]


class TopicWeight(BaseModel):
    topic: int
    label: str
    group: str
    total_weight: float


class TopTopicsResponse(BaseResponse):
    data: List[TopicWeight]


class GroupWeight(BaseModel):
    group: str
    total_weight: float


class GroupsResponse(BaseResponse):
    data: List[GroupWeight]


class ModelInfo(BaseModel):
    num_topics: int
    vocab_size: int
    source: str
    top_n: int
    groups: List[str]
    results_cached: Optional[int] = None


class ModelInfoResponse(BaseResponse):
    data: ModelInfo
