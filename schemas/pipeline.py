from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import ApiStatus


class PipelineResult(BaseModel):
    """Result of a single pipeline execution"""

    model_config = ConfigDict(use_enum_values=True)

    status: ApiStatus
    message: str
    started_at: str = Field(..., description="ISO timestamp in the configured timezone")
    completed_at: Optional[str] = None
    duration_seconds: Optional[float] = None
    records_processed: Optional[int] = None
    error: Optional[str] = None


class AllPipelinesResponse(BaseModel):
    """Results for a run of every registered pipeline"""

    model_config = ConfigDict(use_enum_values=True)

    status: ApiStatus
    message: str
    data: Optional[dict[str, PipelineResult]] = None
