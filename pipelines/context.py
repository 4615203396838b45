"""
Pipeline Context

Per-run state handed to BasePipeline.execute(): run id, start time,
a logger bound to the run, and the processed-records counter.
"""

import traceback
import uuid
from datetime import datetime
from typing import Optional

import pytz

from core.logging import get_logger
from core.settings import settings
from schemas.common import ApiStatus
from schemas.pipeline import PipelineResult


class PipelineContext:
    """Tracks a single pipeline run from start to result."""

    def __init__(self, pipeline_name: str, timezone: Optional[str] = None):
        self.pipeline_name = pipeline_name
        self.tz = pytz.timezone(timezone or settings.timezone)
        self.run_id = uuid.uuid4().hex
        self.started_at = datetime.now(self.tz)
        self.records_processed = 0
        self.log = get_logger("pipeline").bind(pipeline=pipeline_name, run_id=self.run_id)

    def increment_records(self, count: int = 1) -> None:
        self.records_processed += count

    def start_tracking(self) -> None:
        """Reset the clock and announce the run."""
        self.started_at = datetime.now(self.tz)
        self.log.info("pipeline_started")

    def _elapsed(self, completed_at: datetime) -> float:
        return (completed_at - self.started_at).total_seconds()

    def mark_success(self, message: Optional[str] = None) -> PipelineResult:
        completed_at = datetime.now(self.tz)
        duration = self._elapsed(completed_at)

        self.log.info(
            "pipeline_completed",
            records_processed=self.records_processed,
            duration_seconds=duration,
        )

        return PipelineResult(
            status=ApiStatus.SUCCESS,
            message=message or f"{self.pipeline_name} completed",
            started_at=self.started_at.isoformat(),
            completed_at=completed_at.isoformat(),
            duration_seconds=duration,
            records_processed=self.records_processed,
        )

    def mark_failed(self, error: Exception) -> PipelineResult:
        completed_at = datetime.now(self.tz)
        error_msg = f"{type(error).__name__}: {error}"

        self.log.error(
            "pipeline_failed",
            error=error_msg,
            traceback=traceback.format_exc(),
        )

        return PipelineResult(
            status=ApiStatus.ERROR,
            message=f"{self.pipeline_name} failed",
            started_at=self.started_at.isoformat(),
            completed_at=completed_at.isoformat(),
            duration_seconds=self._elapsed(completed_at),
            records_processed=self.records_processed,
            error=error_msg,
        )
