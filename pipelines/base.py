"""
Base Pipeline

Abstract base class for the analytics batch pipelines.
"""

from abc import ABC, abstractmethod
from typing import ClassVar, Optional

from core.settings import settings
from db.base import db
from pipelines.config import PipelineConfig
from pipelines.context import PipelineContext
from schemas.analytics import AnalyticsConfig
from schemas.pipeline import PipelineResult


class BasePipeline(ABC):
    """
    Abstract base class for analytics pipelines.

    Provides:
    - Run tracking and structured logging via PipelineContext
    - The analytics tunables as an immutable AnalyticsConfig
    - Template method pattern for the run lifecycle; any exception
      becomes a failed PipelineResult

    Subclasses must implement:
    - config: PipelineConfig class attribute
    - execute(): The actual pipeline logic

    Example:
        class PlayerMetricsPipeline(BasePipeline):
            config = PipelineConfig(
                name="player_metrics",
                display_name="Player Metrics",
                description="Recomputes per-player analytics",
                target_table="player_rolling_stats",
            )

            async def execute(self, ctx: PipelineContext) -> None:
                histories = PlayerGameStats.get_histories()
                ctx.increment_records(len(histories))
    """

    # Class-level configuration - must be overridden by subclasses
    config: ClassVar[PipelineConfig]

    def __init__(self, analytics: Optional[AnalyticsConfig] = None):
        """Validate the class config and bind the analytics tunables."""
        self._validate_config()
        self.analytics = analytics or settings.analytics_config()

    def _validate_config(self) -> None:
        if getattr(self.__class__, "config", None) is None:
            raise ValueError(
                f"{self.__class__.__name__} must define a 'config' class attribute"
            )

    @abstractmethod
    async def execute(self, ctx: PipelineContext) -> None:
        """
        Execute the pipeline logic.

        Args:
            ctx: Pipeline context with logging, tracking, and timing
        """

    async def run(self) -> PipelineResult:
        """
        Run the pipeline with full lifecycle management.

        Returns:
            PipelineResult with status, timing, and records processed
        """
        ctx = PipelineContext(self.config.name)
        ctx.start_tracking()

        try:
            await self.before_execute(ctx)
            await self.execute(ctx)
            await self.after_execute(ctx)
            return ctx.mark_success()

        except Exception as e:
            return ctx.mark_failed(e)

    async def before_execute(self, ctx: PipelineContext) -> None:
        """Make sure the database connection is open."""
        db.connect(reuse_if_open=True)

    async def after_execute(self, ctx: PipelineContext) -> None:
        """Hook called after a successful execute()."""

    @classmethod
    def get_name(cls) -> str:
        return cls.config.name

    @classmethod
    def get_info(cls) -> dict:
        """Get pipeline information for listing."""
        return {
            "name": cls.config.name,
            "display_name": cls.config.display_name,
            "description": cls.config.description,
            "target_table": cls.config.target_table,
        }

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.config.name})>"
