"""
Pipeline Registry and Exports

Provides a registry of all available pipelines and helper functions
for running them by name.
"""

import inspect
from typing import Type

from core.logging import get_logger
from pipelines.base import BasePipeline
from pipelines.config import PipelineConfig
from pipelines.context import PipelineContext
from pipelines.player_metrics import PlayerMetricsPipeline
from pipelines.waiver_recommendations import WaiverRecommendationsPipeline
from schemas.common import ApiStatus
from schemas.pipeline import PipelineResult


# Registry of all available pipelines
# Order matters for run_all_pipelines - dependencies should come first
PIPELINE_REGISTRY: dict[str, Type[BasePipeline]] = {
    "player_metrics": PlayerMetricsPipeline,
    "waiver_recommendations": WaiverRecommendationsPipeline,
}


def get_pipeline(name: str, **kwargs) -> BasePipeline:
    """
    Get a pipeline instance by name.

    Args:
        name: Pipeline name (e.g., "player_metrics")
        **kwargs: Passed to the pipeline constructor

    Raises:
        KeyError: If pipeline name not found
    """
    if name not in PIPELINE_REGISTRY:
        available = ", ".join(PIPELINE_REGISTRY.keys())
        raise KeyError(f"Unknown pipeline '{name}'. Available: {available}")

    return PIPELINE_REGISTRY[name](**kwargs)


async def run_pipeline(name: str, **kwargs) -> PipelineResult:
    pipeline = get_pipeline(name, **kwargs)
    return await pipeline.run()


async def run_all_pipelines(**kwargs) -> dict[str, PipelineResult]:
    """
    Run all pipelines in sequence.

    Pipelines are run in registration order:
    1. player_metrics - Stored per-player analytics
    2. waiver_recommendations - Ranked pickups for the target date

    Keyword arguments are passed only to pipelines whose constructor
    accepts them (e.g. target_date for waiver_recommendations).

    Returns:
        Dict mapping pipeline name to PipelineResult
    """
    log = get_logger("pipeline").bind(operation="run_all")

    results = {}
    pipeline_names = list(PIPELINE_REGISTRY.keys())

    log.info("all_pipelines_started", count=len(pipeline_names))

    for i, name in enumerate(pipeline_names, 1):
        log.info("running_pipeline", pipeline=name, step=f"{i}/{len(pipeline_names)}")
        accepted = inspect.signature(PIPELINE_REGISTRY[name]).parameters
        results[name] = await run_pipeline(
            name, **{k: v for k, v in kwargs.items() if k in accepted}
        )

    success_count = sum(1 for r in results.values() if r.status == ApiStatus.SUCCESS)
    log.info(
        "all_pipelines_completed",
        success_count=success_count,
        total_count=len(results),
    )

    return results


def list_pipelines() -> list[dict]:
    return [cls.get_info() for cls in PIPELINE_REGISTRY.values()]


__all__ = [
    # Base classes
    "BasePipeline",
    "PipelineConfig",
    "PipelineContext",
    # Pipelines
    "PlayerMetricsPipeline",
    "WaiverRecommendationsPipeline",
    # Registry functions
    "PIPELINE_REGISTRY",
    "get_pipeline",
    "run_pipeline",
    "run_all_pipelines",
    "list_pipelines",
]
