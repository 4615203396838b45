"""
Player Metrics Pipeline

Recomputes fantasy scores, rolling averages, consistency and trends for
every player under every valid scoring weight-set.
"""

from db.models import PlayerGameStats
from db.repository import load_weight_sets, save_player_metrics
from pipelines.base import BasePipeline
from pipelines.config import PipelineConfig
from pipelines.context import PipelineContext
from services.player_metrics_service import compute_metrics_batch
from services.scoring_service import DEFAULT_SCORING_WEIGHTS


class PlayerMetricsPipeline(BasePipeline):
    """
    Recompute derived player analytics from stored box scores.

    This pipeline:
    1. Loads every stored weight-set that passes the bounds check
    2. Loads all box scores, grouped by player
    3. Computes metrics per player for each weight-set
    4. Upserts fantasy scores, rolling stats, consistency and trends

    Re-running on the same inputs rewrites the same rows.
    """

    config = PipelineConfig(
        name="player_metrics",
        display_name="Player Metrics",
        description="Recomputes fantasy scores, rolling averages, consistency and trends",
        target_table="player_fantasy_scores, player_rolling_stats, player_consistency, player_trends",
    )

    async def execute(self, ctx: PipelineContext) -> None:
        """Execute the player metrics pipeline."""
        as_of_date = ctx.started_at.date()

        weight_sets = [DEFAULT_SCORING_WEIGHTS]
        weight_sets += [w for w in load_weight_sets() if w.id != DEFAULT_SCORING_WEIGHTS.id]

        histories = PlayerGameStats.get_histories()
        ctx.log.info(
            "histories_loaded",
            player_count=len(histories),
            weight_set_count=len(weight_sets),
        )

        if not histories:
            ctx.log.info("no_stats_found")
            return

        for weights in weight_sets:
            metrics, failed = compute_metrics_batch(histories, weights, self.analytics)

            saved = 0
            for player_id, player_metrics in metrics.items():
                try:
                    save_player_metrics(player_metrics, as_of_date)
                except Exception as e:
                    ctx.log.warning(
                        "player_metrics_save_failed",
                        player_id=player_id,
                        scoring_config_id=weights.id,
                        error=str(e),
                    )
                    continue
                saved += 1
                ctx.increment_records()

            ctx.log.info(
                "weight_set_processed",
                scoring_config_id=weights.id,
                players_saved=saved,
                players_failed=len(failed),
            )
