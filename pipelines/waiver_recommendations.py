"""
Waiver Recommendations Pipeline

Ranks free agents playing on a target date and stores the top picks.
"""

from datetime import date
from typing import Optional

from db.models import Game, PlayerGameStats, WaiverRecommendation
from db.repository import load_roster_players, load_scoring_weights, season_averages
from pipelines.base import BasePipeline
from pipelines.config import PipelineConfig
from pipelines.context import PipelineContext
from schemas.analytics import AnalyticsConfig
from services.matchup_service import evaluate_matchup, league_points_allowed
from services.player_metrics_service import compute_metrics_batch
from services.waiver_service import build_candidates, build_team_matchups, rank, top_player_ids


class WaiverRecommendationsPipeline(BasePipeline):
    """
    Generate waiver recommendations for one date.

    This pipeline:
    1. Finds the teams playing on the target date and their opponents
    2. Builds the league defensive baseline once, then one matchup per opponent
    3. Computes player metrics from games before the target date
    4. Excludes the top-N players (assumed rostered) and anyone OUT
    5. Ranks the rest and replaces the stored set for the date

    A date with no games ends up with an empty set.
    """

    config = PipelineConfig(
        name="waiver_recommendations",
        display_name="Waiver Recommendations",
        description="Ranks free agents for a date by projection, trend and matchup",
        target_table="waiver_recommendations",
    )

    def __init__(
        self,
        target_date: Optional[date] = None,
        analytics: Optional[AnalyticsConfig] = None,
    ):
        super().__init__(analytics)
        self.target_date = target_date

    async def execute(self, ctx: PipelineContext) -> None:
        """Execute the waiver recommendations pipeline."""
        target_date = self.target_date or ctx.started_at.date()
        cfg = self.analytics
        ctx.log.info("generating_recommendations", date=target_date.isoformat())

        games = Game.get_games_on_date(target_date)
        team_matchups = build_team_matchups(games)
        if not team_matchups:
            WaiverRecommendation.replace_for_date(target_date, [])
            ctx.log.info("no_games_scheduled", date=target_date.isoformat())
            return

        finals = Game.get_final_games_before(target_date)
        league_history = league_points_allowed(finals, limit=cfg.matchup_league_games)
        matchups = {
            opponent: evaluate_matchup(
                finals,
                opponent,
                league_history,
                opponent_games=cfg.matchup_opponent_games,
                league_average=cfg.league_average_points_allowed,
            )
            for opponent in sorted(set(team_matchups.values()))
        }

        weights = load_scoring_weights()
        histories = PlayerGameStats.get_histories(before=target_date)
        metrics, failed = compute_metrics_batch(histories, weights, cfg)

        excluded = top_player_ids(season_averages(metrics), cfg.exclude_top_n)
        players = load_roster_players()
        candidates = build_candidates(
            players.values(), metrics, team_matchups, matchups, excluded_ids=excluded
        )

        recommendations = rank(
            candidates,
            cfg.ranking_weights,
            max_recommendations=cfg.max_recommendations,
            minutes_trend_scale=cfg.minutes_trend_scale,
        )
        WaiverRecommendation.replace_for_date(target_date, recommendations)
        ctx.increment_records(len(recommendations))

        ctx.log.info(
            "recommendations_generated",
            date=target_date.isoformat(),
            games_count=len(games),
            candidates_considered=len(candidates),
            recommendations=len(recommendations),
            players_failed=len(failed),
        )
