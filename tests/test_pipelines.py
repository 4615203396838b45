"""
Tests for the analytics pipelines, run end to end against SQLite.
"""

import asyncio
from datetime import date

import pytest

from core.settings import settings
from db.models import (
    PlayerConsistency,
    PlayerFantasyScore,
    PlayerRollingStats,
    PlayerTrend,
    ScoringConfiguration,
    WaiverRecommendation,
)
from pipelines import (
    PlayerMetricsPipeline,
    WaiverRecommendationsPipeline,
    get_pipeline,
    list_pipelines,
    run_all_pipelines,
)
from pipelines.base import BasePipeline
from pipelines.config import PipelineConfig
from schemas.analytics import AnalyticsConfig
from schemas.common import ApiStatus
from schemas.stats import GameStatus, InjuryStatus
from schemas.waiver import RecommendationCandidate
from services.waiver_service import rank

TARGET_DATE = date(2025, 1, 20)


def table_snapshot(model):
    """Every stored column of every row except the surrogate id."""
    skip = {"id"}
    columns = [f for name, f in model._meta.fields.items() if name not in skip]
    return sorted(tuple(row) for row in model.select(*columns).tuples())


@pytest.fixture
def league(add_player, add_game):
    """
    One game on the target date (BOS vs NYK), one cancelled game, and one
    completed game the day before: BOS allowed 80, NYK allowed 100.
    """
    add_game("today-1", TARGET_DATE, "BOS", "NYK")
    add_game("today-2", TARGET_DATE, "LAL", "GSW", status=GameStatus.CANCELED)
    add_game("past-1", date(2025, 1, 19), "BOS", "NYK", 100, 80, status=GameStatus.FINAL)

    add_player("star", "BOS", 40)
    add_player("lal", "LAL", 30)
    add_player("hurt", "NYK", 25, injury=InjuryStatus.OUT)
    add_player("bos", "BOS", 20)
    add_player("nyk", "NYK", 15, injury=InjuryStatus.QUESTIONABLE)
    add_player("mia", "MIA", 12)


class TestPlayerMetricsPipeline:
    """Tests for PlayerMetricsPipeline."""

    def test_writes_all_outputs(self, league):
        result = asyncio.run(PlayerMetricsPipeline().run())

        assert result.status == ApiStatus.SUCCESS
        assert result.records_processed == 6
        assert PlayerFantasyScore.select().count() == 30
        # season + three windows, for fantasy points and minutes
        assert PlayerRollingStats.select().count() == 6 * 8
        assert PlayerConsistency.select().count() > 0
        # five games only: recent window covers everything, so no trend yet
        assert PlayerTrend.select().count() == 0

    def test_rerun_is_idempotent(self, league):
        asyncio.run(PlayerMetricsPipeline().run())
        first = {m: table_snapshot(m) for m in (PlayerFantasyScore, PlayerRollingStats, PlayerConsistency)}

        asyncio.run(PlayerMetricsPipeline().run())
        second = {m: table_snapshot(m) for m in (PlayerFantasyScore, PlayerRollingStats, PlayerConsistency)}

        assert first == second

    def test_invalid_weight_sets_skipped(self, league):
        ScoringConfiguration.create(id="cats", name="Cats", stl=3.0, blk=3.0)
        ScoringConfiguration.create(id="broken", name="Broken", stl=25.0)

        result = asyncio.run(PlayerMetricsPipeline().run())

        assert result.status == ApiStatus.SUCCESS
        assert result.records_processed == 12
        config_ids = {row.scoring_config_id for row in PlayerFantasyScore.select()}
        assert config_ids == {"default", "cats"}

    def test_empty_database(self, database):
        result = asyncio.run(PlayerMetricsPipeline().run())
        assert result.status == ApiStatus.SUCCESS
        assert result.records_processed == 0


class TestWaiverRecommendationsPipeline:
    """Tests for WaiverRecommendationsPipeline."""

    @pytest.fixture
    def analytics(self):
        return AnalyticsConfig(exclude_top_n=1)

    def test_recommendations(self, league, analytics):
        result = asyncio.run(WaiverRecommendationsPipeline(TARGET_DATE, analytics).run())
        assert result.status == ApiStatus.SUCCESS
        assert result.records_processed == 2

        rows = WaiverRecommendation.for_date(TARGET_DATE)
        assert [r.player_id for r in rows] == ["bos", "nyk"]

        bos, nyk = rows
        assert bos.opponent == "NYK"
        assert bos.matchup_favorability == pytest.approx(100 / 90)
        assert bos.reasoning == "Solid fantasy production; Good matchup vs NYK"
        assert nyk.injury_status == InjuryStatus.QUESTIONABLE.value
        assert nyk.reasoning == (
            "Decent fantasy floor; Challenging matchup vs BOS; "
            "Questionable injury status - monitor closely"
        )

    def test_rerun_is_idempotent(self, league, analytics):
        asyncio.run(WaiverRecommendationsPipeline(TARGET_DATE, analytics).run())
        first = table_snapshot(WaiverRecommendation)
        asyncio.run(WaiverRecommendationsPipeline(TARGET_DATE, analytics).run())
        assert table_snapshot(WaiverRecommendation) == first

    def test_no_games_clears_date(self, league, analytics):
        off_day = date(2025, 1, 21)
        stale = rank([RecommendationCandidate(player_id="stale", projected_points=10.0)])
        WaiverRecommendation.replace_for_date(off_day, stale)

        result = asyncio.run(WaiverRecommendationsPipeline(off_day, analytics).run())

        assert result.status == ApiStatus.SUCCESS
        assert result.records_processed == 0
        assert WaiverRecommendation.for_date(off_day) == []


class TestPipelineLifecycle:
    """Tests for the base lifecycle and the registry."""

    def test_exception_becomes_failed_result(self, database):
        class ExplodingPipeline(BasePipeline):
            config = PipelineConfig(
                name="exploding",
                display_name="Exploding",
                description="Always fails",
                target_table="none",
            )

            async def execute(self, ctx):
                ctx.increment_records(3)
                raise RuntimeError("boom")

        result = asyncio.run(ExplodingPipeline().run())
        assert result.status == ApiStatus.ERROR
        assert result.error == "RuntimeError: boom"
        assert result.records_processed == 3

    def test_missing_config_rejected(self):
        class Unconfigured(BasePipeline):
            config = None

            async def execute(self, ctx):
                pass

        with pytest.raises(ValueError):
            Unconfigured()

    def test_unknown_pipeline(self):
        with pytest.raises(KeyError):
            get_pipeline("nope")

    def test_registry_listing(self):
        assert [p["name"] for p in list_pipelines()] == ["player_metrics", "waiver_recommendations"]

    def test_run_all_passes_target_date(self, league, monkeypatch):
        monkeypatch.setattr(settings, "exclude_top_n", 1)
        results = asyncio.run(run_all_pipelines(target_date=TARGET_DATE))
        assert set(results) == {"player_metrics", "waiver_recommendations"}
        assert all(r.status == ApiStatus.SUCCESS for r in results.values())
        assert WaiverRecommendation.for_date(TARGET_DATE)
