"""
Fantasy scoring.

Converts a box score into a single fantasy score using a weight-set.
Weight-sets are resolved by the caller; nothing here reads global state.
"""

import math
from collections.abc import Iterable, Mapping
from typing import Any, Optional

import pydantic

from core.errors import ValidationError
from schemas.analytics import FantasyScore
from schemas.stats import ScoringWeights, StatLine

# Categories that carry a scoring multiplier, in display order
SCORING_CATEGORIES = ("pts", "reb", "ast", "stl", "blk", "fg3m", "tov")

POSITIVE_WEIGHT_BOUNDS = (0.0, 10.0)
TURNOVER_WEIGHT_BOUNDS = (-10.0, 0.0)

DEFAULT_SCORING_CONFIG_ID = "default"

DEFAULT_SCORING_WEIGHTS = ScoringWeights(
    id=DEFAULT_SCORING_CONFIG_ID,
    name="Default Configuration",
    is_default=True,
    pts=1,
    reb=1,
    ast=1,
    stl=2,
    blk=2,
    fg3m=1,
    tov=-1,
)


def _read(source: Any, key: str, field: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(key)
    if isinstance(source, (StatLine, ScoringWeights)):
        return getattr(source, key)
    raise ValidationError(
        f"expected a mapping or record, got {type(source).__name__}", field=field
    )


def _numeric(value: Any, field: str) -> float:
    """Return a numeric value, treating absent as 0 and rejecting anything else."""
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(
            f"expected a number, got {type(value).__name__}", field=field
        )
    if math.isnan(value) or math.isinf(value):
        raise ValidationError("expected a finite number", field=field)
    return value


def score(stat_line: Any, weights: Any) -> float:
    """
    Calculate fantasy points for one box score.

    Args:
        stat_line: StatLine (or mapping with the same keys)
        weights: ScoringWeights (or mapping with the same keys)

    Returns:
        Sum of category value times multiplier, at full precision

    Raises:
        ValidationError: If either input is not a record or mapping, or a
            category value or multiplier is not numeric
    """
    total = 0.0
    for category in SCORING_CATEGORIES:
        value = _numeric(_read(stat_line, category, "stat_line"), category)
        multiplier = _numeric(_read(weights, category, "weights"), f"weights.{category}")
        total += value * multiplier
    return total


def fantasy_score_history(
    stat_lines: Iterable[StatLine],
    weights: ScoringWeights,
) -> list[FantasyScore]:
    """Score every game in a history, preserving input order."""
    return [
        FantasyScore(
            player_id=line.player_id,
            game_id=line.game_id,
            game_date=line.game_date,
            scoring_config_id=weights.id,
            fantasy_points=score(line, weights),
        )
        for line in stat_lines
    ]


def parse_stat_line(record: Any) -> StatLine:
    """Build a StatLine from a mapping or ORM row, rejecting malformed fields."""
    try:
        if isinstance(record, Mapping):
            return StatLine.model_validate(dict(record))
        return StatLine.model_validate(record, from_attributes=True)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise ValidationError(first.get("msg", "invalid stat line"), field=field or None) from e


def validate_scoring_weights(weights: ScoringWeights) -> None:
    """
    Check multipliers against the allowed ranges.

    Positive categories must be within [0, 10]; turnovers within [-10, 0].

    Raises:
        ValidationError: On the first out-of-range multiplier
    """
    low, high = POSITIVE_WEIGHT_BOUNDS
    for category in SCORING_CATEGORIES:
        if category == "tov":
            continue
        value = _numeric(getattr(weights, category), category)
        if value < low or value > high:
            raise ValidationError(
                f"multiplier must be between {low:g} and {high:g}", field=category
            )

    low, high = TURNOVER_WEIGHT_BOUNDS
    value = _numeric(weights.tov, "tov")
    if value < low or value > high:
        raise ValidationError(
            f"multiplier must be between {low:g} and {high:g}", field="tov"
        )


def resolve_scoring_weights(
    weight_sets: Iterable[ScoringWeights],
    owner_id: Optional[str] = None,
) -> ScoringWeights:
    """
    Pick the default weight-set for an owner.

    Falls back to the owner's first set, then to the system default.
    """
    owned = [w for w in weight_sets if w.owner_id == owner_id]
    for weights in owned:
        if weights.is_default:
            return weights
    if owned:
        return owned[0]
    return DEFAULT_SCORING_WEIGHTS
