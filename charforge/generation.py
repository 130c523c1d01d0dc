"""Ability score generation: rolling methods and point buy."""

import logging
from enum import Enum

from charforge.dice.parser import parse_dice
from charforge.dice.roller import RandomSource, default_source, evaluate
from charforge.dice.types import RollResult
from charforge.errors import RuleViolation, ViolationCode
from charforge.models import AbilityScores
from charforge.rules.types import Ability

logger = logging.getLogger(__name__)


class RollMethod(str, Enum):
    """Dice formulas for rolling ability scores."""

    FOUR_D6_DROP_LOWEST = "4d6dl1"
    THREE_D6 = "3d6"


# Point-buy cost table (3.5 style)
# Value 8 costs 0, each point above 14 costs more
_POINT_COSTS = {
    8: 0,
    9: 1,
    10: 2,
    11: 3,
    12: 4,
    13: 5,
    14: 6,
    15: 8,  # 15 and up cost more
    16: 10,
    17: 13,
    18: 16,
}

STANDARD_POINT_BUY = 25
HIGH_POWERED_POINT_BUY = 32


def roll_ability_scores(
    method: RollMethod = RollMethod.FOUR_D6_DROP_LOWEST,
    rng: RandomSource | None = None,
) -> tuple[AbilityScores, dict[Ability, RollResult]]:
    """Roll all six ability scores.

    Args:
        method: Rolling method (4d6 drop lowest by default).
        rng: Random source shared by every roll.

    Returns:
        Tuple of (scores, roll breakdown per ability).
    """
    if rng is None:
        rng = default_source()
    expression = parse_dice(RollMethod(method).value)

    rolls = {ability: evaluate(expression, rng) for ability in Ability}
    logger.debug(f"Rolled ability scores with {expression}: {[r.total for r in rolls.values()]}")
    return AbilityScores(**{a.value: r.total for a, r in rolls.items()}), rolls


def calculate_point_cost(value: int) -> int:
    """Calculate point-buy cost for an ability score.

    Args:
        value: The score (8-18 for point buy).

    Returns:
        Point cost for that value.

    Raises:
        ValueError: If value is outside point-buy range.
    """
    if value not in _POINT_COSTS:
        raise ValueError(f"Value {value} is outside point-buy range (8-18)")
    return _POINT_COSTS[value]


def validate_point_buy(
    scores: AbilityScores,
    budget: int = STANDARD_POINT_BUY,
) -> list[RuleViolation]:
    """Validate a point-buy ability allocation.

    Args:
        scores: Base ability scores before racial adjustments.
        budget: Maximum points allowed (default 25).

    Returns:
        Violations; empty when the allocation is legal.
    """
    violations: list[RuleViolation] = []
    total_cost = 0

    for ability, value in scores.to_dict().items():
        if value not in _POINT_COSTS:
            violations.append(
                RuleViolation(
                    ViolationCode.POINT_BUY_OUT_OF_RANGE,
                    f"{ability.value.capitalize()} {value} is outside 8-18",
                    subject=ability.value,
                )
            )
            continue
        total_cost += _POINT_COSTS[value]

    if total_cost > budget:
        violations.append(
            RuleViolation(
                ViolationCode.POINT_BUY_OVER_BUDGET,
                f"Total cost ({total_cost}) exceeds budget ({budget})",
            )
        )

    return violations
