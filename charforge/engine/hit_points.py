"""Hit point computation and hit die rolling."""

import logging
from collections.abc import Sequence

from charforge.dice.roller import RandomSource, default_source, evaluate
from charforge.dice.types import DiceExpression, DiceTerm
from charforge.engine.stacking import modifiers_for, stack_modifiers
from charforge.errors import RuleViolation, ViolationCode
from charforge.models import Character, HitPoints
from charforge.rules.resolver import ClassLevelInfo, resolve_modifiers
from charforge.rules.schemas import RuleTables
from charforge.rules.types import Modifier, TargetKind

logger = logging.getLogger(__name__)


def level_hit_dice(class_levels: Sequence[ClassLevelInfo]) -> list[int]:
    """Hit die size for each character level, in class order."""
    return [info.hit_die for info in class_levels for _ in range(info.level)]


def average_hit_die(hit_die: int) -> int:
    """Hit points for a level taken without rolling.

    Examples:
        >>> average_hit_die(10)
        6
    """
    return hit_die // 2 + 1


def compute_hit_points(
    class_levels: Sequence[ClassLevelInfo],
    con_modifier: int,
    rolls: Sequence[int],
    modifiers: list[Modifier],
    damage_taken: int = 0,
) -> tuple[HitPoints | None, list[RuleViolation]]:
    """Calculate maximum and current hit points.

    First level takes the full hit die. Later levels take the matching
    entry of ``rolls`` when present, otherwise the average. Every level
    gains at least 1 hit point.

    Args:
        class_levels: Class facts in character order.
        con_modifier: Final constitution modifier.
        rolls: Hit die results for character levels 2 and up.
        modifiers: All resolved modifiers.
        damage_taken: Damage subtracted from the maximum.

    Returns:
        Tuple of (HitPoints or None when a roll is invalid, violations).
    """
    dice = level_hit_dice(class_levels)
    violations: list[RuleViolation] = []
    per_level: list[int] = []

    if len(rolls) > max(len(dice) - 1, 0):
        logger.debug(f"Ignoring {len(rolls) - len(dice) + 1} hit die rolls beyond level {len(dice)}")

    for index, hit_die in enumerate(dice):
        if index == 0:
            gained = hit_die
        elif index - 1 < len(rolls):
            gained = rolls[index - 1]
            if not 1 <= gained <= hit_die:
                violations.append(
                    RuleViolation(
                        ViolationCode.INVALID_HIT_POINT_ROLL,
                        f"Level {index + 1} roll {gained} is outside 1-{hit_die}",
                        subject=str(index + 1),
                    )
                )
        else:
            gained = average_hit_die(hit_die)
        per_level.append(max(1, gained + con_modifier))

    if violations:
        return None, violations

    maximum = sum(per_level) + stack_modifiers(
        modifiers_for(modifiers, TargetKind.HIT_POINTS)
    )
    return (
        HitPoints(current=maximum - damage_taken, maximum=maximum, per_level=tuple(per_level)),
        [],
    )


def roll_hit_points(
    character: Character,
    tables: RuleTables,
    rng: RandomSource | None = None,
) -> Character | list[RuleViolation]:
    """Roll hit dice for every level after the first.

    Args:
        character: Character whose classes determine the dice.
        tables: Rule tables for class hit dice.
        rng: Random source (defaults to a fresh system source).

    Returns:
        A copy of the character with ``hit_point_rolls`` filled in, or
        the resolution violations.
    """
    resolution = resolve_modifiers(character, tables)
    if not resolution.ok:
        return list(resolution.violations)
    if rng is None:
        rng = default_source()

    rolls = [
        evaluate(DiceExpression((DiceTerm(1, 1, hit_die),)), rng).total
        for hit_die in level_hit_dice(resolution.class_levels)[1:]
    ]
    logger.debug(f"Rolled hit dice for {character.name}: {rolls}")
    return character.model_copy(update={"hit_point_rolls": tuple(rolls)})
