"""Ability score computation."""

from charforge.engine.stacking import modifiers_for, stack_modifiers
from charforge.errors import RuleViolation, ViolationCode
from charforge.models import AbilityScores, AbilityStat
from charforge.rules.types import Ability, Modifier, TargetKind

MINIMUM_SCORE = 1


def ability_modifier(score: int) -> int:
    """Calculate the modifier for an ability score.

    Examples:
        >>> ability_modifier(10)
        0
        >>> ability_modifier(9)
        -1
        >>> ability_modifier(18)
        4
    """
    return (score - 10) // 2


def compute_abilities(
    base: AbilityScores,
    modifiers: list[Modifier],
) -> tuple[dict[Ability, AbilityStat], list[RuleViolation]]:
    """Apply stacked ability modifiers to base scores.

    Args:
        base: The character's base scores.
        modifiers: All resolved modifiers.

    Returns:
        Tuple of (final score and modifier per ability, violations).
    """
    abilities: dict[Ability, AbilityStat] = {}
    violations: list[RuleViolation] = []

    for ability in Ability:
        score = base.get(ability) + stack_modifiers(
            modifiers_for(modifiers, TargetKind.ABILITY, ability.value)
        )
        if score < MINIMUM_SCORE:
            violations.append(
                RuleViolation(
                    ViolationCode.ABILITY_BELOW_MINIMUM,
                    f"{ability.value.capitalize()} would drop to {score}",
                    subject=ability.value,
                )
            )
        abilities[ability] = AbilityStat(score=score, modifier=ability_modifier(score))

    return abilities, violations
