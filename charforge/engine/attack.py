"""Base attack bonus and attack totals."""

from collections.abc import Sequence

from charforge.engine.stacking import modifiers_for, stack_modifiers
from charforge.models import AttackBonus
from charforge.rules.resolver import ClassLevelInfo
from charforge.rules.types import Modifier, Progression, Size, TargetKind

ITERATIVE_STEP = 5


def base_attack_for(progression: Progression, level: int) -> int:
    """Base attack bonus granted by levels in one class.

    Examples:
        >>> base_attack_for(Progression.AVERAGE, 4)
        3
    """
    if progression == Progression.GOOD:
        return level
    if progression == Progression.AVERAGE:
        return level * 3 // 4
    return level // 2


def base_attack_bonus(class_levels: Sequence[ClassLevelInfo]) -> int:
    """Sum of base attack bonus across classes."""
    return sum(base_attack_for(info.base_attack, info.level) for info in class_levels)


def attack_sequence(base_attack: int) -> tuple[str, ...]:
    """Iterative attack bonuses for a full attack.

    The first attack is always present; each further attack is 5 lower
    and only exists while still positive.

    Examples:
        >>> attack_sequence(11)
        ('+11', '+6', '+1')
        >>> attack_sequence(5)
        ('+5',)
    """
    attacks = [base_attack]
    while attacks[-1] - ITERATIVE_STEP > 0:
        attacks.append(attacks[-1] - ITERATIVE_STEP)
    return tuple(f"{bonus:+d}" for bonus in attacks)


def compute_attack(
    class_levels: Sequence[ClassLevelInfo],
    str_modifier: int,
    dex_modifier: int,
    size: Size,
    modifiers: list[Modifier],
) -> AttackBonus:
    """Calculate base attack bonus and melee, ranged and grapple totals."""
    base = base_attack_bonus(class_levels)
    attack_misc = stack_modifiers(modifiers_for(modifiers, TargetKind.ATTACK))

    return AttackBonus(
        base=base,
        sequence=attack_sequence(base),
        melee=base + str_modifier + attack_misc,
        ranged=base + dex_modifier + attack_misc,
        grapple=base + str_modifier + size.grapple_modifier,
        damage_bonus=str_modifier + stack_modifiers(modifiers_for(modifiers, TargetKind.DAMAGE)),
    )
