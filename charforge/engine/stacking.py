"""Bonus-type stacking.

Modifiers of the same bonus type do not stack: only the one with the
largest magnitude counts (a positive one wins a tie). Different types
add together, and untyped and circumstance modifiers always stack.
"""

from collections.abc import Iterable

from charforge.rules.types import ALL_SAVES, BonusType, Modifier, TargetKind


def _strength(modifier: Modifier) -> tuple[int, bool]:
    return abs(modifier.value), modifier.value > 0


def select_stacking(modifiers: Iterable[Modifier]) -> list[Modifier]:
    """Pick the modifiers that count after the stacking rule.

    Args:
        modifiers: Modifiers that all target the same stat.

    Returns:
        The counted modifiers, in first-seen order of their bonus types.
    """
    best: dict[BonusType, Modifier] = {}
    stacking: list[Modifier] = []
    for modifier in modifiers:
        if modifier.bonus_type.stacks_with_itself:
            stacking.append(modifier)
            continue
        current = best.get(modifier.bonus_type)
        if current is None or _strength(modifier) > _strength(current):
            best[modifier.bonus_type] = modifier
    return list(best.values()) + stacking


def stack_modifiers(modifiers: Iterable[Modifier]) -> int:
    """Total of modifiers targeting one stat after the stacking rule.

    Examples:
        >>> from charforge.rules.types import BonusType, Modifier, TargetKind
        >>> ring = Modifier(TargetKind.ARMOR_CLASS, "", 1, BonusType.ENHANCEMENT)
        >>> stack_modifiers([ring, ring])
        1
    """
    return sum(m.value for m in select_stacking(modifiers))


def totals_by_type(modifiers: Iterable[Modifier]) -> dict[BonusType, int]:
    """Counted contribution of each bonus type."""
    totals: dict[BonusType, int] = {}
    for modifier in select_stacking(modifiers):
        totals[modifier.bonus_type] = totals.get(modifier.bonus_type, 0) + modifier.value
    return totals


def modifiers_for(
    modifiers: Iterable[Modifier],
    kind: TargetKind,
    key: str | None = None,
) -> list[Modifier]:
    """Filter modifiers by target kind and, optionally, key.

    For saves, modifiers keyed ``"all"`` match every save kind.
    """
    keys = None
    if key is not None:
        keys = {key, ALL_SAVES} if kind == TargetKind.SAVE else {key}
    return [
        m for m in modifiers
        if m.kind == kind and (keys is None or m.key in keys)
    ]
