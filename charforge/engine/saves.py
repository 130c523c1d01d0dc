"""Saving throw computation."""

from collections.abc import Sequence

from charforge.engine.stacking import modifiers_for, stack_modifiers
from charforge.models import AbilityStat, SavingThrow
from charforge.rules.resolver import ClassLevelInfo
from charforge.rules.types import (
    SAVE_ABILITIES,
    Ability,
    Modifier,
    SaveKind,
    SaveProgression,
    TargetKind,
)


def base_save_for(progression: SaveProgression, level: int) -> int:
    """Base save bonus granted by levels in one class.

    Examples:
        >>> base_save_for(SaveProgression.GOOD, 1)
        2
        >>> base_save_for(SaveProgression.POOR, 1)
        0
    """
    if progression == SaveProgression.GOOD:
        return 2 + level // 2
    return level // 3


def compute_saves(
    class_levels: Sequence[ClassLevelInfo],
    abilities: dict[Ability, AbilityStat],
    modifiers: list[Modifier],
) -> dict[SaveKind, SavingThrow]:
    """Calculate fortitude, reflex and will saves.

    Misc bonuses are modifiers keyed by the save kind or ``"all"``,
    stacked together.
    """
    saves: dict[SaveKind, SavingThrow] = {}
    for kind in SaveKind:
        base = sum(base_save_for(info.saves[kind], info.level) for info in class_levels)
        ability = abilities[SAVE_ABILITIES[kind]].modifier
        misc = stack_modifiers(modifiers_for(modifiers, TargetKind.SAVE, kind.value))
        saves[kind] = SavingThrow(base=base, ability=ability, misc=misc, total=base + ability + misc)
    return saves
