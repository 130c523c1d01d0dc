"""Experience progression and carrying capacity."""

from collections.abc import Sequence

from charforge.models import CarryingCapacity, ExperienceProgress
from charforge.rules.resolver import ClassLevelInfo
from charforge.rules.types import Size

MULTICLASS_PENALTY_PERCENT = 20

# Heavy load limit (lb.) for Strength 11-29; 1-10 is 10 x Strength
_HEAVY_LOADS = {
    11: 115,
    12: 130,
    13: 150,
    14: 175,
    15: 200,
    16: 230,
    17: 260,
    18: 300,
    19: 350,
    20: 400,
    21: 460,
    22: 520,
    23: 600,
    24: 700,
    25: 800,
    26: 920,
    27: 1040,
    28: 1200,
    29: 1400,
}


def level_for_experience(experience: int, table: Sequence[int]) -> int:
    """Highest level the experience total qualifies for.

    Examples:
        >>> level_for_experience(2999, [0, 1000, 3000])
        2
    """
    level = 1
    for index, required in enumerate(table):
        if experience >= required:
            level = index + 1
    return level


def experience_for_level(level: int, table: Sequence[int]) -> int | None:
    """Experience needed to reach a level (None past the end of the table)."""
    if level < 1 or level > len(table):
        return None
    return table[level - 1]


def multiclass_xp_penalty(
    class_levels: Sequence[ClassLevelInfo],
    favored_class: str | None,
) -> int:
    """Experience penalty (percent) for unbalanced multiclassing.

    Each class more than one level below the highest non-favored class
    costs 20%. The favored class is exempt; without one, the highest-level
    class counts as favored.
    """
    if len(class_levels) < 2:
        return 0

    exempt = favored_class
    if exempt is None:
        exempt = max(class_levels, key=lambda info: info.level).class_id

    levels = [info.level for info in class_levels if info.class_id != exempt]
    if len(levels) < 2:
        return 0
    highest = max(levels)
    return MULTICLASS_PENALTY_PERCENT * sum(1 for lvl in levels if highest - lvl > 1)


def compute_experience(
    experience: int,
    class_levels: Sequence[ClassLevelInfo],
    favored_class: str | None,
    table: Sequence[int],
) -> ExperienceProgress:
    """Summarize experience against the table."""
    character_level = sum(info.level for info in class_levels)
    return ExperienceProgress(
        current=experience,
        level=level_for_experience(experience, table) if table else character_level,
        next_level_at=experience_for_level(character_level + 1, table),
        multiclass_penalty=multiclass_xp_penalty(class_levels, favored_class),
    )


def heavy_load(strength: int) -> int:
    """Heavy load limit for a medium biped.

    Examples:
        >>> heavy_load(10)
        100
        >>> heavy_load(30)
        1600
    """
    if strength <= 0:
        return 0
    if strength <= 10:
        return strength * 10
    if strength in _HEAVY_LOADS:
        return _HEAVY_LOADS[strength]
    base = 20 + strength % 10
    return _HEAVY_LOADS[base] * 4 ** ((strength - base) // 10)


def carrying_capacity(strength: int, size: Size = Size.MEDIUM) -> CarryingCapacity:
    """Light, medium and heavy loads for a Strength score and size."""
    heavy = heavy_load(strength)
    multiplier = size.carrying_multiplier
    return CarryingCapacity(
        light=int(heavy // 3 * multiplier),
        medium=int(heavy * 2 // 3 * multiplier),
        heavy=int(heavy * multiplier),
    )
