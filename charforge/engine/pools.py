"""Skill point and feat pools."""

from collections.abc import Mapping, Sequence

from charforge.errors import RuleViolation, ViolationCode
from charforge.models import Pool
from charforge.rules.resolver import ClassLevelInfo

FIRST_LEVEL_SKILL_MULTIPLIER = 4
CROSS_CLASS_RANK_COST = 2
FEAT_LEVEL_INTERVAL = 3


def skill_points_total(
    class_levels: Sequence[ClassLevelInfo],
    int_modifier: int,
    bonus_per_level: int = 0,
) -> int:
    """Skill points earned across all levels.

    Each class level grants ``max(1, class base + Int modifier)`` plus the
    racial bonus; the very first character level grants four times that.

    Examples:
        A human fighter 1 with Int 10 gets (2 + 0 + 1) * 4 = 12 points.
    """
    total = 0
    first = True
    for info in class_levels:
        per_level = max(1, info.skill_points + int_modifier) + bonus_per_level
        for _ in range(info.level):
            total += per_level * FIRST_LEVEL_SKILL_MULTIPLIER if first else per_level
            first = False
    return total


def skill_rank_cost(skill_id: str, ranks: int, class_skills: frozenset[str]) -> int:
    """Skill points spent on ranks in one skill."""
    if skill_id in class_skills:
        return ranks
    return ranks * CROSS_CLASS_RANK_COST


def skill_points_spent(skill_ranks: Mapping[str, int], class_skills: frozenset[str]) -> int:
    """Skill points spent across all skills."""
    return sum(
        skill_rank_cost(skill_id, ranks, class_skills)
        for skill_id, ranks in skill_ranks.items()
        if ranks > 0
    )


def feats_total(character_level: int, bonus_feats: int = 0) -> int:
    """Feats earned: one at first level, one every third level, plus bonuses.

    Examples:
        >>> feats_total(1)
        1
        >>> feats_total(6, bonus_feats=1)
        3
    """
    return 1 + (character_level - 1) // FEAT_LEVEL_INTERVAL + bonus_feats


def make_pool(name: str, total: int, spent: int) -> tuple[Pool, list[RuleViolation]]:
    """Build a pool, reporting overspending."""
    violations = []
    if spent > total:
        violations.append(
            RuleViolation(
                ViolationCode.POOL_OVERDRAWN,
                f"{spent} {name} spent but only {total} available",
                subject=name,
            )
        )
    return Pool(total=total, spent=spent, available=total - spent), violations
