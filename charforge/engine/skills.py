"""Skill computation: ranks, caps, synergies and armor check penalty."""

from collections.abc import Mapping

from charforge.engine.stacking import modifiers_for, stack_modifiers
from charforge.errors import RuleViolation, ViolationCode
from charforge.models import AbilityStat, SkillStat
from charforge.rules.schemas import RuleTables
from charforge.rules.types import Ability, Modifier, TargetKind

CLASS_SKILL_CAP_BONUS = 3


def skill_rank_cap(character_level: int, class_skill: bool) -> int:
    """Maximum ranks allowed in a skill.

    Examples:
        >>> skill_rank_cap(1, class_skill=True)
        4
        >>> skill_rank_cap(1, class_skill=False)
        2
    """
    cap = character_level + CLASS_SKILL_CAP_BONUS
    return cap if class_skill else cap // 2


def synergy_bonus(tables: RuleTables, skill_id: str, skill_ranks: Mapping[str, int]) -> int:
    """Bonus to a skill from ranks in its synergy sources."""
    return sum(
        synergy.bonus
        for synergy in tables.synergies
        if synergy.target == skill_id
        and skill_ranks.get(synergy.source, 0) >= synergy.required_ranks
    )


def validate_skill_ranks(
    tables: RuleTables,
    skill_ranks: Mapping[str, int],
    class_skills: frozenset[str],
    character_level: int,
) -> list[RuleViolation]:
    """Check ranks for unknown skills, negative values and caps."""
    violations: list[RuleViolation] = []
    for skill_id, ranks in skill_ranks.items():
        if skill_id not in tables.skills:
            violations.append(
                RuleViolation(
                    ViolationCode.UNKNOWN_SKILL,
                    f"Unknown skill '{skill_id}'",
                    subject=skill_id,
                )
            )
            continue
        if ranks < 0:
            violations.append(
                RuleViolation(
                    ViolationCode.NEGATIVE_RANKS,
                    f"{tables.skills[skill_id].name} has {ranks} ranks",
                    subject=skill_id,
                )
            )
            continue
        cap = skill_rank_cap(character_level, skill_id in class_skills)
        if ranks > cap:
            violations.append(
                RuleViolation(
                    ViolationCode.SKILL_RANK_OVER_CAP,
                    f"{tables.skills[skill_id].name} has {ranks} ranks, maximum is {cap}",
                    subject=skill_id,
                )
            )
    return violations


def compute_skills(
    tables: RuleTables,
    skill_ranks: Mapping[str, int],
    class_skills: frozenset[str],
    character_level: int,
    abilities: dict[Ability, AbilityStat],
    armor_check_penalty: int,
    modifiers: list[Modifier],
) -> tuple[dict[str, SkillStat], list[RuleViolation]]:
    """Calculate every skill in the rule tables.

    Args:
        tables: Rule tables with skills and synergies.
        skill_ranks: Ranks bought per skill id.
        class_skills: Union of the character's class skills.
        character_level: Total character level (drives rank caps).
        abilities: Final ability scores.
        armor_check_penalty: Combined penalty from armor and shields (<= 0).
        modifiers: All resolved modifiers.

    Returns:
        Tuple of (skill breakdowns keyed by id, violations).
    """
    violations = validate_skill_ranks(tables, skill_ranks, class_skills, character_level)

    skills: dict[str, SkillStat] = {}
    for skill_id, definition in tables.skills.items():
        ranks = skill_ranks.get(skill_id, 0)
        ability_modifier = abilities[definition.ability].modifier
        misc = stack_modifiers(modifiers_for(modifiers, TargetKind.SKILL, skill_id))
        synergy = synergy_bonus(tables, skill_id, skill_ranks)
        penalty = armor_check_penalty if definition.armor_check_penalty else 0
        is_class_skill = skill_id in class_skills

        skills[skill_id] = SkillStat(
            name=definition.name,
            ability=definition.ability,
            ranks=ranks,
            ability_modifier=ability_modifier,
            misc=misc,
            synergy=synergy,
            armor_check_penalty=penalty,
            total=ranks + ability_modifier + misc + synergy + penalty,
            class_skill=is_class_skill,
            max_ranks=skill_rank_cap(character_level, is_class_skill),
            usable=ranks > 0 or not definition.trained_only,
        )

    return skills, violations
