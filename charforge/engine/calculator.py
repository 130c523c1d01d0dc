"""Stat aggregation.

Turns a character plus its resolved modifiers into a fresh DerivedStats
snapshot. Nothing is cached: every call recomputes from the inputs.
"""

import logging
from dataclasses import dataclass

from charforge.engine.abilities import compute_abilities
from charforge.engine.armor_class import compute_armor_class
from charforge.engine.attack import compute_attack
from charforge.engine.hit_points import compute_hit_points
from charforge.engine.pools import (
    feats_total,
    make_pool,
    skill_points_spent,
    skill_points_total,
)
from charforge.engine.progression import carrying_capacity, compute_experience
from charforge.engine.saves import compute_saves
from charforge.engine.skills import compute_skills
from charforge.engine.spells import compute_spell_slots
from charforge.engine.stacking import modifiers_for, stack_modifiers
from charforge.errors import RuleViolation, RuleViolationError
from charforge.models import Character, DerivedStats
from charforge.rules.loader import load_default_tables
from charforge.rules.resolver import Resolution, resolve_modifiers
from charforge.rules.schemas import RuleTables
from charforge.rules.types import Ability, TargetKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatsOutcome:
    """Derived stats, or the violations that prevented them.

    Exactly one of ``stats`` and ``violations`` is populated.
    """

    stats: DerivedStats | None = None
    violations: tuple[RuleViolation, ...] = ()

    @property
    def ok(self) -> bool:
        return self.stats is not None

    def unwrap(self) -> DerivedStats:
        """Get the stats, raising if there were violations.

        Raises:
            RuleViolationError: If the character broke any rule.
        """
        if self.stats is None:
            raise RuleViolationError(list(self.violations))
        return self.stats


class StatCalculator:
    """Computes derived stats against one set of rule tables.

    Example:
        >>> calculator = StatCalculator(tables)
        >>> outcome = calculator.recompute(character, resolve_modifiers(character, tables))
        >>> outcome.stats.attack.sequence
        ('+5',)
    """

    def __init__(self, tables: RuleTables) -> None:
        self.tables = tables

    def recompute(self, character: Character, resolution: Resolution) -> StatsOutcome:
        """Compute a full DerivedStats snapshot.

        Args:
            character: The character's selections.
            resolution: Output of ``resolve_modifiers`` for the same character.

        Returns:
            StatsOutcome with stats, or with every violation found.
        """
        if not resolution.ok:
            return StatsOutcome(violations=resolution.violations)

        modifiers = list(resolution.modifiers)
        class_levels = resolution.class_levels
        class_skills = resolution.class_skills
        character_level = sum(info.level for info in class_levels)
        violations: list[RuleViolation] = []

        abilities, found = compute_abilities(character.abilities, modifiers)
        violations.extend(found)

        dex = abilities[Ability.DEXTERITY].modifier
        strength = abilities[Ability.STRENGTH]

        hit_points, found = compute_hit_points(
            class_levels,
            abilities[Ability.CONSTITUTION].modifier,
            character.hit_point_rolls,
            modifiers,
            character.damage_taken,
        )
        violations.extend(found)

        skills, found = compute_skills(
            self.tables,
            character.skill_ranks,
            class_skills,
            character_level,
            abilities,
            resolution.armor_check_penalty,
            modifiers,
        )
        violations.extend(found)

        skill_points, found = make_pool(
            "skill points",
            skill_points_total(
                class_levels,
                abilities[Ability.INTELLIGENCE].modifier,
                resolution.bonus_skill_points_per_level,
            ),
            skill_points_spent(character.skill_ranks, class_skills),
        )
        violations.extend(found)

        feats, found = make_pool(
            "feats",
            feats_total(character_level, resolution.bonus_feats),
            len(character.feats),
        )
        violations.extend(found)

        if violations or hit_points is None:
            logger.debug(f"Recompute of {character.name} rejected: {len(violations)} violations")
            return StatsOutcome(violations=tuple(violations))

        stats = DerivedStats(
            name=character.name,
            character_level=character_level,
            size=resolution.size,
            abilities=abilities,
            hit_points=hit_points,
            armor_class=compute_armor_class(dex, resolution.max_dex_bonus, modifiers),
            attack=compute_attack(
                class_levels, strength.modifier, dex, resolution.size, modifiers
            ),
            saves=compute_saves(class_levels, abilities, modifiers),
            skills=skills,
            skill_points=skill_points,
            feats=feats,
            spell_slots=compute_spell_slots(
                class_levels, abilities, modifiers, self.tables.bonus_spell_step
            ),
            speed=stack_modifiers(modifiers_for(modifiers, TargetKind.SPEED)),
            initiative=dex + stack_modifiers(modifiers_for(modifiers, TargetKind.INITIATIVE)),
            carrying_capacity=carrying_capacity(strength.score, resolution.size),
            experience=compute_experience(
                character.experience,
                class_levels,
                resolution.favored_class,
                self.tables.experience_table,
            ),
            features=dict(resolution.features),
        )
        logger.debug(f"Recomputed {character.name}: level {character_level}, AC {stats.armor_class.total}")
        return StatsOutcome(stats=stats)


def compute_stats(character: Character, tables: RuleTables | None = None) -> StatsOutcome:
    """Resolve and recompute a character in one call.

    Args:
        character: The character's selections.
        tables: Rule tables (defaults to the configured tables).
    """
    if tables is None:
        tables = load_default_tables()
    return StatCalculator(tables).recompute(character, resolve_modifiers(character, tables))
