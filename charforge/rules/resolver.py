"""Modifier source resolution.

Flattens a character's selections (race, classes, feats, equipment) into
typed modifiers plus the class-level facts the stat engine needs. No
stacking happens here; output order follows the character's selections.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from charforge.errors import RuleViolation, ViolationCode
from charforge.rules.schemas import (
    ArmorItem,
    RuleTables,
    ShieldItem,
    SpellcastingDefinition,
)
from charforge.rules.types import (
    BonusType,
    Modifier,
    Progression,
    SaveKind,
    SaveProgression,
    Size,
    TargetKind,
)

if TYPE_CHECKING:
    from charforge.models import Character

logger = logging.getLogger(__name__)

MAX_CLASS_LEVEL = 20


@dataclass(frozen=True)
class ClassLevelInfo:
    """Rule facts for the levels a character holds in one class."""

    class_id: str
    level: int
    hit_die: int
    base_attack: Progression
    saves: Mapping[SaveKind, SaveProgression]
    skill_points: int
    class_skills: frozenset[str]
    spellcasting: SpellcastingDefinition | None = None


@dataclass(frozen=True)
class Resolution:
    """Result of resolving a character against rule tables.

    Attributes:
        modifiers: Every modifier from every source, unstacked.
        class_levels: Per-class facts in the character's class order.
        size: Size category from the race.
        bonus_feats: Extra feats from race and class bonus-feat levels.
        bonus_skill_points_per_level: Racial extra skill points per level.
        max_dex_bonus: Tightest dexterity cap from armor and shields.
        armor_check_penalty: Combined armor and shield check penalty (<= 0).
        favored_class: Race's favored class id (None means highest level).
        features: Class id -> features gained up to the class level.
        violations: Unknown ids and other selection problems.
    """

    modifiers: tuple[Modifier, ...] = ()
    class_levels: tuple[ClassLevelInfo, ...] = ()
    size: Size = Size.MEDIUM
    bonus_feats: int = 0
    bonus_skill_points_per_level: int = 0
    max_dex_bonus: int | None = None
    armor_check_penalty: int = 0
    favored_class: str | None = None
    features: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    violations: tuple[RuleViolation, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.violations

    @property
    def class_skills(self) -> frozenset[str]:
        """Union of class skills across every class."""
        skills: frozenset[str] = frozenset()
        for info in self.class_levels:
            skills |= info.class_skills
        return skills


def resolve_modifiers(character: "Character", tables: RuleTables) -> Resolution:
    """Collect modifiers and class facts for a character.

    Args:
        character: The character's selections.
        tables: Rule tables to look ids up in.

    Returns:
        Resolution. When ``violations`` is non-empty the other fields are
        partial and must not be used for stat computation.

    Example:
        >>> resolution = resolve_modifiers(character, tables)
        >>> [str(m) for m in resolution.modifiers][:1]
        ['+2 racial to ability:constitution (race:dwarf)']
    """
    modifiers: list[Modifier] = []
    violations: list[RuleViolation] = []
    size = Size.MEDIUM
    bonus_feats = 0
    bonus_skill_points = 0
    favored_class = None

    # Race
    race = tables.races.get(character.race)
    if race is None:
        violations.append(
            RuleViolation(
                ViolationCode.UNKNOWN_RACE,
                f"Unknown race '{character.race}'",
                subject=character.race,
            )
        )
    else:
        source = f"race:{character.race}"
        size = race.size
        bonus_feats += race.bonus_feats
        bonus_skill_points = race.bonus_skill_points
        favored_class = race.favored_class
        for ability, value in race.ability_modifiers.items():
            modifiers.append(
                Modifier(TargetKind.ABILITY, ability.value, value, BonusType.RACIAL, source)
            )
        modifiers.append(
            Modifier(TargetKind.SPEED, "", race.speed, BonusType.RACIAL, source)
        )
        for skill_id, value in race.skill_bonuses.items():
            modifiers.append(
                Modifier(TargetKind.SKILL, skill_id, value, BonusType.RACIAL, source)
            )
        for save_key, value in race.save_bonuses.items():
            modifiers.append(
                Modifier(TargetKind.SAVE, save_key, value, BonusType.RACIAL, source)
            )
        if size.modifier:
            size_source = f"size:{size.value}"
            modifiers.append(
                Modifier(TargetKind.ARMOR_CLASS, "", size.modifier, BonusType.SIZE, size_source)
            )
            modifiers.append(
                Modifier(TargetKind.ATTACK, "", size.modifier, BonusType.SIZE, size_source)
            )

    # Classes
    class_levels: list[ClassLevelInfo] = []
    features: dict[str, tuple[str, ...]] = {}
    seen_classes: set[str] = set()
    if not character.classes:
        violations.append(
            RuleViolation(ViolationCode.INVALID_LEVEL, "Character has no class levels")
        )
    for entry in character.classes:
        definition = tables.classes.get(entry.class_id)
        if definition is None:
            violations.append(
                RuleViolation(
                    ViolationCode.UNKNOWN_CLASS,
                    f"Unknown class '{entry.class_id}'",
                    subject=entry.class_id,
                )
            )
            continue
        if entry.class_id in seen_classes:
            violations.append(
                RuleViolation(
                    ViolationCode.DUPLICATE_CLASS,
                    f"{definition.name} is listed more than once; combine its levels",
                    subject=entry.class_id,
                )
            )
            continue
        seen_classes.add(entry.class_id)
        if not 1 <= entry.level <= MAX_CLASS_LEVEL:
            violations.append(
                RuleViolation(
                    ViolationCode.INVALID_LEVEL,
                    f"{definition.name} level {entry.level} is outside 1-{MAX_CLASS_LEVEL}",
                    subject=entry.class_id,
                )
            )
            continue

        class_levels.append(
            ClassLevelInfo(
                class_id=entry.class_id,
                level=entry.level,
                hit_die=definition.hit_die,
                base_attack=definition.base_attack,
                saves=MappingProxyType(dict(definition.saves)),
                skill_points=definition.skill_points,
                class_skills=frozenset(definition.class_skills),
                spellcasting=definition.spellcasting,
            )
        )
        bonus_feats += sum(1 for lvl in definition.bonus_feat_levels if lvl <= entry.level)
        gained = [
            feature
            for lvl in sorted(definition.features)
            if lvl <= entry.level
            for feature in definition.features[lvl]
        ]
        features[entry.class_id] = features.get(entry.class_id, ()) + tuple(gained)

    # Feats
    for feat_id in character.feats:
        feat = tables.feats.get(feat_id)
        if feat is None:
            violations.append(
                RuleViolation(
                    ViolationCode.UNKNOWN_FEAT,
                    f"Unknown feat '{feat_id}'",
                    subject=feat_id,
                )
            )
            continue
        modifiers.extend(t.to_modifier(f"feat:{feat_id}") for t in feat.modifiers)

    # Equipment
    max_dex_bonus: int | None = None
    armor_check_penalty = 0
    armor_worn: list[str] = []
    shields_worn: list[str] = []
    for item_id in character.equipment:
        item = tables.items.get(item_id)
        if item is None:
            violations.append(
                RuleViolation(
                    ViolationCode.UNKNOWN_ITEM,
                    f"Unknown item '{item_id}'",
                    subject=item_id,
                )
            )
            continue

        source = f"item:{item_id}"
        if isinstance(item, ArmorItem):
            armor_worn.append(item_id)
            modifiers.append(
                Modifier(TargetKind.ARMOR_CLASS, "", item.armor_bonus, BonusType.ARMOR, source)
            )
        elif isinstance(item, ShieldItem):
            shields_worn.append(item_id)
            modifiers.append(
                Modifier(TargetKind.ARMOR_CLASS, "", item.shield_bonus, BonusType.SHIELD, source)
            )
        if isinstance(item, (ArmorItem, ShieldItem)):
            armor_check_penalty += item.armor_check_penalty
            if item.max_dex_bonus is not None:
                max_dex_bonus = (
                    item.max_dex_bonus
                    if max_dex_bonus is None
                    else min(max_dex_bonus, item.max_dex_bonus)
                )
        modifiers.extend(t.to_modifier(source) for t in item.modifiers)

    for slot, worn in (("armor", armor_worn), ("shield", shields_worn)):
        if len(worn) > 1:
            violations.append(
                RuleViolation(
                    ViolationCode.SLOT_CONFLICT,
                    f"Only one {slot} can be worn, got {', '.join(worn)}",
                    subject=slot,
                )
            )

    logger.debug(
        f"Resolved {character.name}: {len(modifiers)} modifiers, "
        f"{len(class_levels)} classes, {len(violations)} violations"
    )

    return Resolution(
        modifiers=tuple(modifiers),
        class_levels=tuple(class_levels),
        size=size,
        bonus_feats=bonus_feats,
        bonus_skill_points_per_level=bonus_skill_points,
        max_dex_bonus=max_dex_bonus,
        armor_check_penalty=armor_check_penalty,
        favored_class=favored_class,
        features=MappingProxyType(features),
        violations=tuple(violations),
    )
