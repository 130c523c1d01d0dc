"""Rule table schemas for YAML/JSON import.

This module defines Pydantic models for the static rule data (races,
classes, feats, equipment, skills) the engine looks up by string id.
Use with the rule loader.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from charforge.rules.types import (
    Ability,
    BonusType,
    Modifier,
    Progression,
    SaveKind,
    SaveProgression,
    Size,
    TargetKind,
)


class RuleModel(BaseModel):
    """Base for rule table records: immutable, unknown fields rejected."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class ModifierTemplate(RuleModel):
    """A modifier as written in rule data."""

    target: TargetKind = Field(..., description="What the modifier adjusts")
    key: str = Field(
        default="",
        description="Ability, save kind ('all' for every save), skill id or spell level",
    )
    value: int = Field(..., description="Signed magnitude")
    bonus_type: BonusType = Field(default=BonusType.UNTYPED, description="Stacking category")

    def to_modifier(self, source: str) -> Modifier:
        """Create the runtime Modifier tagged with its source."""
        return Modifier(
            kind=self.target,
            key=self.key,
            value=self.value,
            bonus_type=self.bonus_type,
            source=source,
        )


class RaceDefinition(RuleModel):
    """Template for a playable race."""

    name: str = Field(..., description="Human-readable name")
    size: Size = Field(default=Size.MEDIUM)
    speed: int = Field(default=30, ge=0, description="Base land speed in feet")
    ability_modifiers: dict[Ability, int] = Field(default_factory=dict)
    skill_bonuses: dict[str, int] = Field(
        default_factory=dict,
        description="Racial bonuses keyed by skill id",
    )
    save_bonuses: dict[str, int] = Field(
        default_factory=dict,
        description="Racial bonuses keyed by save kind or 'all'",
    )
    bonus_feats: int = Field(default=0, ge=0, description="Extra feats at 1st level")
    bonus_skill_points: int = Field(
        default=0,
        ge=0,
        description="Extra skill points per level (quadrupled at 1st level)",
    )
    favored_class: str | None = Field(
        default=None,
        description="Class id exempt from multiclass penalties; None means highest-level class",
    )
    traits: list[str] = Field(default_factory=list)


class SpellcastingDefinition(RuleModel):
    """Spellcasting block of a class."""

    ability: Ability = Field(..., description="Ability that governs bonus spells")
    spells_per_day: dict[int, dict[int, int]] = Field(
        ...,
        description="Class level -> spell level -> base slots",
    )

    def base_slots(self, caster_level: int) -> dict[int, int]:
        """Base slots for a caster level (empty before the first entry)."""
        return dict(self.spells_per_day.get(caster_level, {}))


class ClassDefinition(RuleModel):
    """Template for a character class."""

    name: str = Field(..., description="Human-readable name")
    hit_die: int = Field(..., ge=2, description="Hit die size (e.g., 10 for d10)")
    base_attack: Progression = Field(..., description="Base attack bonus progression")
    saves: dict[SaveKind, SaveProgression] = Field(
        ...,
        description="Progression per saving throw",
    )
    skill_points: int = Field(..., ge=0, description="Skill points per level before Int")
    class_skills: list[str] = Field(default_factory=list)
    bonus_feat_levels: list[int] = Field(
        default_factory=list,
        description="Class levels that grant a bonus feat",
    )
    features: dict[int, list[str]] = Field(
        default_factory=dict,
        description="Class level -> features gained",
    )
    spellcasting: SpellcastingDefinition | None = None

    @model_validator(mode="after")
    def _all_saves_present(self) -> "ClassDefinition":
        missing = [kind.value for kind in SaveKind if kind not in self.saves]
        if missing:
            raise ValueError(f"Missing save progressions: {', '.join(missing)}")
        return self


class FeatDefinition(RuleModel):
    """Template for a feat. Many feats carry no numeric modifiers."""

    name: str = Field(..., description="Human-readable name")
    modifiers: list[ModifierTemplate] = Field(default_factory=list)
    prerequisites: str | None = None
    benefit: str | None = None


class ItemBase(RuleModel):
    """Fields shared by every equipment category."""

    name: str = Field(..., description="Human-readable name")
    modifiers: list[ModifierTemplate] = Field(default_factory=list)


class ArmorItem(ItemBase):
    """Body armor: armor bonus, max dex cap and check penalty."""

    category: Literal["armor"] = "armor"
    armor_bonus: int = Field(..., ge=0)
    max_dex_bonus: int | None = Field(default=None, ge=0)
    armor_check_penalty: int = Field(default=0, le=0)


class ShieldItem(ItemBase):
    """A shield: shield bonus and check penalty."""

    category: Literal["shield"] = "shield"
    shield_bonus: int = Field(..., ge=0)
    max_dex_bonus: int | None = Field(default=None, ge=0)
    armor_check_penalty: int = Field(default=0, le=0)


class WeaponItem(ItemBase):
    """A weapon; enhancement shows up as attack/damage modifiers."""

    category: Literal["weapon"] = "weapon"
    damage: str = Field(default="1d6", description="Damage dice formula")


class WondrousItem(ItemBase):
    """Rings, amulets, cloaks and other worn magic items."""

    category: Literal["wondrous"] = "wondrous"


ItemDefinition = Annotated[
    Union[ArmorItem, ShieldItem, WeaponItem, WondrousItem],
    Field(discriminator="category"),
]


class SkillDefinition(RuleModel):
    """Template for a skill."""

    name: str = Field(..., description="Human-readable name")
    ability: Ability = Field(..., description="Key ability")
    trained_only: bool = False
    armor_check_penalty: bool = False


class SynergyDefinition(RuleModel):
    """Ranks in one skill granting a bonus to another."""

    source: str = Field(..., description="Prerequisite skill id")
    target: str = Field(..., description="Skill id receiving the bonus")
    required_ranks: int = Field(default=5, ge=1)
    bonus: int = Field(default=2)


class RuleTables(RuleModel):
    """Complete set of read-only rule lookups keyed by id."""

    races: dict[str, RaceDefinition] = Field(default_factory=dict)
    classes: dict[str, ClassDefinition] = Field(default_factory=dict)
    feats: dict[str, FeatDefinition] = Field(default_factory=dict)
    items: dict[str, ItemDefinition] = Field(default_factory=dict)
    skills: dict[str, SkillDefinition] = Field(default_factory=dict)
    synergies: list[SynergyDefinition] = Field(default_factory=list)
    bonus_spell_step: int = Field(
        default=4,
        ge=1,
        description="Casting modifier points per extra bonus slot at a spell level",
    )
    experience_table: list[int] = Field(
        default_factory=list,
        description="Total experience required to reach level N+1 (index 0 = level 1)",
    )

    @model_validator(mode="after")
    def _references_resolve(self) -> "RuleTables":
        unknown: list[str] = []
        for class_id, definition in self.classes.items():
            for skill_id in definition.class_skills:
                if skill_id not in self.skills:
                    unknown.append(f"class '{class_id}' skill '{skill_id}'")
        for race_id, race in self.races.items():
            for skill_id in race.skill_bonuses:
                if skill_id not in self.skills:
                    unknown.append(f"race '{race_id}' skill '{skill_id}'")
            if race.favored_class is not None and race.favored_class not in self.classes:
                unknown.append(f"race '{race_id}' favored class '{race.favored_class}'")
        for synergy in self.synergies:
            for skill_id in (synergy.source, synergy.target):
                if skill_id not in self.skills:
                    unknown.append(f"synergy skill '{skill_id}'")
        if unknown:
            raise ValueError(f"Unknown references: {'; '.join(unknown)}")
        return self
