"""Rules type definitions.

Enums shared by rule tables, the modifier resolver and the stat engine,
plus the immutable Modifier value.
"""

from dataclasses import dataclass
from enum import Enum


class Ability(str, Enum):
    """The six ability scores."""

    STRENGTH = "strength"
    DEXTERITY = "dexterity"
    CONSTITUTION = "constitution"
    INTELLIGENCE = "intelligence"
    WISDOM = "wisdom"
    CHARISMA = "charisma"


class SaveKind(str, Enum):
    """Saving throw categories."""

    FORTITUDE = "fortitude"
    REFLEX = "reflex"
    WILL = "will"


# Governing ability for each save
SAVE_ABILITIES: dict[SaveKind, Ability] = {
    SaveKind.FORTITUDE: Ability.CONSTITUTION,
    SaveKind.REFLEX: Ability.DEXTERITY,
    SaveKind.WILL: Ability.WISDOM,
}

# Modifier key that applies to every saving throw
ALL_SAVES = "all"


class Progression(str, Enum):
    """Base attack bonus progression tier."""

    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"


class SaveProgression(str, Enum):
    """Saving throw progression tier."""

    GOOD = "good"
    POOR = "poor"


class BonusType(str, Enum):
    """Bonus type tag governing stacking.

    Modifiers of the same type do not stack; only UNTYPED and
    CIRCUMSTANCE stack with themselves.
    """

    ENHANCEMENT = "enhancement"
    RACIAL = "racial"
    SIZE = "size"
    DODGE = "dodge"
    DEFLECTION = "deflection"
    NATURAL_ARMOR = "natural_armor"
    ARMOR = "armor"
    SHIELD = "shield"
    UNTYPED = "untyped"
    CIRCUMSTANCE = "circumstance"
    COMPETENCE = "competence"
    INSIGHT = "insight"
    LUCK = "luck"
    MORALE = "morale"
    RESISTANCE = "resistance"

    @property
    def stacks_with_itself(self) -> bool:
        return self in (BonusType.UNTYPED, BonusType.CIRCUMSTANCE)


class TargetKind(str, Enum):
    """What a modifier adjusts."""

    ABILITY = "ability"
    SAVE = "save"
    ARMOR_CLASS = "armor_class"
    SKILL = "skill"
    SPEED = "speed"
    HIT_POINTS = "hit_points"
    SPELL_SLOT = "spell_slot"
    ATTACK = "attack"
    DAMAGE = "damage"
    INITIATIVE = "initiative"


class Size(str, Enum):
    """Creature size categories."""

    FINE = "fine"
    DIMINUTIVE = "diminutive"
    TINY = "tiny"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    HUGE = "huge"
    GARGANTUAN = "gargantuan"
    COLOSSAL = "colossal"

    @property
    def modifier(self) -> int:
        """Size modifier to armor class and attack rolls."""
        return _SIZE_MODIFIERS[self]

    @property
    def grapple_modifier(self) -> int:
        """Special size modifier to grapple checks."""
        return _GRAPPLE_MODIFIERS[self]

    @property
    def carrying_multiplier(self) -> float:
        """Carrying capacity multiplier for bipedal creatures."""
        return _CARRY_MULTIPLIERS[self]


_SIZE_MODIFIERS = {
    Size.FINE: 8,
    Size.DIMINUTIVE: 4,
    Size.TINY: 2,
    Size.SMALL: 1,
    Size.MEDIUM: 0,
    Size.LARGE: -1,
    Size.HUGE: -2,
    Size.GARGANTUAN: -4,
    Size.COLOSSAL: -8,
}

_GRAPPLE_MODIFIERS = {
    Size.FINE: -16,
    Size.DIMINUTIVE: -12,
    Size.TINY: -8,
    Size.SMALL: -4,
    Size.MEDIUM: 0,
    Size.LARGE: 4,
    Size.HUGE: 8,
    Size.GARGANTUAN: 12,
    Size.COLOSSAL: 16,
}

_CARRY_MULTIPLIERS = {
    Size.FINE: 1 / 8,
    Size.DIMINUTIVE: 1 / 4,
    Size.TINY: 1 / 2,
    Size.SMALL: 3 / 4,
    Size.MEDIUM: 1.0,
    Size.LARGE: 2.0,
    Size.HUGE: 4.0,
    Size.GARGANTUAN: 8.0,
    Size.COLOSSAL: 16.0,
}


@dataclass(frozen=True)
class Modifier:
    """A typed numeric adjustment from one source.

    Never mutated; regenerated from the character's selections on every
    resolution.

    Attributes:
        kind: What the modifier adjusts.
        key: Which one (ability name, save kind or "all", skill id, spell
            level as text); empty for single-valued targets like armor class.
        value: Signed magnitude.
        bonus_type: Stacking category.
        source: Where it came from (e.g., "race:dwarf", "item:ring_of_protection_1").
    """

    kind: TargetKind
    key: str
    value: int
    bonus_type: BonusType
    source: str = ""

    def __str__(self) -> str:
        target = f"{self.kind.value}:{self.key}" if self.key else self.kind.value
        return f"{self.value:+d} {self.bonus_type.value} to {target} ({self.source})"
