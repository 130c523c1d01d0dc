"""Character and derived-stat models.

These are the JSON interchange types: a ``Character`` is what a caller
builds and persists, ``DerivedStats`` is what the stat engine produces
from it. Both are immutable; changes produce new instances.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Any, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, WrapSerializer

from charforge.rules.types import Ability, SaveKind, Size

K = TypeVar("K")
V = TypeVar("V")


def _freeze(value: Mapping[Any, Any]) -> Mapping[Any, Any]:
    return MappingProxyType(dict(value))


def _thaw(value: Mapping[Any, Any], handler: Any) -> Any:
    return handler(dict(value))


# Read-only mapping field; serializes as a plain dict
FrozenDict = Annotated[
    Mapping[K, V],
    AfterValidator(_freeze),
    WrapSerializer(_thaw),
]


class FrozenModel(BaseModel):
    """Immutable model base."""

    model_config = ConfigDict(frozen=True, validate_default=True)


class AbilityScores(FrozenModel):
    """The six base ability scores."""

    strength: int = Field(default=10, ge=1)
    dexterity: int = Field(default=10, ge=1)
    constitution: int = Field(default=10, ge=1)
    intelligence: int = Field(default=10, ge=1)
    wisdom: int = Field(default=10, ge=1)
    charisma: int = Field(default=10, ge=1)

    def get(self, ability: Ability) -> int:
        """Get the score for an ability."""
        return getattr(self, ability.value)

    def to_dict(self) -> dict[Ability, int]:
        """Convert to a dict keyed by Ability."""
        return {ability: self.get(ability) for ability in Ability}


class ClassLevel(FrozenModel):
    """Levels taken in one class."""

    class_id: str = Field(..., description="Class id in the rule tables")
    level: int = Field(..., description="Levels in this class (1-20)")


class Character(FrozenModel):
    """A character's selections.

    ``classes`` is ordered: the first entry is the class taken at first
    character level. ``hit_point_rolls`` holds die results for every
    character level after the first, following the class order; missing
    entries use the average.
    """

    name: str = Field(..., description="Character name")
    race: str = Field(..., description="Race id")
    classes: tuple[ClassLevel, ...] = Field(default=(), description="Ordered class levels")
    abilities: AbilityScores = Field(default_factory=AbilityScores)
    feats: tuple[str, ...] = Field(default=(), description="Selected feat ids")
    equipment: tuple[str, ...] = Field(default=(), description="Equipped item ids")
    experience: int = Field(default=0, ge=0)
    skill_ranks: FrozenDict[str, int] = Field(
        default_factory=dict,
        description="Ranks bought per skill id",
    )
    hit_point_rolls: tuple[int, ...] = Field(
        default=(),
        description="Hit die results for levels 2 and up",
    )
    damage_taken: int = Field(default=0, ge=0)

    @property
    def character_level(self) -> int:
        """Total levels across all classes."""
        return sum(entry.level for entry in self.classes)


class AbilityStat(FrozenModel):
    """Final score and modifier of one ability."""

    score: int
    modifier: int


class HitPoints(FrozenModel):
    """Hit point totals."""

    current: int
    maximum: int
    per_level: tuple[int, ...] = Field(
        default=(),
        description="Hit points gained at each character level",
    )


class ArmorClass(FrozenModel):
    """Armor class with its itemized components."""

    total: int
    touch: int
    flat_footed: int
    effective_dex: int = Field(..., description="Dexterity modifier after max-dex caps")
    components: FrozenDict[str, int] = Field(
        default_factory=dict,
        description="Contribution per bonus type, plus base and dexterity",
    )


class AttackBonus(FrozenModel):
    """Base attack bonus and derived attack totals."""

    base: int
    sequence: tuple[str, ...] = Field(..., description="Iterative attacks, e.g. ('+11', '+6', '+1')")
    melee: int
    ranged: int
    grapple: int
    damage_bonus: int = Field(default=0, description="Strength plus damage modifiers")


class SavingThrow(FrozenModel):
    """One saving throw."""

    base: int
    ability: int
    misc: int
    total: int


class SkillStat(FrozenModel):
    """One skill's breakdown."""

    name: str
    ability: Ability
    ranks: int
    ability_modifier: int
    misc: int
    synergy: int
    armor_check_penalty: int
    total: int
    class_skill: bool
    max_ranks: int
    usable: bool


class Pool(FrozenModel):
    """A spendable budget (skill points or feats)."""

    total: int
    spent: int
    available: int


class CarryingCapacity(FrozenModel):
    """Load limits in pounds."""

    light: int
    medium: int
    heavy: int


class ExperienceProgress(FrozenModel):
    """Where the character stands on the experience table."""

    current: int
    level: int = Field(..., description="Level the experience total supports")
    next_level_at: int | None = Field(
        default=None,
        description="Experience needed for the next level; None at the top of the table",
    )
    multiclass_penalty: int = Field(default=0, description="Experience penalty in percent")


class DerivedStats(FrozenModel):
    """Everything the engine computes for a character."""

    name: str
    character_level: int
    size: Size
    abilities: FrozenDict[Ability, AbilityStat]
    hit_points: HitPoints
    armor_class: ArmorClass
    attack: AttackBonus
    saves: FrozenDict[SaveKind, SavingThrow]
    skills: FrozenDict[str, SkillStat]
    skill_points: Pool
    feats: Pool
    spell_slots: FrozenDict[str, FrozenDict[int, int]] = Field(
        default_factory=dict,
        description="Class id -> spell level -> slots per day",
    )
    speed: int
    initiative: int
    carrying_capacity: CarryingCapacity
    experience: ExperienceProgress
    features: FrozenDict[str, tuple[str, ...]] = Field(
        default_factory=dict,
        description="Class id -> features gained so far",
    )
