"""Factory functions for creating test models with sensible defaults."""

from types import MappingProxyType
from typing import Any

from charforge.models import AbilityScores, Character, ClassLevel
from charforge.rules.resolver import ClassLevelInfo
from charforge.rules.schemas import SpellcastingDefinition
from charforge.rules.types import Progression, SaveKind, SaveProgression


class FixedRandomSource:
    """Random source that returns predetermined values in order.

    Raises IndexError once exhausted, like a replay log running out.
    """

    def __init__(self, values):
        self.values = list(values)
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        return self.values.pop(0)


def create_character(
    name: str = "Test Hero",
    race: str = "human",
    classes: list[tuple[str, int]] | None = None,
    abilities: dict[str, int] | None = None,
    **overrides: Any,
) -> Character:
    """Create a Character with sensible defaults.

    Args:
        name: Character name.
        race: Race id.
        classes: (class id, level) pairs; defaults to fighter 1.
        abilities: Base ability scores; unspecified abilities are 10.
        **overrides: Other Character fields.
    """
    if classes is None:
        classes = [("fighter", 1)]
    return Character(
        name=name,
        race=race,
        classes=tuple(ClassLevel(class_id=c, level=lvl) for c, lvl in classes),
        abilities=AbilityScores(**(abilities or {})),
        **overrides,
    )


def create_class_info(
    class_id: str = "fighter",
    level: int = 1,
    hit_die: int = 10,
    base_attack: Progression = Progression.GOOD,
    saves: dict[SaveKind, SaveProgression] | None = None,
    skill_points: int = 2,
    class_skills: frozenset[str] = frozenset(),
    spellcasting: SpellcastingDefinition | None = None,
) -> ClassLevelInfo:
    """Create ClassLevelInfo without going through rule tables."""
    if saves is None:
        saves = {
            SaveKind.FORTITUDE: SaveProgression.GOOD,
            SaveKind.REFLEX: SaveProgression.POOR,
            SaveKind.WILL: SaveProgression.POOR,
        }
    return ClassLevelInfo(
        class_id=class_id,
        level=level,
        hit_die=hit_die,
        base_attack=base_attack,
        saves=MappingProxyType(saves),
        skill_points=skill_points,
        class_skills=class_skills,
        spellcasting=spellcasting,
    )
