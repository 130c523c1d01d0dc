"""Spell slots per day."""

from collections.abc import Sequence

from charforge.engine.stacking import modifiers_for, stack_modifiers
from charforge.models import AbilityStat
from charforge.rules.resolver import ClassLevelInfo
from charforge.rules.types import Ability, Modifier, TargetKind

MINIMUM_CASTING_SCORE = 10


def bonus_spell_slots(casting_modifier: int, spell_level: int, step: int = 4) -> int:
    """Bonus slots from a high casting ability.

    Cantrips (level 0) never get bonus slots.

    Examples:
        >>> bonus_spell_slots(3, 1)
        1
        >>> bonus_spell_slots(5, 1)
        2
        >>> bonus_spell_slots(1, 2)
        0
    """
    if spell_level < 1 or casting_modifier < spell_level:
        return 0
    return (casting_modifier - spell_level) // step + 1


def can_cast(casting_score: int, spell_level: int) -> bool:
    """Whether the casting ability is high enough for a spell level."""
    return casting_score >= MINIMUM_CASTING_SCORE + spell_level


def compute_spell_slots(
    class_levels: Sequence[ClassLevelInfo],
    abilities: dict[Ability, AbilityStat],
    modifiers: list[Modifier],
    step: int = 4,
) -> dict[str, dict[int, int]]:
    """Slots per day for every spellcasting class.

    A spell level absent from the class table grants nothing, not even
    bonus slots. Spell slot modifiers are keyed by spell level and apply
    to every casting class.

    Returns:
        Class id -> spell level -> slots.
    """
    slots: dict[str, dict[int, int]] = {}
    for info in class_levels:
        if info.spellcasting is None:
            continue
        casting = abilities[info.spellcasting.ability]
        per_level: dict[int, int] = {}
        for spell_level, base in sorted(info.spellcasting.base_slots(info.level).items()):
            if not can_cast(casting.score, spell_level):
                per_level[spell_level] = 0
                continue
            extra = stack_modifiers(
                modifiers_for(modifiers, TargetKind.SPELL_SLOT, str(spell_level))
            )
            per_level[spell_level] = max(
                0, base + bonus_spell_slots(casting.modifier, spell_level, step) + extra
            )
        slots[info.class_id] = per_level
    return slots
