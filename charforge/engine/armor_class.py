"""Armor class computation."""

from charforge.engine.stacking import modifiers_for, stack_modifiers, totals_by_type
from charforge.models import ArmorClass
from charforge.rules.types import BonusType, Modifier, TargetKind

BASE_ARMOR_CLASS = 10

# Bonus types that do not apply against touch attacks
TOUCH_EXCLUDED = frozenset({BonusType.ARMOR, BonusType.SHIELD, BonusType.NATURAL_ARMOR})

# Bonus types lost when caught flat-footed
FLAT_FOOTED_EXCLUDED = frozenset({BonusType.DODGE})


def effective_dex_bonus(dex_modifier: int, max_dex_bonus: int | None) -> int:
    """Dexterity modifier to AC after armor caps.

    Caps only limit a positive modifier; penalties always apply.
    """
    if max_dex_bonus is None:
        return dex_modifier
    return min(dex_modifier, max_dex_bonus)


def compute_armor_class(
    dex_modifier: int,
    max_dex_bonus: int | None,
    modifiers: list[Modifier],
) -> ArmorClass:
    """Calculate total, touch and flat-footed armor class.

    Args:
        dex_modifier: Final dexterity modifier.
        max_dex_bonus: Tightest cap from worn armor and shields (None = no cap).
        modifiers: All resolved modifiers.

    Returns:
        ArmorClass with components itemized by bonus type.
    """
    ac_modifiers = modifiers_for(modifiers, TargetKind.ARMOR_CLASS)
    dex = effective_dex_bonus(dex_modifier, max_dex_bonus)

    total = BASE_ARMOR_CLASS + dex + stack_modifiers(ac_modifiers)
    touch = BASE_ARMOR_CLASS + dex + stack_modifiers(
        m for m in ac_modifiers if m.bonus_type not in TOUCH_EXCLUDED
    )
    flat_footed = BASE_ARMOR_CLASS + min(dex, 0) + stack_modifiers(
        m for m in ac_modifiers if m.bonus_type not in FLAT_FOOTED_EXCLUDED
    )

    components = {"base": BASE_ARMOR_CLASS, "dexterity": dex}
    for bonus_type, value in totals_by_type(ac_modifiers).items():
        components[bonus_type.value] = value

    return ArmorClass(
        total=total,
        touch=touch,
        flat_footed=flat_footed,
        effective_dex=dex,
        components=components,
    )
