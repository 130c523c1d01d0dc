"""Rule tables and modifier resolution.

Usage:
    >>> from charforge.rules import load_default_tables, resolve_modifiers
    >>> tables = load_default_tables()
    >>> resolution = resolve_modifiers(character, tables)
"""

# Types
from charforge.rules.types import (
    ALL_SAVES,
    SAVE_ABILITIES,
    Ability,
    BonusType,
    Modifier,
    Progression,
    SaveKind,
    SaveProgression,
    Size,
    TargetKind,
)

# Schemas
from charforge.rules.schemas import (
    ArmorItem,
    ClassDefinition,
    FeatDefinition,
    ItemDefinition,
    ModifierTemplate,
    RaceDefinition,
    RuleTables,
    ShieldItem,
    SkillDefinition,
    SpellcastingDefinition,
    SynergyDefinition,
    WeaponItem,
    WondrousItem,
)

# Loading
from charforge.rules.loader import load_default_tables, load_rule_tables

# Resolution
from charforge.rules.resolver import ClassLevelInfo, Resolution, resolve_modifiers

__all__ = [
    # Types
    "ALL_SAVES",
    "SAVE_ABILITIES",
    "Ability",
    "BonusType",
    "Modifier",
    "Progression",
    "SaveKind",
    "SaveProgression",
    "Size",
    "TargetKind",
    # Schemas
    "ArmorItem",
    "ClassDefinition",
    "FeatDefinition",
    "ItemDefinition",
    "ModifierTemplate",
    "RaceDefinition",
    "RuleTables",
    "ShieldItem",
    "SkillDefinition",
    "SpellcastingDefinition",
    "SynergyDefinition",
    "WeaponItem",
    "WondrousItem",
    # Loading
    "load_default_tables",
    "load_rule_tables",
    # Resolution
    "ClassLevelInfo",
    "Resolution",
    "resolve_modifiers",
]
