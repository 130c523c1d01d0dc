"""Stat aggregation engine.

Usage:
    >>> from charforge.engine import compute_stats
    >>> outcome = compute_stats(character)
    >>> outcome.stats.armor_class.total
"""

# Aggregation
from charforge.engine.calculator import StatCalculator, StatsOutcome, compute_stats

# Stacking
from charforge.engine.stacking import select_stacking, stack_modifiers

# Component rules
from charforge.engine.abilities import ability_modifier
from charforge.engine.attack import attack_sequence, base_attack_bonus
from charforge.engine.hit_points import roll_hit_points
from charforge.engine.progression import (
    carrying_capacity,
    level_for_experience,
    multiclass_xp_penalty,
)
from charforge.engine.skills import skill_rank_cap
from charforge.engine.spells import bonus_spell_slots

# Changes
from charforge.engine.allocation import add_feat, allocate_skill_ranks

__all__ = [
    # Aggregation
    "StatCalculator",
    "StatsOutcome",
    "compute_stats",
    # Stacking
    "select_stacking",
    "stack_modifiers",
    # Component rules
    "ability_modifier",
    "attack_sequence",
    "base_attack_bonus",
    "roll_hit_points",
    "carrying_capacity",
    "level_for_experience",
    "multiclass_xp_penalty",
    "skill_rank_cap",
    "bonus_spell_slots",
    # Changes
    "add_feat",
    "allocate_skill_ranks",
]
