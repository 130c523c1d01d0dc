"""Tests for saving throws."""

import pytest

from charforge.engine.abilities import compute_abilities
from charforge.engine.saves import base_save_for, compute_saves
from charforge.models import AbilityScores
from charforge.rules.types import BonusType, Modifier, SaveKind, SaveProgression, TargetKind

from tests.factories import create_class_info


class TestBaseSave:
    """Tests for save progressions."""

    @pytest.mark.parametrize(
        "progression,level,expected",
        [
            (SaveProgression.GOOD, 1, 2),
            (SaveProgression.GOOD, 4, 4),
            (SaveProgression.GOOD, 20, 12),
            (SaveProgression.POOR, 2, 0),
            (SaveProgression.POOR, 3, 1),
            (SaveProgression.POOR, 20, 6),
        ],
    )
    def test_progressions(self, progression, level, expected):
        """Good = 2 + level/2, poor = level/3."""
        assert base_save_for(progression, level) == expected


class TestComputeSaves:
    """Tests for compute_saves."""

    def _abilities(self, **scores):
        abilities, _ = compute_abilities(AbilityScores(**scores), [])
        return abilities

    def test_fighter_one(self):
        """Fighter 1: good fortitude, poor reflex and will."""
        saves = compute_saves([create_class_info()], self._abilities(constitution=14), [])
        assert saves[SaveKind.FORTITUDE].total == 4
        assert saves[SaveKind.REFLEX].total == 0
        assert saves[SaveKind.WILL].total == 0

    def test_ability_per_save(self):
        """Fort uses Con, Ref uses Dex, Will uses Wis."""
        saves = compute_saves(
            [create_class_info()],
            self._abilities(constitution=12, dexterity=16, wisdom=8),
            [],
        )
        assert saves[SaveKind.FORTITUDE].ability == 1
        assert saves[SaveKind.REFLEX].ability == 3
        assert saves[SaveKind.WILL].ability == -1

    def test_multiclass_sums_bases(self):
        """Base saves add across classes."""
        classes = [create_class_info(level=2), create_class_info("barbarian", level=2)]
        saves = compute_saves(classes, self._abilities(), [])
        assert saves[SaveKind.FORTITUDE].base == 6

    def test_resistance_and_racial_misc(self):
        """Misc modifiers keyed 'all' or by save kind stack by type."""
        modifiers = [
            Modifier(TargetKind.SAVE, "all", 1, BonusType.RESISTANCE, "item:cloak_1"),
            Modifier(TargetKind.SAVE, "fortitude", 2, BonusType.RESISTANCE, "item:other"),
            Modifier(TargetKind.SAVE, "all", 1, BonusType.RACIAL, "race:halfling"),
            Modifier(TargetKind.SAVE, "fortitude", 2, BonusType.UNTYPED, "feat:great_fortitude"),
        ]
        saves = compute_saves([create_class_info()], self._abilities(), modifiers)
        assert saves[SaveKind.FORTITUDE].misc == 5
        assert saves[SaveKind.REFLEX].misc == 2
        assert saves[SaveKind.WILL].total == 2
