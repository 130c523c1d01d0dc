"""Tests for skills."""

import pytest

from charforge.engine.abilities import compute_abilities
from charforge.engine.skills import compute_skills, skill_rank_cap, synergy_bonus
from charforge.errors import ViolationCode
from charforge.models import AbilityScores
from charforge.rules.types import BonusType, Modifier, TargetKind

ROGUE_SKILLS = frozenset({"hide", "tumble", "balance", "jump", "bluff", "diplomacy"})


def _abilities(**scores):
    abilities, _ = compute_abilities(AbilityScores(**scores), [])
    return abilities


class TestRankCap:
    """Tests for skill_rank_cap."""

    @pytest.mark.parametrize(
        "level,class_skill,cap",
        [(1, True, 4), (1, False, 2), (4, True, 7), (4, False, 3), (20, True, 23), (20, False, 11)],
    )
    def test_caps(self, level, class_skill, cap):
        """Class skills cap at level + 3, cross-class at half that."""
        assert skill_rank_cap(level, class_skill) == cap


class TestSynergy:
    """Tests for synergy bonuses."""

    def test_five_ranks_grant_synergy(self, srd):
        """Five ranks in tumble give +2 to balance and jump."""
        assert synergy_bonus(srd, "balance", {"tumble": 5}) == 2
        assert synergy_bonus(srd, "jump", {"tumble": 5}) == 2

    def test_four_ranks_do_not(self, srd):
        """Four ranks are not enough."""
        assert synergy_bonus(srd, "balance", {"tumble": 4}) == 0

    def test_multiple_sources_add(self, srd):
        """Each qualifying source adds +2."""
        ranks = {"bluff": 5, "sense_motive": 5, "knowledge_nobility": 5}
        assert synergy_bonus(srd, "diplomacy", ranks) == 6


class TestComputeSkills:
    """Tests for compute_skills."""

    def test_total_breakdown(self, srd):
        """Total is ranks + ability + misc + synergy + penalty."""
        modifiers = [Modifier(TargetKind.SKILL, "hide", 5, BonusType.COMPETENCE)]
        skills, violations = compute_skills(
            srd, {"hide": 4}, ROGUE_SKILLS, 1, _abilities(dexterity=14), -1, modifiers
        )
        hide = skills["hide"]
        assert violations == []
        assert (hide.ranks, hide.ability_modifier, hide.misc, hide.armor_check_penalty) == (4, 2, 5, -1)
        assert hide.total == 10
        assert hide.class_skill
        assert hide.max_ranks == 4

    def test_armor_penalty_only_on_flagged_skills(self, srd):
        """Listen is not affected by armor."""
        skills, _ = compute_skills(srd, {}, ROGUE_SKILLS, 1, _abilities(), -6, [])
        assert skills["listen"].armor_check_penalty == 0
        assert skills["climb"].armor_check_penalty == -6

    def test_every_skill_listed(self, srd):
        """All skills in the tables are computed."""
        skills, _ = compute_skills(srd, {}, ROGUE_SKILLS, 1, _abilities(), 0, [])
        assert set(skills) == set(srd.skills)

    def test_trained_only_unusable_without_ranks(self, srd):
        """Trained-only skills need at least one rank."""
        skills, _ = compute_skills(srd, {"tumble": 1}, ROGUE_SKILLS, 1, _abilities(), 0, [])
        assert skills["tumble"].usable
        assert not skills["open_lock"].usable
        assert skills["climb"].usable

    def test_class_skill_over_cap(self, srd):
        """Ranks above level + 3 are rejected."""
        _, violations = compute_skills(srd, {"hide": 5}, ROGUE_SKILLS, 1, _abilities(), 0, [])
        assert [v.code for v in violations] == [ViolationCode.SKILL_RANK_OVER_CAP]
        assert violations[0].subject == "hide"

    def test_cross_class_over_cap(self, srd):
        """Cross-class skills cap at half."""
        _, violations = compute_skills(srd, {"spellcraft": 3}, ROGUE_SKILLS, 1, _abilities(), 0, [])
        assert violations[0].code == ViolationCode.SKILL_RANK_OVER_CAP

    def test_ranks_at_cap_allowed(self, srd):
        """Ranks exactly at the cap are fine."""
        _, violations = compute_skills(srd, {"hide": 4, "spellcraft": 2}, ROGUE_SKILLS, 1, _abilities(), 0, [])
        assert violations == []

    def test_unknown_skill(self, srd):
        """Ranks in unknown skills are rejected."""
        _, violations = compute_skills(srd, {"basket_weaving": 1}, ROGUE_SKILLS, 1, _abilities(), 0, [])
        assert violations[0].code == ViolationCode.UNKNOWN_SKILL

    def test_negative_ranks(self, srd):
        """Negative ranks are rejected."""
        _, violations = compute_skills(srd, {"hide": -1}, ROGUE_SKILLS, 1, _abilities(), 0, [])
        assert violations[0].code == ViolationCode.NEGATIVE_RANKS
