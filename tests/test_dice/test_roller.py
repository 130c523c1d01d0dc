"""Tests for dice roller."""

import random
from unittest.mock import patch

import pytest

from charforge.dice.parser import parse_dice
from charforge.dice.roller import (
    default_source,
    evaluate,
    roll,
    roll_advantage,
    roll_batch,
    roll_disadvantage,
    roll_exploding,
)
from charforge.dice.types import AdvantageResult, AdvantageType, RollResult
from charforge.errors import (
    DiceParseError,
    MalformedExpression,
    RandomSourceError,
    RuleViolation,
    ViolationCode,
)


class TestEvaluate:
    """Tests for evaluate function."""

    def test_returns_roll_result(self, fixed_rng):
        """Test that evaluate returns a RollResult."""
        result = evaluate(parse_dice("1d20"), fixed_rng([12]))
        assert isinstance(result, RollResult)
        assert result.total == 12

    def test_drop_lowest(self, fixed_rng):
        """4d6dl1 with 6, 5, 4, 1 keeps 6, 5, 4 for 15."""
        result = evaluate(parse_dice("4d6dl1"), fixed_rng([6, 5, 4, 1]))
        term = result.terms[0]
        assert term.raw_rolls == (6, 5, 4, 1)
        assert term.kept_rolls == (6, 5, 4)
        assert term.discarded_rolls == (1,)
        assert result.total == 15

    def test_raw_rolls_keep_draw_order(self, fixed_rng):
        """Raw rolls stay in draw order; kept rolls are sorted descending."""
        result = evaluate(parse_dice("4d6dl1"), fixed_rng([2, 6, 1, 4]))
        assert result.terms[0].raw_rolls == (2, 6, 1, 4)
        assert result.terms[0].kept_rolls == (6, 4, 2)

    def test_keep_highest(self, fixed_rng):
        """2d20kh1 keeps the higher die."""
        result = evaluate(parse_dice("2d20kh1+5"), fixed_rng([7, 18]))
        assert result.terms[0].kept_rolls == (18,)
        assert result.total == 23

    def test_keep_lowest(self, fixed_rng):
        """2d20kl1 keeps the lower die."""
        result = evaluate(parse_dice("2d20kl1"), fixed_rng([7, 18]))
        assert result.total == 7

    def test_drop_highest(self, fixed_rng):
        """3d6dh1 drops the highest die."""
        result = evaluate(parse_dice("3d6dh1"), fixed_rng([6, 3, 2]))
        assert result.total == 5

    def test_selected_dice_count(self, fixed_rng):
        """A selector always retains the expected number of dice."""
        result = evaluate(parse_dice("6d6kh3"), fixed_rng([1, 2, 3, 4, 5, 6]))
        assert len(result.terms[0].raw_rolls) == 6
        assert len(result.terms[0].kept_rolls) == 3

    def test_negative_terms(self, fixed_rng):
        """1d8+1d6-2 subtracts the flat term."""
        result = evaluate(parse_dice("1d8+1d6-2"), fixed_rng([5, 3]))
        assert [t.subtotal for t in result.terms] == [5, 3, -2]
        assert result.total == 6

    def test_negative_dice_term(self, fixed_rng):
        """A negative dice term subtracts its dice."""
        result = evaluate(parse_dice("-1d4+3"), fixed_rng([4]))
        assert result.total == -1

    def test_draws_within_die_range(self, fixed_rng):
        """Every draw asks for 1..sides."""
        rng = fixed_rng([3, 3])
        evaluate(parse_dice("2d8"), rng)
        assert rng.calls == [(1, 8), (1, 8)]

    def test_same_stream_same_result(self, fixed_rng):
        """Identical random streams give identical results."""
        expression = parse_dice("4d6dl1+1d4-1")
        first = evaluate(expression, fixed_rng([3, 6, 2, 5, 4]))
        second = evaluate(expression, fixed_rng([3, 6, 2, 5, 4]))
        assert first == second

    def test_seeded_random_reproducible(self):
        """Seeded random.Random sources reproduce results."""
        expression = parse_dice("10d6")
        assert evaluate(expression, random.Random(42)) == evaluate(expression, random.Random(42))

    def test_default_source_values_in_range(self):
        """Without an injected source, rolls are still in range."""
        result = evaluate(parse_dice("10d6"))
        assert all(1 <= value <= 6 for value in result.raw_rolls)

    def test_default_source_is_system_random(self):
        """The default source is cryptographically strong."""
        assert isinstance(default_source(), random.SystemRandom)


class TestRandomSourceFailures:
    """Tests for misbehaving random sources."""

    def test_exhausted_source(self, fixed_rng):
        """An exhausted source is fatal."""
        with pytest.raises(RandomSourceError):
            evaluate(parse_dice("2d6"), fixed_rng([3]))

    def test_out_of_range_value(self, fixed_rng):
        """A value outside the die range is fatal."""
        with pytest.raises(RandomSourceError):
            evaluate(parse_dice("1d6"), fixed_rng([7]))

    def test_non_integer_value(self, fixed_rng):
        """A non-integer value is fatal."""
        with pytest.raises(RandomSourceError):
            evaluate(parse_dice("1d6"), fixed_rng([2.5]))


class TestRoll:
    """Tests for roll convenience function."""

    def test_roll_parses_and_evaluates(self, fixed_rng):
        """Test roll with notation string."""
        result = roll("2d6+3", fixed_rng([4, 2]))
        assert result.total == 9

    def test_roll_invalid_notation_raises(self):
        """Invalid notation raises DiceParseError."""
        with pytest.raises(DiceParseError):
            roll("2x6")

    @patch("charforge.dice.roller.default_source")
    def test_roll_uses_default_source(self, mock_source, fixed_rng):
        """Test roll falls back to the default source."""
        mock_source.return_value = fixed_rng([17])
        assert roll("1d20").total == 17


class TestRollBatch:
    """Tests for rolling several formulas at once."""

    def test_results_in_order(self, fixed_rng):
        """Each formula gets its own result, in input order."""
        rng = fixed_rng([12, 3, 4])
        results = roll_batch(["1d20+5", "2d6"], rng)

        assert [r.total for r in results] == [17, 7]
        assert str(results[1].expression) == "2d6"
        assert rng.values == []

    def test_malformed_formula_in_batch(self, fixed_rng):
        """A bad formula yields its parse failure and draws no dice."""
        rng = fixed_rng([6, 20])
        results = roll_batch(["1d6", "2x6", "1d20"], rng)

        assert isinstance(results[1], MalformedExpression)
        assert results[1].token == "x"
        assert results[0].total == 6
        assert results[2].total == 20

    def test_empty_batch(self):
        """No formulas, no results."""
        assert roll_batch([]) == []


class TestAdvantage:
    """Tests for advantage and disadvantage."""

    def test_advantage_keeps_higher(self, fixed_rng):
        """Advantage keeps the higher of two d20s."""
        result = roll_advantage(parse_dice("1d20"), fixed_rng([8, 15]))
        assert isinstance(result, AdvantageResult)
        assert result.advantage_type == AdvantageType.ADVANTAGE
        assert result.total == 15
        assert result.discarded.total == 8

    def test_disadvantage_keeps_lower(self, fixed_rng):
        """Disadvantage keeps the lower of two d20s."""
        result = roll_disadvantage(parse_dice("1d20"), fixed_rng([8, 15]))
        assert result.total == 8
        assert result.kept.raw_rolls == (8,)

    def test_tie_keeps_first_roll(self, fixed_rng):
        """On a tie the first roll is kept."""
        result = roll_advantage(parse_dice("1d20"), fixed_rng([11, 11]))
        assert result.rolls[0].total == 11

    @pytest.mark.parametrize("formula", ["2d20", "1d20+5", "1d12", "-1d20", "3d20kh1"])
    def test_rejects_other_expressions(self, formula):
        """Only a single plain 1d20 is supported."""
        result = roll_advantage(parse_dice(formula))
        assert isinstance(result, RuleViolation)
        assert result.code == ViolationCode.UNSUPPORTED_FOR_ADVANTAGE

    def test_rejection_does_not_draw(self, fixed_rng):
        """A rejected expression never touches the random source."""
        rng = fixed_rng([])
        roll_disadvantage(parse_dice("1d20+1"), rng)
        assert rng.calls == []


class TestRollExploding:
    """Tests for exploding dice."""

    def test_no_explosion(self, fixed_rng):
        """Dice below the maximum do not explode."""
        result = roll_exploding(2, 6, fixed_rng([3, 4]))
        assert result.raw_rolls == (3, 4)
        assert result.total == 7

    def test_maximum_explodes(self, fixed_rng):
        """A maximum roll is re-rolled and added."""
        result = roll_exploding(1, 6, fixed_rng([6, 6, 2]))
        assert result.raw_rolls == (6, 6, 2)
        assert result.total == 14

    def test_explosions_capped(self, fixed_rng):
        """Explosions stop at the cap."""
        result = roll_exploding(1, 6, fixed_rng([6, 6, 6]), max_explosions=2)
        assert result.raw_rolls == (6, 6, 6)
        assert result.total == 18

    def test_invalid_arguments(self):
        """Count and sides are validated."""
        with pytest.raises(ValueError):
            roll_exploding(0, 6)
        with pytest.raises(ValueError):
            roll_exploding(1, 1)
