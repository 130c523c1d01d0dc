"""Tests for dice notation parser."""

import pytest

from charforge.dice.parser import parse, parse_dice
from charforge.dice.types import DiceExpression, DiceTerm, FlatTerm, Selector, SelectorKind
from charforge.errors import DiceParseError, MalformedExpression


class TestParseBasic:
    """Tests for basic dice notation parsing."""

    def test_parse_1d20(self):
        """Test parsing standard d20."""
        assert parse("1d20") == DiceExpression(terms=(DiceTerm(1, 1, 20),))

    def test_parse_d20_implicit_one(self):
        """Test parsing d20 implies 1d20."""
        assert parse("d20") == parse("1d20")

    def test_parse_flat_number(self):
        """A bare integer is a flat term."""
        assert parse("7") == DiceExpression(terms=(FlatTerm(1, 7),))

    def test_parse_uppercase(self):
        """Input is case-insensitive."""
        assert parse("4D6DL1") == parse("4d6dl1")

    def test_parse_whitespace_around_operators(self):
        """Whitespace around operators is ignored."""
        assert parse(" 2d6 + 1d4 - 1 ") == parse("2d6+1d4-1")


class TestParseCompound:
    """Tests for multi-term formulas."""

    def test_parse_dice_plus_modifier(self):
        """Test 1d20+5."""
        expr = parse("1d20+5")
        assert expr.terms == (DiceTerm(1, 1, 20), FlatTerm(1, 5))

    def test_parse_mixed_dice_and_negative_flat(self):
        """Test 1d8+1d6-2 keeps each term's sign."""
        expr = parse("1d8+1d6-2")
        assert expr.terms == (DiceTerm(1, 1, 8), DiceTerm(1, 1, 6), FlatTerm(-1, 2))
        assert expr.flat_total == -2

    def test_parse_leading_negative(self):
        """A leading minus applies to the first term."""
        expr = parse("-1d4+3")
        assert expr.terms[0] == DiceTerm(-1, 1, 4)

    def test_parse_leading_plus(self):
        """A leading plus is accepted."""
        assert parse("+1d4") == parse("1d4")


class TestParseSelectors:
    """Tests for drop/keep selectors."""

    @pytest.mark.parametrize(
        "formula,kind",
        [
            ("4d6dl1", SelectorKind.DROP_LOWEST),
            ("4d6dh1", SelectorKind.DROP_HIGHEST),
            ("2d20kh1", SelectorKind.KEEP_HIGHEST),
            ("2d20kl1", SelectorKind.KEEP_LOWEST),
        ],
    )
    def test_selector_kinds(self, formula, kind):
        """Each selector kind should parse."""
        term = parse(formula).terms[0]
        assert term.selector == Selector(kind, 1)

    def test_selector_with_modifier(self):
        """Test 2d20kh1+5."""
        expr = parse("2d20kh1+5")
        assert expr.terms[0].kept_count == 1
        assert expr.flat_total == 5


class TestParseCanonicalText:
    """Tests for str(expression) producing canonical formulas."""

    @pytest.mark.parametrize(
        "formula,canonical",
        [
            ("d20", "1d20"),
            ("4D6 DL1 ", "4d6dl1"),
            ("4d6dl1 + 2", "4d6dl1+2"),
            ("-1d4+3", "-1d4+3"),
            ("1d8+1d6-2", "1d8+1d6-2"),
        ],
    )
    def test_canonical_text(self, formula, canonical):
        """str() of a parsed expression is its canonical formula."""
        assert str(parse(formula)) == canonical

    def test_canonical_text_parses_back(self):
        """The canonical formula parses into an equal expression."""
        expr = parse("2d20kh1 + 1d4 - 1")
        assert parse(str(expr)) == expr


class TestParseErrors:
    """Tests for malformed formulas returned as values."""

    def test_empty_formula(self):
        """Empty input is rejected."""
        result = parse("")
        assert isinstance(result, MalformedExpression)
        assert result.reason == "Dice formula cannot be empty"

    def test_whitespace_only(self):
        """Whitespace-only input is rejected as empty."""
        assert isinstance(parse("   "), MalformedExpression)

    def test_unexpected_character(self):
        """Letters outside the grammar name the offending character."""
        result = parse("1d20+x")
        assert isinstance(result, MalformedExpression)
        assert result.token == "x"
        assert "'x'" in result.reason

    def test_space_inside_term_ignored(self):
        """Whitespace inside a term is ignored."""
        assert parse("4d6 dl1") == parse("4d6dl1")
        assert parse("1 d 2 0 + 5") == parse("1d20+5")

    def test_explicit_zero_limit(self):
        """A zero limit is applied, not replaced by the default."""
        result = parse("1d6", max_dice_count=0)
        assert isinstance(result, MalformedExpression)
        assert "at most 0" in result.reason

    def test_double_operator(self):
        """Doubled operators are rejected."""
        result = parse("1d6+-2")
        assert isinstance(result, MalformedExpression)
        assert result.token == "-"

    def test_dangling_operator(self):
        """A trailing operator is rejected."""
        result = parse("1d6+")
        assert isinstance(result, MalformedExpression)
        assert result.reason == "Formula ends with an operator"

    def test_zero_dice(self):
        """Dice count must be at least 1."""
        result = parse("0d6")
        assert isinstance(result, MalformedExpression)
        assert result.token == "0d6"

    def test_one_sided_die(self):
        """Die size must be at least 2."""
        result = parse("1d1")
        assert isinstance(result, MalformedExpression)
        assert "at least 2" in result.reason

    def test_too_many_dice(self):
        """Dice count is capped at the configured limit."""
        assert isinstance(parse("101d6"), MalformedExpression)
        assert not isinstance(parse("100d6"), MalformedExpression)

    def test_die_too_large(self):
        """Die size is capped at the configured limit."""
        assert isinstance(parse("1d1001"), MalformedExpression)

    def test_explicit_limits_override_settings(self):
        """Callers can tighten the limits per call."""
        assert isinstance(parse("5d6", max_dice_count=4), MalformedExpression)

    def test_selector_drops_every_die(self):
        """A selector must leave at least one die."""
        result = parse("4d6dl4")
        assert isinstance(result, MalformedExpression)
        assert result.token == "4d6dl4"

    def test_selector_amount_zero(self):
        """Selector amount must be at least 1."""
        assert isinstance(parse("4d6dl0"), MalformedExpression)

    def test_selector_on_single_die(self):
        """A single die cannot drop or keep anything."""
        assert isinstance(parse("1d20kh1"), MalformedExpression)

    @pytest.mark.parametrize("formula", ["d", "2d", "dd6", "4d6dl", "4d6x1", "1d6k1"])
    def test_malformed_terms(self, formula):
        """Malformed terms are rejected."""
        assert isinstance(parse(formula), MalformedExpression)


class TestParseDice:
    """Tests for the raising parse wrapper."""

    def test_returns_expression(self):
        """Valid input returns the expression."""
        assert parse_dice("2d6+3") == parse("2d6+3")

    def test_raises_with_error_value(self):
        """Invalid input raises DiceParseError carrying the value."""
        with pytest.raises(DiceParseError) as exc_info:
            parse_dice("1d6+")
        assert exc_info.value.error.reason == "Formula ends with an operator"

    def test_is_value_error(self):
        """DiceParseError is a ValueError."""
        with pytest.raises(ValueError):
            parse_dice("abc")
