"""Dice notation parser.

Parses dice formulas like 1d20, 2d6+3, d100, 4d6dl1, 2d20kh1+1d4-2.

Grammar::

    formula  := term (("+" | "-") term)*
    term     := ["+" | "-"] (integer | diceTerm)
    diceTerm := [integer] "d" integer [selector]
    selector := ("d" | "k") ("h" | "l") integer

Input is case-insensitive and whitespace is ignored.
"""

import logging
import re

from charforge.config import get_settings
from charforge.dice.types import (
    DiceExpression,
    DiceTerm,
    FlatTerm,
    Selector,
    SelectorKind,
    Term,
)
from charforge.errors import DiceParseError, MalformedExpression

logger = logging.getLogger(__name__)


# Examples: 20, 4d6, d100, 4d6dl1, 2d20kh1
DICE_TERM_PATTERN = re.compile(r"^(\d*)d(\d+)(?:([dk])([hl])(\d+))?$")
FLAT_TERM_PATTERN = re.compile(r"^\d+$")

# Operators and operand runs
TOKEN_PATTERN = re.compile(r"[+-]|[^+-]+")

ALLOWED_CHARACTERS = frozenset("0123456789dkhl+-")


def _malformed(formula: str, token: str, reason: str) -> MalformedExpression:
    logger.debug(f"Rejected dice formula {formula!r}: {reason}")
    return MalformedExpression(formula=formula, token=token, reason=reason)


def _parse_term(
    formula: str,
    token: str,
    sign: int,
    max_dice_count: int,
    max_die_sides: int,
) -> Term | MalformedExpression:
    """Parse one operand token into a term."""
    if FLAT_TERM_PATTERN.match(token):
        return FlatTerm(sign=sign, value=int(token))

    match = DICE_TERM_PATTERN.match(token)
    if not match:
        return _malformed(formula, token, f"Malformed term '{token}'")

    count_str, sides_str, drop_keep, high_low, amount_str = match.groups()

    # Default to 1 die if not specified (e.g., "d20" means "1d20")
    count = int(count_str) if count_str else 1
    sides = int(sides_str)

    if count < 1:
        return _malformed(
            formula, token, f"Number of dice must be at least 1 in '{token}', got {count}"
        )
    if count > max_dice_count:
        return _malformed(
            formula,
            token,
            f"Number of dice must be at most {max_dice_count} in '{token}', got {count}",
        )
    if sides < 2:
        return _malformed(
            formula, token, f"Die size must be at least 2 in '{token}', got {sides}"
        )
    if sides > max_die_sides:
        return _malformed(
            formula,
            token,
            f"Die size must be at most {max_die_sides} in '{token}', got {sides}",
        )

    selector = None
    if drop_keep:
        amount = int(amount_str)
        if amount < 1:
            return _malformed(
                formula, token, f"Selector amount must be at least 1 in '{token}'"
            )
        if amount >= count:
            return _malformed(
                formula,
                token,
                f"Cannot drop/keep {amount} of {count} dice in '{token}'",
            )
        selector = Selector(kind=SelectorKind(drop_keep + high_low), amount=amount)

    return DiceTerm(sign=sign, count=count, sides=sides, selector=selector)


def parse(
    formula: str,
    max_dice_count: int | None = None,
    max_die_sides: int | None = None,
) -> DiceExpression | MalformedExpression:
    """Parse a dice formula into a DiceExpression.

    Parse failures are returned, not raised, so callers can show
    formula-editing feedback directly.

    Args:
        formula: Dice formula (e.g., "4d6dl1", "1d20+5", "2d6 + 1d4 - 1").
        max_dice_count: Upper limit on dice per term (defaults to settings).
        max_die_sides: Upper limit on die size (defaults to settings).

    Returns:
        The parsed expression, or a MalformedExpression naming the offending token.

    Examples:
        >>> str(parse("4d6DL1"))
        '4d6dl1'
        >>> parse("").reason
        'Dice formula cannot be empty'
    """
    if max_dice_count is None:
        max_dice_count = get_settings().max_dice_count
    if max_die_sides is None:
        max_die_sides = get_settings().max_die_sides

    if formula is None or not formula.strip():
        return _malformed(formula or "", "", "Dice formula cannot be empty")

    normalized = re.sub(r"\s+", "", formula.lower())

    for char in normalized:
        if char not in ALLOWED_CHARACTERS:
            return _malformed(formula, char, f"Unexpected character '{char}'")

    terms: list[Term] = []
    sign: int | None = None
    expecting_term = True

    for token in TOKEN_PATTERN.findall(normalized):
        if token in ("+", "-"):
            if sign is not None:
                return _malformed(formula, token, f"Unexpected operator '{token}'")
            expecting_term = True
            sign = -1 if token == "-" else 1
            continue

        term = _parse_term(
            formula,
            token,
            sign if sign is not None else 1,
            max_dice_count,
            max_die_sides,
        )
        if isinstance(term, MalformedExpression):
            return term
        terms.append(term)
        sign = None
        expecting_term = False

    if expecting_term:
        return _malformed(formula, normalized[-1], "Formula ends with an operator")

    return DiceExpression(terms=tuple(terms))


def parse_dice(formula: str) -> DiceExpression:
    """Parse a dice formula, raising on failure.

    Args:
        formula: Dice formula string.

    Returns:
        DiceExpression with parsed terms.

    Raises:
        DiceParseError: If the formula is invalid.
    """
    result = parse(formula)
    if isinstance(result, MalformedExpression):
        raise DiceParseError(result)
    return result
