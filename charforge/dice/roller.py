"""Core dice rolling engine.

Evaluates parsed dice expressions against an injected random source,
with support for drop/keep selectors, advantage/disadvantage and
exploding dice.

The default source is ``random.SystemRandom`` (backed by the operating
system's cryptographic generator), created per call. Tests and replays
inject their own source; any object with ``randint(a, b)`` works.
"""

import logging
import random
from collections.abc import Iterable
from typing import Protocol

from charforge.config import get_settings
from charforge.dice.parser import parse, parse_dice
from charforge.dice.types import (
    AdvantageResult,
    AdvantageType,
    DiceExpression,
    DiceTerm,
    RollResult,
    TermResult,
)
from charforge.errors import (
    MalformedExpression,
    RandomSourceError,
    RuleViolation,
    ViolationCode,
)

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    """Anything that can draw a uniform integer in ``[a, b]``."""

    def randint(self, a: int, b: int) -> int: ...


def default_source() -> RandomSource:
    """Create a cryptographically strong random source."""
    return random.SystemRandom()


def _draw(rng: RandomSource, sides: int) -> int:
    """Draw one die value, failing loudly if the source misbehaves."""
    try:
        value = rng.randint(1, sides)
    except Exception as e:
        raise RandomSourceError(f"Random source failed while rolling d{sides}: {e}") from e

    if not isinstance(value, int) or not 1 <= value <= sides:
        raise RandomSourceError(
            f"Random source returned {value!r}, outside the range 1-{sides}"
        )
    return value


def _evaluate_dice_term(term: DiceTerm, rng: RandomSource) -> TermResult:
    raw = tuple(_draw(rng, term.sides) for _ in range(term.count))
    kept = term.selector.apply(raw) if term.selector is not None else raw
    return TermResult(
        term=term,
        raw_rolls=raw,
        kept_rolls=kept,
        subtotal=term.sign * sum(kept),
    )


def evaluate(expression: DiceExpression, rng: RandomSource | None = None) -> RollResult:
    """Roll dice according to the expression.

    Each call is independent: the same random stream always produces the
    same result.

    Args:
        expression: The dice expression to roll.
        rng: Random source (defaults to a fresh SystemRandom).

    Returns:
        RollResult with every raw roll, the retained rolls and the total.

    Raises:
        RandomSourceError: If the random source fails or is exhausted.

    Examples:
        >>> result = evaluate(parse_dice("4d6dl1"))
        >>> len(result.terms[0].kept_rolls)
        3
    """
    if rng is None:
        rng = default_source()

    results: list[TermResult] = []
    for term in expression.terms:
        if isinstance(term, DiceTerm):
            results.append(_evaluate_dice_term(term, rng))
        else:
            results.append(
                TermResult(term=term, raw_rolls=(), kept_rolls=(), subtotal=term.signed_value)
            )

    return RollResult(
        expression=expression,
        terms=tuple(results),
        total=sum(r.subtotal for r in results),
    )


def roll(notation: str, rng: RandomSource | None = None) -> RollResult:
    """Parse dice notation and roll.

    Convenience function combining parse_dice and evaluate.

    Args:
        notation: Dice notation string (e.g., "2d6+3").
        rng: Random source (defaults to a fresh SystemRandom).

    Returns:
        RollResult with individual rolls and total.

    Raises:
        DiceParseError: If notation is invalid.
    """
    return evaluate(parse_dice(notation), rng)


def roll_batch(
    formulas: Iterable[str],
    rng: RandomSource | None = None,
) -> list[RollResult | MalformedExpression]:
    """Parse and roll several formulas against one random source.

    A malformed formula does not stop the batch: its slot holds the
    parse failure and no dice are drawn for it.

    Args:
        formulas: Dice formulas, rolled in order.
        rng: Random source shared by every roll (defaults to a fresh SystemRandom).

    Returns:
        One RollResult or MalformedExpression per formula, in input order.
    """
    if rng is None:
        rng = default_source()

    results: list[RollResult | MalformedExpression] = []
    for formula in formulas:
        expression = parse(formula)
        if isinstance(expression, MalformedExpression):
            results.append(expression)
        else:
            results.append(evaluate(expression, rng))
    return results


def _roll_twice(
    expression: DiceExpression,
    advantage_type: AdvantageType,
    rng: RandomSource | None,
) -> AdvantageResult | RuleViolation:
    if not expression.is_single_d20:
        return RuleViolation(
            code=ViolationCode.UNSUPPORTED_FOR_ADVANTAGE,
            message=(
                f"{advantage_type.value.title()} requires a single unmodified d20, "
                f"got '{expression}'"
            ),
            subject=str(expression),
        )

    if rng is None:
        rng = default_source()

    first = evaluate(expression, rng)
    second = evaluate(expression, rng)

    if advantage_type == AdvantageType.ADVANTAGE:
        kept, discarded = (first, second) if first.total >= second.total else (second, first)
    else:  # DISADVANTAGE
        kept, discarded = (first, second) if first.total <= second.total else (second, first)

    return AdvantageResult(advantage_type=advantage_type, kept=kept, discarded=discarded)


def roll_advantage(
    expression: DiceExpression,
    rng: RandomSource | None = None,
) -> AdvantageResult | RuleViolation:
    """Roll a d20 twice and keep the higher total.

    Args:
        expression: Must be a single unmodified ``1d20`` term.
        rng: Random source (defaults to a fresh SystemRandom).

    Returns:
        AdvantageResult, or an UNSUPPORTED_FOR_ADVANTAGE violation.
    """
    return _roll_twice(expression, AdvantageType.ADVANTAGE, rng)


def roll_disadvantage(
    expression: DiceExpression,
    rng: RandomSource | None = None,
) -> AdvantageResult | RuleViolation:
    """Roll a d20 twice and keep the lower total.

    Args:
        expression: Must be a single unmodified ``1d20`` term.
        rng: Random source (defaults to a fresh SystemRandom).

    Returns:
        AdvantageResult, or an UNSUPPORTED_FOR_ADVANTAGE violation.
    """
    return _roll_twice(expression, AdvantageType.DISADVANTAGE, rng)


def roll_exploding(
    count: int,
    sides: int,
    rng: RandomSource | None = None,
    max_explosions: int | None = None,
) -> RollResult:
    """Roll dice that re-roll and add whenever they show their maximum.

    Args:
        count: Number of dice to roll.
        sides: Size of each die (at least 2).
        rng: Random source (defaults to a fresh SystemRandom).
        max_explosions: Cap on extra dice across the whole roll (defaults to settings).

    Returns:
        RollResult whose single term holds every die drawn, explosions included.

    Raises:
        ValueError: If count or sides are out of range.
        RandomSourceError: If the random source fails or is exhausted.
    """
    if count < 1:
        raise ValueError(f"Number of dice must be at least 1, got {count}")
    if sides < 2:
        raise ValueError(f"Die size must be at least 2, got {sides}")
    if max_explosions is None:
        max_explosions = get_settings().max_explosions
    if rng is None:
        rng = default_source()

    rolls: list[int] = []
    explosions = 0
    for _ in range(count):
        value = _draw(rng, sides)
        rolls.append(value)
        while value == sides and explosions < max_explosions:
            value = _draw(rng, sides)
            rolls.append(value)
            explosions += 1

    if explosions:
        logger.debug(f"{count}d{sides} exploded {explosions} time(s)")

    term = DiceTerm(sign=1, count=count, sides=sides)
    raw = tuple(rolls)
    return RollResult(
        expression=DiceExpression(terms=(term,)),
        terms=(TermResult(term=term, raw_rolls=raw, kept_rolls=raw, subtotal=sum(raw)),),
        total=sum(raw),
    )
