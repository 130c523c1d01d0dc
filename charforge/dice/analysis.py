"""Statistical sampling of dice expressions."""

import statistics
from dataclasses import dataclass

from charforge.config import get_settings
from charforge.dice.roller import RandomSource, default_source, evaluate
from charforge.dice.types import DiceExpression, DiceTerm


@dataclass(frozen=True)
class RollAnalysis:
    """Summary of repeated evaluations of one expression."""

    formula: str
    iterations: int
    mean: float
    median: float
    minimum: int
    maximum: int


def analyze(
    expression: DiceExpression,
    iterations: int | None = None,
    rng: RandomSource | None = None,
) -> RollAnalysis:
    """Roll an expression repeatedly and summarize the totals.

    Args:
        expression: Expression to sample.
        iterations: Number of evaluations (defaults to settings).
        rng: Random source shared by every evaluation.

    Returns:
        RollAnalysis with mean rounded to two decimals.

    Raises:
        ValueError: If iterations is less than 1.
    """
    if iterations is None:
        iterations = get_settings().analysis_iterations
    if iterations < 1:
        raise ValueError(f"Iterations must be at least 1, got {iterations}")
    if rng is None:
        rng = default_source()

    totals = [evaluate(expression, rng).total for _ in range(iterations)]

    return RollAnalysis(
        formula=str(expression),
        iterations=iterations,
        mean=round(statistics.fmean(totals), 2),
        median=statistics.median(totals),
        minimum=min(totals),
        maximum=max(totals),
    )


def total_range(expression: DiceExpression) -> tuple[int, int]:
    """Smallest and largest possible totals of an expression.

    Examples:
        >>> from charforge.dice.parser import parse_dice
        >>> total_range(parse_dice("4d6dl1+2"))
        (5, 20)
    """
    low = high = expression.flat_total
    for term in expression.terms:
        if not isinstance(term, DiceTerm):
            continue
        kept = term.kept_count
        if term.sign > 0:
            low += kept
            high += kept * term.sides
        else:
            low -= kept * term.sides
            high -= kept
    return low, high
