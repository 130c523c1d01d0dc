"""Dice commands."""

import typer

from charforge.cli.display import (
    display_ability_rolls,
    display_advantage,
    display_error,
    display_info,
    display_roll,
)
from charforge.dice.history import DiceRoller
from charforge.dice.parser import parse
from charforge.dice.roller import default_source, roll_advantage, roll_disadvantage
from charforge.errors import MalformedExpression, RuleViolation
from charforge.generation import RollMethod, roll_ability_scores


def roll(
    formula: str = typer.Argument(..., help="Dice formula, e.g. 4d6dl1 or 1d20+5"),
    times: int = typer.Option(1, "--times", "-n", min=1, help="Number of rolls"),
    advantage: bool = typer.Option(False, "--advantage", "-a", help="Roll 1d20 twice, keep higher"),
    disadvantage: bool = typer.Option(False, "--disadvantage", "-d", help="Roll 1d20 twice, keep lower"),
) -> None:
    """Roll a dice formula."""
    if advantage and disadvantage:
        display_error("Choose either --advantage or --disadvantage, not both")
        raise typer.Exit(1)

    expression = parse(formula)
    if isinstance(expression, MalformedExpression):
        display_error(expression.reason)
        raise typer.Exit(1)

    rng = default_source()

    if advantage or disadvantage:
        roll_twice = roll_advantage if advantage else roll_disadvantage
        for _ in range(times):
            result = roll_twice(expression, rng)
            if isinstance(result, RuleViolation):
                display_error(result.message)
                raise typer.Exit(1)
            display_advantage(result)
        return

    roller = DiceRoller(rng=rng)
    for _ in range(times):
        display_roll(roller.roll(formula))

    if times > 1:
        stats = roller.tracker.stats(formula)
        display_info(
            f"{stats.count} rolls: mean {stats.mean:.2f}, "
            f"min {stats.minimum}, max {stats.maximum}"
        )


def abilities(
    method: RollMethod = typer.Option(
        RollMethod.FOUR_D6_DROP_LOWEST,
        "--method",
        "-m",
        help="Rolling method",
    ),
) -> None:
    """Roll a set of six ability scores."""
    _, rolls = roll_ability_scores(method, default_source())
    display_ability_rolls(rolls)
    display_info(f"Total: {sum(r.total for r in rolls.values())}")
