"""Main CLI application for charforge."""

import logging

import typer

from charforge.cli.commands import character, dice, rules
from charforge.config import get_settings

# Create main app
app = typer.Typer(
    name="charforge",
    help="A d20 character rules engine: dice formulas and derived stats",
    add_completion=True,
)

# Add commands
app.command()(dice.roll)
app.command()(dice.abilities)
app.command()(character.stats)
app.add_typer(rules.app, name="rules")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """charforge - dice and character stats for d20 games.

    Use 'charforge roll 4d6dl1' to roll dice, or 'charforge stats hero.json'
    to compute a character sheet.
    """
    if verbose or get_settings().debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )


if __name__ == "__main__":
    app()
