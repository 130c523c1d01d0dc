"""Character sheet commands."""

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from charforge.cli.display import console, display_error, display_stats, display_violations
from charforge.engine.calculator import compute_stats
from charforge.errors import RuleLoadError
from charforge.models import Character
from charforge.rules.loader import load_default_tables, load_rule_tables


def stats(
    character_file: Path = typer.Argument(..., help="Character JSON file"),
    rules: Optional[Path] = typer.Option(None, "--rules", "-r", help="Rule tables YAML/JSON file"),
    as_json: bool = typer.Option(False, "--json", help="Print derived stats as JSON"),
) -> None:
    """Compute the derived stats of a character."""
    try:
        tables = load_rule_tables(rules) if rules else load_default_tables()
    except (RuleLoadError, FileNotFoundError) as e:
        display_error(str(e))
        raise typer.Exit(1)

    if not character_file.exists():
        display_error(f"Character file not found: {character_file}")
        raise typer.Exit(1)
    try:
        character = Character.model_validate_json(character_file.read_text(encoding="utf-8"))
    except ValidationError as e:
        display_error(f"Invalid character file {character_file}: {e}")
        raise typer.Exit(1)

    outcome = compute_stats(character, tables)
    if not outcome.ok:
        display_violations(outcome.violations)
        raise typer.Exit(1)

    if as_json:
        console.print_json(outcome.stats.model_dump_json())
    else:
        display_stats(outcome.stats)
