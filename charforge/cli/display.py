"""Rich display helpers for CLI output."""

from collections.abc import Iterable

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from charforge.dice.types import AdvantageResult, RollResult
from charforge.errors import RuleViolation
from charforge.models import DerivedStats
from charforge.rules.types import Ability


# Shared console instance
console = Console()


def _signed(value: int) -> str:
    return f"{value:+d}"


def display_error(message: str) -> None:
    """Display error message.

    Args:
        message: Error message.
    """
    console.print(f"[bold red]Error:[/bold red] {message}")


def display_info(message: str) -> None:
    """Display info message.

    Args:
        message: Info message.
    """
    console.print(f"[cyan]ℹ[/cyan] {message}")


def display_violations(violations: Iterable[RuleViolation]) -> None:
    """Display each rule violation as an error line."""
    for violation in violations:
        display_error(f"{violation.message} [dim]({violation.code.value})[/dim]")


def display_roll(result: RollResult) -> None:
    """Display a roll with each die, discarded dice struck through.

    Args:
        result: The roll to show.
    """
    parts = []
    for term_result in result.terms:
        if not term_result.raw_rolls:
            parts.append(str(term_result.subtotal))
            continue
        discarded = list(term_result.discarded_rolls)
        dice = []
        for value in term_result.raw_rolls:
            if value in discarded:
                discarded.remove(value)
                dice.append(f"[red strike]{value}[/red strike]")
            else:
                dice.append(f"[green]{value}[/green]")
        parts.append(f"{term_result.term}[{', '.join(dice)}]")

    flag = ""
    if result.is_natural_twenty:
        flag = " [bold green]natural 20![/bold green]"
    elif result.is_natural_one:
        flag = " [bold red]natural 1[/bold red]"

    console.print(
        f"  {result.expression}: {' '.join(parts)} → [bold cyan]{result.total}[/bold cyan]{flag}"
    )


def display_advantage(result: AdvantageResult) -> None:
    """Display both d20 rolls of an advantage or disadvantage roll."""
    console.print(
        f"  {result.advantage_type.value.title()}: "
        f"[green]{result.kept.total}[/green] kept, "
        f"[red strike]{result.discarded.total}[/red strike] discarded "
        f"→ [bold cyan]{result.total}[/bold cyan]"
    )


def display_ability_rolls(rolls: dict[Ability, RollResult]) -> None:
    """Display a rolled ability array.

    Args:
        rolls: Roll per ability.
    """
    table = Table(title="Ability Scores", box=box.ROUNDED)
    table.add_column("Ability", style="white")
    table.add_column("Dice", style="dim")
    table.add_column("Score", justify="center", style="cyan")
    table.add_column("Modifier", justify="center", style="yellow")

    for ability, result in rolls.items():
        dice = ", ".join(str(v) for v in result.raw_rolls)
        table.add_row(ability.value.title(), dice, str(result.total), _signed((result.total - 10) // 2))

    console.print(table)


def display_stats(stats: DerivedStats) -> None:
    """Display a full derived-stat sheet with Rich tables.

    Args:
        stats: Computed character stats.
    """
    console.print()
    console.print(
        Panel(
            f"[bold cyan]{stats.name}[/bold cyan]  level {stats.character_level}, "
            f"{stats.size.value}, speed {stats.speed} ft.",
            style="cyan",
        )
    )

    abilities = Table(title="Abilities", box=box.ROUNDED)
    abilities.add_column("Ability", style="white")
    abilities.add_column("Score", justify="center", style="cyan")
    abilities.add_column("Modifier", justify="center", style="yellow")
    for ability, stat in stats.abilities.items():
        abilities.add_row(ability.value.title(), str(stat.score), _signed(stat.modifier))
    console.print(abilities)

    combat = Table(title="Combat", box=box.ROUNDED)
    combat.add_column("Stat", style="white")
    combat.add_column("Value", style="cyan")
    hp = stats.hit_points
    ac = stats.armor_class
    attack = stats.attack
    combat.add_row("Hit Points", f"{hp.current}/{hp.maximum}")
    combat.add_row("Armor Class", f"{ac.total} (touch {ac.touch}, flat-footed {ac.flat_footed})")
    combat.add_row("Initiative", _signed(stats.initiative))
    combat.add_row("Base Attack", "/".join(attack.sequence))
    combat.add_row("Melee", _signed(attack.melee))
    combat.add_row("Ranged", _signed(attack.ranged))
    combat.add_row("Grapple", _signed(attack.grapple))
    for kind, save in stats.saves.items():
        combat.add_row(kind.value.title(), _signed(save.total))
    console.print(combat)

    trained = [s for s in stats.skills.values() if s.ranks > 0]
    if trained:
        skills = Table(title="Skills", box=box.ROUNDED)
        skills.add_column("Skill", style="white")
        skills.add_column("Ranks", justify="center")
        skills.add_column("Total", justify="center", style="cyan")
        for skill in trained:
            marker = "" if skill.class_skill else " [dim](cc)[/dim]"
            skills.add_row(f"{skill.name}{marker}", str(skill.ranks), _signed(skill.total))
        console.print(skills)

    console.print(
        f"Skill points: {stats.skill_points.spent}/{stats.skill_points.total}  "
        f"Feats: {stats.feats.spent}/{stats.feats.total}"
    )

    for class_id, slots in stats.spell_slots.items():
        per_level = ", ".join(f"{level}: {count}" for level, count in slots.items())
        console.print(f"Spells per day ({class_id}): {per_level}")


def display_rule_table(title: str, columns: list[str], rows: list[list[str]]) -> None:
    """Display rows of rule data.

    Args:
        title: Table title.
        columns: Column headers; the first is the id column.
        rows: Cell values per row.
    """
    table = Table(title=title, box=box.ROUNDED)
    for index, column in enumerate(columns):
        table.add_column(column, style="cyan" if index == 0 else "white")
    for row in rows:
        table.add_row(*row)
    console.print(table)
