"""Rule table browsing commands."""

from pathlib import Path
from typing import Optional

import typer

from charforge.cli.display import display_error, display_rule_table
from charforge.errors import RuleLoadError
from charforge.rules.loader import load_default_tables, load_rule_tables
from charforge.rules.schemas import ArmorItem, RuleTables, ShieldItem, WeaponItem

app = typer.Typer(help="Browse rule tables")


def _tables(ctx: typer.Context) -> RuleTables:
    rules_path = ctx.obj
    try:
        return load_rule_tables(rules_path) if rules_path else load_default_tables()
    except (RuleLoadError, FileNotFoundError) as e:
        display_error(str(e))
        raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    rules: Optional[Path] = typer.Option(None, "--rules", "-r", help="Rule tables YAML/JSON file"),
) -> None:
    """Browse races, classes, feats, items and skills."""
    ctx.obj = rules


@app.command()
def races(ctx: typer.Context) -> None:
    """List playable races."""
    rows = [
        [
            race_id,
            race.name,
            race.size.value,
            str(race.speed),
            ", ".join(f"{a.value[:3]} {v:+d}" for a, v in race.ability_modifiers.items()),
            race.favored_class or "any",
        ]
        for race_id, race in _tables(ctx).races.items()
    ]
    display_rule_table("Races", ["Id", "Name", "Size", "Speed", "Abilities", "Favored"], rows)


@app.command()
def classes(ctx: typer.Context) -> None:
    """List character classes."""
    rows = [
        [
            class_id,
            definition.name,
            f"d{definition.hit_die}",
            definition.base_attack.value,
            "/".join(definition.saves[kind].value for kind in definition.saves),
            str(definition.skill_points),
            definition.spellcasting.ability.value if definition.spellcasting else "",
        ]
        for class_id, definition in _tables(ctx).classes.items()
    ]
    display_rule_table(
        "Classes",
        ["Id", "Name", "Hit Die", "BAB", "Saves", "Skill Pts", "Casting"],
        rows,
    )


@app.command()
def feats(ctx: typer.Context) -> None:
    """List feats and their numeric effects."""
    rows = [
        [
            feat_id,
            feat.name,
            ", ".join(
                f"{m.value:+d} {m.target.value}{':' + m.key if m.key else ''}"
                for m in feat.modifiers
            )
            or (feat.benefit or ""),
        ]
        for feat_id, feat in _tables(ctx).feats.items()
    ]
    display_rule_table("Feats", ["Id", "Name", "Effect"], rows)


@app.command()
def items(ctx: typer.Context) -> None:
    """List equipment."""
    rows = []
    for item_id, item in _tables(ctx).items.items():
        if isinstance(item, ArmorItem):
            detail = f"armor +{item.armor_bonus}, max dex {item.max_dex_bonus}, ACP {item.armor_check_penalty}"
        elif isinstance(item, ShieldItem):
            detail = f"shield +{item.shield_bonus}, ACP {item.armor_check_penalty}"
        elif isinstance(item, WeaponItem):
            detail = f"damage {item.damage}"
        else:
            detail = ", ".join(str(t.to_modifier(item_id)) for t in item.modifiers)
        rows.append([item_id, item.name, item.category, detail])
    display_rule_table("Items", ["Id", "Name", "Category", "Details"], rows)


@app.command()
def skills(ctx: typer.Context) -> None:
    """List skills."""
    rows = [
        [
            skill_id,
            skill.name,
            skill.ability.value[:3],
            "yes" if skill.trained_only else "",
            "yes" if skill.armor_check_penalty else "",
        ]
        for skill_id, skill in _tables(ctx).skills.items()
    ]
    display_rule_table("Skills", ["Id", "Name", "Ability", "Trained", "ACP"], rows)
