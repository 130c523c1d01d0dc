"""Dice expression engine.

Parses dice formulas into immutable expressions and evaluates them
against an injected random source.

Usage:
    >>> from charforge.dice import parse, evaluate, roll
    >>> expression = parse("4d6dl1")
    >>> result = evaluate(expression)
    >>> result = roll("1d20+5")
"""

# Types
from charforge.dice.types import (
    AdvantageResult,
    AdvantageType,
    DiceExpression,
    DiceTerm,
    FlatTerm,
    RollResult,
    Selector,
    SelectorKind,
    TermResult,
)

# Parser
from charforge.dice.parser import parse, parse_dice

# Roller
from charforge.dice.roller import (
    RandomSource,
    default_source,
    evaluate,
    roll,
    roll_advantage,
    roll_batch,
    roll_disadvantage,
    roll_exploding,
)

# Tracking & Analysis
from charforge.dice.history import DiceRoller, FormulaStats, RollRecord, RollTracker
from charforge.dice.analysis import RollAnalysis, analyze, total_range

__all__ = [
    # Types
    "AdvantageResult",
    "AdvantageType",
    "DiceExpression",
    "DiceTerm",
    "FlatTerm",
    "RollResult",
    "Selector",
    "SelectorKind",
    "TermResult",
    # Parser
    "parse",
    "parse_dice",
    # Roller
    "RandomSource",
    "default_source",
    "evaluate",
    "roll",
    "roll_advantage",
    "roll_batch",
    "roll_disadvantage",
    "roll_exploding",
    # Tracking & Analysis
    "DiceRoller",
    "FormulaStats",
    "RollRecord",
    "RollTracker",
    "RollAnalysis",
    "analyze",
    "total_range",
]
