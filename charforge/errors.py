"""Error values and exception definitions.

Validation problems are returned as values (``MalformedExpression`` and
``RuleViolation``) so callers can show per-field feedback. The exception
classes wrap those values for callers that prefer raising.
"""

from dataclasses import dataclass
from enum import Enum


class ViolationCode(str, Enum):
    """Kinds of rule violation."""

    UNKNOWN_RACE = "unknown_race"
    UNKNOWN_CLASS = "unknown_class"
    DUPLICATE_CLASS = "duplicate_class"
    UNKNOWN_FEAT = "unknown_feat"
    UNKNOWN_ITEM = "unknown_item"
    UNKNOWN_SKILL = "unknown_skill"
    INVALID_LEVEL = "invalid_level"
    SLOT_CONFLICT = "slot_conflict"
    ABILITY_BELOW_MINIMUM = "ability_below_minimum"
    INVALID_HIT_POINT_ROLL = "invalid_hit_point_roll"
    SKILL_RANK_OVER_CAP = "skill_rank_over_cap"
    NEGATIVE_RANKS = "negative_ranks"
    POOL_OVERDRAWN = "pool_overdrawn"
    DUPLICATE_FEAT = "duplicate_feat"
    POINT_BUY_OUT_OF_RANGE = "point_buy_out_of_range"
    POINT_BUY_OVER_BUDGET = "point_buy_over_budget"
    UNSUPPORTED_FOR_ADVANTAGE = "unsupported_for_advantage"


@dataclass(frozen=True)
class MalformedExpression:
    """A dice formula that could not be parsed.

    Attributes:
        formula: The formula as supplied by the caller.
        token: The offending token (empty when the formula itself is empty).
        reason: Human-readable explanation naming the token.
    """

    formula: str
    token: str
    reason: str

    def __str__(self) -> str:
        return self.reason


@dataclass(frozen=True)
class RuleViolation:
    """An attempted state that would break a rules invariant.

    Attributes:
        code: Machine-readable violation kind.
        message: Human-readable explanation.
        subject: The id or field the violation is about (skill id, class id...).
    """

    code: ViolationCode
    message: str
    subject: str = ""

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"


class CharforgeError(Exception):
    """Base exception for charforge."""

    pass


class DiceParseError(CharforgeError, ValueError):
    """Error parsing dice notation.

    Attributes:
        error: The underlying MalformedExpression value.
    """

    def __init__(self, error: MalformedExpression) -> None:
        super().__init__(error.reason)
        self.error = error


class RandomSourceError(CharforgeError, RuntimeError):
    """The injected random source failed or was exhausted."""

    pass


class RuleViolationError(CharforgeError, ValueError):
    """One or more rule violations, raised by convenience wrappers.

    Attributes:
        violations: The violations that were detected.
    """

    def __init__(self, violations: list[RuleViolation]) -> None:
        super().__init__("; ".join(str(v) for v in violations))
        self.violations = list(violations)


class RuleLoadError(CharforgeError):
    """Error during rule table loading."""

    pass
