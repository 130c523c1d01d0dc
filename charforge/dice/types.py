"""Dice system type definitions.

Immutable dataclasses for dice expressions and roll results.
"""

from dataclasses import dataclass
from enum import Enum


class AdvantageType(str, Enum):
    """Type of advantage for a roll."""

    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"


class SelectorKind(str, Enum):
    """Drop/keep selector applied to a dice term.

    The value is the notation used in formulas (``4d6dl1``, ``2d20kh1``).
    """

    DROP_LOWEST = "dl"
    DROP_HIGHEST = "dh"
    KEEP_LOWEST = "kl"
    KEEP_HIGHEST = "kh"


@dataclass(frozen=True)
class Selector:
    """A drop/keep selector such as ``dl1``.

    Attributes:
        kind: Which extreme subset to drop or keep.
        amount: How many dice to drop or keep.
    """

    kind: SelectorKind
    amount: int

    def __str__(self) -> str:
        return f"{self.kind.value}{self.amount}"

    def kept_count(self, count: int) -> int:
        """Number of dice retained out of ``count``."""
        if self.kind in (SelectorKind.DROP_LOWEST, SelectorKind.DROP_HIGHEST):
            return count - self.amount
        return self.amount

    def apply(self, rolls: tuple[int, ...]) -> tuple[int, ...]:
        """Return the retained rolls, sorted descending.

        Examples:
            >>> Selector(SelectorKind.DROP_LOWEST, 1).apply((1, 5, 6, 4))
            (6, 5, 4)
        """
        ordered = sorted(rolls, reverse=True)
        if self.kind == SelectorKind.DROP_LOWEST:
            kept = ordered[: len(ordered) - self.amount]
        elif self.kind == SelectorKind.DROP_HIGHEST:
            kept = ordered[self.amount :]
        elif self.kind == SelectorKind.KEEP_HIGHEST:
            kept = ordered[: self.amount]
        else:  # KEEP_LOWEST
            kept = ordered[len(ordered) - self.amount :]
        return tuple(kept)


@dataclass(frozen=True)
class FlatTerm:
    """A signed integer constant inside an expression.

    Attributes:
        sign: +1 or -1.
        value: Non-negative magnitude.
    """

    sign: int
    value: int

    @property
    def signed_value(self) -> int:
        return self.sign * self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class DiceTerm:
    """A signed group of dice like ``4d6dl1``.

    Attributes:
        sign: +1 or -1.
        count: Number of dice to roll.
        sides: Size of each die (e.g., 6 for d6, 20 for d20).
        selector: Optional drop/keep selector.
    """

    sign: int
    count: int
    sides: int
    selector: Selector | None = None

    @property
    def kept_count(self) -> int:
        """Number of dice that contribute to the subtotal."""
        if self.selector is None:
            return self.count
        return self.selector.kept_count(self.count)

    def __str__(self) -> str:
        text = f"{self.count}d{self.sides}"
        if self.selector is not None:
            text += str(self.selector)
        return text


Term = FlatTerm | DiceTerm


@dataclass(frozen=True)
class DiceExpression:
    """A parsed dice formula: a sequence of signed terms.

    ``str()`` produces the canonical formula, which parses back into an
    equal expression.

    Attributes:
        terms: The signed terms, in formula order.
    """

    terms: tuple[Term, ...]

    def __str__(self) -> str:
        parts: list[str] = []
        for index, term in enumerate(self.terms):
            if term.sign < 0:
                parts.append("-")
            elif index > 0:
                parts.append("+")
            parts.append(str(term))
        return "".join(parts)

    @property
    def dice_terms(self) -> tuple[DiceTerm, ...]:
        return tuple(t for t in self.terms if isinstance(t, DiceTerm))

    @property
    def flat_total(self) -> int:
        """Sum of all flat terms."""
        return sum(t.signed_value for t in self.terms if isinstance(t, FlatTerm))

    @property
    def is_single_d20(self) -> bool:
        """True for exactly one positive, unselected ``1d20`` term."""
        if len(self.terms) != 1:
            return False
        term = self.terms[0]
        return (
            isinstance(term, DiceTerm)
            and term.sign > 0
            and term.count == 1
            and term.sides == 20
            and term.selector is None
        )


@dataclass(frozen=True)
class TermResult:
    """Outcome of one term of an expression.

    Attributes:
        term: The term that was evaluated.
        raw_rolls: Every die drawn, in draw order (empty for flat terms).
        kept_rolls: Dice retained after the selector, sorted descending when
            a selector is present.
        subtotal: Signed contribution of this term to the total.
    """

    term: Term
    raw_rolls: tuple[int, ...]
    kept_rolls: tuple[int, ...]
    subtotal: int

    @property
    def discarded_rolls(self) -> tuple[int, ...]:
        """Dice removed by the selector."""
        remaining = list(self.kept_rolls)
        discarded = []
        for value in sorted(self.raw_rolls, reverse=True):
            if value in remaining:
                remaining.remove(value)
            else:
                discarded.append(value)
        return tuple(discarded)


@dataclass(frozen=True)
class RollResult:
    """Result of evaluating an expression once.

    Attributes:
        expression: The expression that was rolled.
        terms: Per-term breakdown, in expression order.
        total: Sum of all signed subtotals.
    """

    expression: DiceExpression
    terms: tuple[TermResult, ...]
    total: int

    @property
    def raw_rolls(self) -> tuple[int, ...]:
        """All dice drawn across every term."""
        return tuple(r for t in self.terms for r in t.raw_rolls)

    @property
    def kept_rolls(self) -> tuple[int, ...]:
        """All dice retained across every term."""
        return tuple(r for t in self.terms for r in t.kept_rolls)

    @property
    def is_natural_twenty(self) -> bool:
        """Check if this was a natural 20 on a single d20."""
        return self.expression.is_single_d20 and self.raw_rolls == (20,)

    @property
    def is_natural_one(self) -> bool:
        """Check if this was a natural 1 on a single d20."""
        return self.expression.is_single_d20 and self.raw_rolls == (1,)


@dataclass(frozen=True)
class AdvantageResult:
    """Result of rolling a d20 twice and keeping one.

    Attributes:
        advantage_type: ADVANTAGE keeps the higher total, DISADVANTAGE the lower.
        kept: The roll whose total is used.
        discarded: The other roll.
    """

    advantage_type: AdvantageType
    kept: RollResult
    discarded: RollResult

    @property
    def total(self) -> int:
        return self.kept.total

    @property
    def rolls(self) -> tuple[RollResult, RollResult]:
        """Both constituent rolls, kept first."""
        return (self.kept, self.discarded)
