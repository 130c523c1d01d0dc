"""Roll history and per-formula statistics.

Purely observational: nothing recorded here influences how later rolls
are evaluated.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime

from charforge.config import get_settings
from charforge.dice.parser import parse
from charforge.dice.roller import RandomSource, evaluate
from charforge.dice.types import RollResult
from charforge.errors import MalformedExpression

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RollRecord:
    """One recorded roll."""

    formula: str
    result: RollResult
    timestamp: datetime


@dataclass(frozen=True)
class FormulaStats:
    """Rolling count and mean of totals for one formula.

    Attributes:
        formula: Canonical formula text.
        count: Number of rolls recorded.
        mean: Mean total (0.0 when nothing was recorded).
        minimum: Lowest total seen (None when nothing was recorded).
        maximum: Highest total seen (None when nothing was recorded).
    """

    formula: str
    count: int = 0
    mean: float = 0.0
    minimum: int | None = None
    maximum: int | None = None


class RollTracker:
    """Thread-safe bounded roll history with per-formula statistics.

    Statistics are kept per canonical formula (``str(expression)``) so that
    ``"4D6 dl1"`` and ``"4d6dl1"`` share an entry. They are cumulative and
    survive history eviction.
    """

    def __init__(self, max_history: int | None = None) -> None:
        if max_history is None:
            max_history = get_settings().roll_history_size
        self._history: deque[RollRecord] = deque(maxlen=max_history)
        self._stats: dict[str, FormulaStats] = {}
        self._lock = threading.Lock()

    def record(self, result: RollResult) -> None:
        """Record a completed roll."""
        formula = str(result.expression)
        with self._lock:
            self._history.append(
                RollRecord(formula=formula, result=result, timestamp=datetime.now())
            )
            previous = self._stats.get(formula, FormulaStats(formula=formula))
            count = previous.count + 1
            self._stats[formula] = FormulaStats(
                formula=formula,
                count=count,
                mean=previous.mean + (result.total - previous.mean) / count,
                minimum=(
                    result.total
                    if previous.minimum is None
                    else min(previous.minimum, result.total)
                ),
                maximum=(
                    result.total
                    if previous.maximum is None
                    else max(previous.maximum, result.total)
                ),
            )

    def stats(self, formula: str) -> FormulaStats:
        """Get statistics for a formula (canonicalized when parseable)."""
        parsed = parse(formula)
        key = formula if isinstance(parsed, MalformedExpression) else str(parsed)
        with self._lock:
            return self._stats.get(key, FormulaStats(formula=key))

    def all_stats(self) -> list[FormulaStats]:
        """Statistics for every formula seen, most rolled first."""
        with self._lock:
            return sorted(self._stats.values(), key=lambda s: (-s.count, s.formula))

    def recent(self, count: int = 10) -> list[RollRecord]:
        """Get the most recent rolls, oldest first."""
        with self._lock:
            if count <= 0:
                return []
            return list(self._history)[-count:]

    def clear(self) -> None:
        """Forget all history and statistics."""
        with self._lock:
            self._history.clear()
            self._stats.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._history)


class DiceRoller:
    """Rolls formulas against one random source and records them.

    Example:
        >>> roller = DiceRoller()
        >>> result = roller.roll("1d20+5")
        >>> roller.tracker.stats("1d20+5").count
        1
    """

    def __init__(
        self,
        rng: RandomSource | None = None,
        tracker: RollTracker | None = None,
    ) -> None:
        self.rng = rng
        self.tracker = tracker if tracker is not None else RollTracker()

    def roll(self, formula: str) -> RollResult | MalformedExpression:
        """Parse, evaluate and record a formula.

        Returns:
            The roll, or the parse failure (which is not recorded).
        """
        expression = parse(formula)
        if isinstance(expression, MalformedExpression):
            return expression

        result = evaluate(expression, self.rng)
        self.tracker.record(result)
        logger.debug(f"Rolled {expression}: {result.total}")
        return result
