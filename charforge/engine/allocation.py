"""Validated character changes.

Each operation returns a new Character when the change keeps every rule
satisfied, or the violations it would cause. The input is never changed.
"""

import logging
from types import MappingProxyType

from charforge.engine.calculator import compute_stats
from charforge.errors import RuleViolation, ViolationCode
from charforge.models import Character
from charforge.rules.schemas import RuleTables

logger = logging.getLogger(__name__)


def _validated(
    candidate: Character,
    tables: RuleTables | None,
) -> Character | list[RuleViolation]:
    outcome = compute_stats(candidate, tables)
    if not outcome.ok:
        logger.debug(f"Rejected change to {candidate.name}: {[str(v) for v in outcome.violations]}")
        return list(outcome.violations)
    return candidate


def allocate_skill_ranks(
    character: Character,
    skill_id: str,
    ranks: int,
    tables: RuleTables | None = None,
) -> Character | list[RuleViolation]:
    """Buy (or refund, with negative ``ranks``) ranks in a skill.

    Args:
        character: Character to change.
        skill_id: Skill to allocate ranks in.
        ranks: Ranks to add.
        tables: Rule tables (defaults to the configured tables).

    Returns:
        The updated character, or violations such as SKILL_RANK_OVER_CAP,
        POOL_OVERDRAWN, NEGATIVE_RANKS or UNKNOWN_SKILL.
    """
    skill_ranks = dict(character.skill_ranks)
    new_ranks = skill_ranks.get(skill_id, 0) + ranks
    if new_ranks < 0:
        return [
            RuleViolation(
                ViolationCode.NEGATIVE_RANKS,
                f"Cannot remove {-ranks} ranks from {skill_id} ({new_ranks - ranks} held)",
                subject=skill_id,
            )
        ]
    if new_ranks == 0:
        skill_ranks.pop(skill_id, None)
    else:
        skill_ranks[skill_id] = new_ranks

    return _validated(
        character.model_copy(update={"skill_ranks": MappingProxyType(skill_ranks)}),
        tables,
    )


def add_feat(
    character: Character,
    feat_id: str,
    tables: RuleTables | None = None,
) -> Character | list[RuleViolation]:
    """Select a feat.

    Returns:
        The updated character, or violations such as DUPLICATE_FEAT,
        UNKNOWN_FEAT or POOL_OVERDRAWN.
    """
    if feat_id in character.feats:
        return [
            RuleViolation(
                ViolationCode.DUPLICATE_FEAT,
                f"{character.name} already has feat '{feat_id}'",
                subject=feat_id,
            )
        ]
    return _validated(
        character.model_copy(update={"feats": character.feats + (feat_id,)}),
        tables,
    )
