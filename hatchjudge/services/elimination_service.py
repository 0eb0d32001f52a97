"""
Elimination Service

Removes the lowest-ranked teams from a hackathon by score threshold.

ALGORITHM:
1. count must be a positive integer                    -> InvalidCount
2. Build the scoped leaderboard from a fresh snapshot
3. count >= teams in view                              -> CannotEliminateAll
4. cutoff = score at position len(view) - count - 1
5. Remove every team in the view scoring <= cutoff

Ties at the cutoff are all removed, which can eliminate more than ``count``
teams. Teams outside a phase view (no submission for that phase) are never
candidates in that scope.

CONCURRENCY:
- The hackathon gate is held exclusively from the leaderboard read until
  the removal commits, so no score from this process lands between
  ranking and removal.
- The removal and its audit record commit in one transaction.
- The removal is a compare-and-swap on the hackathon version read with
  the leaderboard, so a score committed by another process in between
  aborts it with StaleSnapshot.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from hatchjudge.engine.elimination import plan_elimination, validate_count
from hatchjudge.engine.errors import JudgingError, StaleSnapshot
from hatchjudge.engine.leaderboard import resolve_scope
from hatchjudge.engine.models import CutoffResult
from hatchjudge.services.hackathon_store import HackathonStore
from hatchjudge.services.locks import LockRegistry, lock_registry

logger = logging.getLogger(__name__)


async def preview_elimination(
    code: str,
    scope: Any,
    count: Any,
    db: AsyncSession,
) -> CutoffResult:
    """Compute the cutoff and the teams it would remove, without writing."""
    count = validate_count(count)
    hackathon = await HackathonStore(db).load(code)
    return plan_elimination(hackathon, resolve_scope(hackathon, scope), count)


async def eliminate(
    code: str,
    scope: Any,
    count: Any,
    db: AsyncSession,
    performed_by: Optional[str] = None,
    locks: Optional[LockRegistry] = None,
) -> CutoffResult:
    """
    Eliminate the bottom ``count`` teams of ``scope`` by cutoff score.

    Args:
        code: Hackathon code
        scope: "overall", a phase index or a phase name
        count: Number of teams requested for removal
        db: Database session
        performed_by: Principal id recorded in the audit trail
        locks: Lock registry (process-wide registry by default)

    Returns:
        CutoffResult with the cutoff score and eliminated team ids

    Raises:
        InvalidCount, HackathonNotFound, PhaseNotFound, CannotEliminateAll,
        StaleSnapshot, StorageFailure
    """
    locks = locks or lock_registry
    count = validate_count(count)
    store = HackathonStore(db)

    async with locks.elimination(code):
        hackathon = await store.load(code)
        resolved = resolve_scope(hackathon, scope)
        try:
            result = plan_elimination(hackathon, resolved, count)
        except JudgingError as e:
            logger.warning(f"Elimination rejected for {code} scope={resolved}: {e.code}")
            raise

        try:
            await store.write_elimination(
                code,
                resolved,
                result.cutoff_score,
                result.eliminated_team_ids,
                requested_count=count,
                performed_by=performed_by,
                expected_version=hackathon.version,
            )
        except StaleSnapshot:
            logger.warning(
                f"Elimination for {code} aborted: hackathon changed since version {hackathon.version}"
            )
            raise

    logger.info(
        f"Eliminated {result.eliminated_count} teams from {code} "
        f"(scope={resolved}, requested={count}, cutoff={result.cutoff_score}, by={performed_by})"
    )
    if result.eliminated_count > count:
        logger.info(
            f"Ties at cutoff {result.cutoff_score} removed "
            f"{result.eliminated_count - count} more teams than requested"
        )
    return result


async def list_eliminations(code: str, db: AsyncSession) -> List[Dict[str, Any]]:
    store = HackathonStore(db)
    # Surfaces HackathonNotFound for unknown codes
    await store.load(code)
    return await store.list_eliminations(code)
