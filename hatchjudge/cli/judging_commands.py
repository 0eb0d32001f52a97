"""
Judging CLI Commands

phases, leaderboard, score, eliminate, history
"""
import asyncio
from typing import Any, Callable, Optional

from hatchjudge.engine.errors import JudgingError
from hatchjudge.engine.phase_clock import resolve_phase_index
from hatchjudge.engine.scoring import parse_score
from hatchjudge.services import elimination_service as elim_svc
from hatchjudge.services import leaderboard_service as lb_svc
from hatchjudge.services import scoring_service as score_svc
from hatchjudge.services.hackathon_store import HackathonStore


class JudgingCommand:
    """Judging CLI command handler."""

    def __init__(self, dry_run: bool = False, session_factory: Optional[Callable] = None):
        self.dry_run = dry_run
        self._session_factory = session_factory

    def execute(self, args) -> int:
        """Execute judging command."""
        handlers = {
            "phases": self._phases,
            "leaderboard": self._leaderboard,
            "score": self._score,
            "eliminate": self._eliminate,
            "history": self._history,
        }
        handler = handlers.get(args.command)
        if handler is None:
            print(f"Error: Unknown command {args.command}")
            return 1

        try:
            asyncio.run(self._with_session(handler, args))
            return 0
        except JudgingError as e:
            print(f"Error [{e.code}]: {e.message}")
            return 1

    async def _with_session(self, handler: Callable, args) -> None:
        if self._session_factory is not None:
            async with self._session_factory() as session:
                await handler(session, args)
            return

        from hatchjudge.database import AsyncSessionLocal, close_db
        try:
            async with AsyncSessionLocal() as session:
                await handler(session, args)
        finally:
            await close_db()

    async def _phases(self, db, args) -> None:
        overview = await lb_svc.get_phase_overview(args.code, db)
        print(f"=== Phases: {args.code} ===")
        print(f"\n{'#':<4} {'Name':<30} {'Status':<10} {'Start':<20} {'End':<20}")
        print("-" * 86)
        for phase in overview["phases"]:
            marker = "*" if phase["index"] == overview["active_phase_index"] else " "
            print(
                f"{phase['index']:<3}{marker} {phase['name'][:28]:<30} {phase['status']:<10} "
                f"{_fmt_time(phase['start_time']):<20} {_fmt_time(phase['end_time']):<20}"
            )

    async def _leaderboard(self, db, args) -> None:
        board = await lb_svc.get_leaderboard(args.code, args.scope, db)
        title = board["phase_name"] or "Overall"
        print(f"=== Leaderboard: {args.code} / {title} ===")

        if not board["entries"]:
            print("No teams in view")
            return

        print(f"\n{'Rank':<6} {'Team':<30} {'Score':>6} {'Members':>8}")
        print("-" * 54)
        for entry in board["entries"]:
            print(
                f"{entry['rank']:<6} {entry['team_name'][:28]:<30} "
                f"{entry['score']:>6} {entry['member_count']:>8}"
            )
        if board["pending_grades"]:
            print(f"\n{board['pending_grades']} submission(s) awaiting a score (ranked as 0)")

    async def _score(self, db, args) -> None:
        # Score errors take precedence over phase lookup errors
        parse_score(args.score)
        hackathon = await HackathonStore(db).load(args.code)
        phase_index = resolve_phase_index(hackathon, args.phase)

        if self.dry_run:
            preview = await score_svc.preview_score(args.code, args.team_id, phase_index, args.score, db)
            print(
                f"[DRY RUN] Would score {preview['team_id']} in phase {preview['phase_index']}: "
                f"{preview['score']} (previous: {_or_dash(preview['previous_score'])})"
            )
            return

        result = await score_svc.record_score(args.code, args.team_id, phase_index, args.score, db)
        print(
            f"✓ Scored {result['team_id']} in phase {result['phase_index']}: "
            f"{result['score']} (previous: {_or_dash(result['previous_score'])})"
        )

    async def _eliminate(self, db, args) -> None:
        if self.dry_run:
            result = await elim_svc.preview_elimination(args.code, args.scope, args.count, db)
            print(f"[DRY RUN] Cutoff score {result.cutoff_score} (scope: {result.scope})")
            print(f"  Would eliminate {result.eliminated_count}: {', '.join(result.eliminated_team_ids)}")
            print(f"  Would remain {len(result.remaining_team_ids)}: {', '.join(result.remaining_team_ids)}")
            return

        result = await elim_svc.eliminate(
            args.code, args.scope, args.count, db, performed_by=args.operator,
        )
        print(f"✓ Eliminated {result.eliminated_count} teams at cutoff {result.cutoff_score}")
        for team_id in result.eliminated_team_ids:
            print(f"  - {team_id}")

    async def _history(self, db, args) -> None:
        records = await elim_svc.list_eliminations(args.code, db)
        print(f"=== Eliminations: {args.code} ===")
        if not records:
            print("No eliminations recorded")
            return
        for record in records:
            print(
                f"{record['created_at']}  scope={record['scope']} cutoff={record['cutoff_score']} "
                f"removed={len(record['eliminated_team_ids'])} by={_or_dash(record['performed_by'])}"
            )


def _fmt_time(value: Any) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"


def _or_dash(value: Any) -> str:
    return "-" if value is None else str(value)
