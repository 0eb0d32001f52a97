"""
Tests for the Submission Service

Deliverable intake gated by the phase clock.
"""
from datetime import timedelta

import pytest

from hatchjudge.engine.errors import (
    InvalidSubmission, PhaseNotActive, PhaseNotFound, TeamNotFound,
)
from hatchjudge.engine.models import SubmissionState
from hatchjudge.engine.submissions import find_submission, submission_state
from hatchjudge.services.hackathon_store import HackathonStore
from hatchjudge.services.scoring_service import record_score
from hatchjudge.services.submission_service import clean_deliverables, submit_deliverables
from hatchjudge.tests.factories import TEST_NOW, seed_hackathon


async def _team(session, team_id):
    hackathon = await HackathonStore(session).load("HACK24")
    return hackathon.find_team(team_id)


def test_clean_deliverables_strips_and_drops_blanks():
    cleaned = clean_deliverables({"github": "  https://github.com/x  ", "video": "", "docs": None})
    assert cleaned == {"github": "https://github.com/x"}


@pytest.mark.parametrize("payload", [{}, {"github": "   "}, None, ["github"], {"github": 5}, {"": "x"}])
def test_clean_deliverables_rejects_bad_payloads(payload):
    with pytest.raises(InvalidSubmission):
        clean_deliverables(payload)


@pytest.mark.asyncio
async def test_submit_during_active_phase(db_session):
    await seed_hackathon(db_session, teams={"alpha": {}})

    result = await submit_deliverables(
        "HACK24", "alpha", "Prototype", {"github": "https://github.com/alpha/proto"},
        db_session, now=TEST_NOW,
    )

    assert result["phase_index"] == 1
    assert result["created"] is True
    team = await _team(db_session, "alpha")
    assert submission_state(team, 1) is SubmissionState.AWAITING_SCORE


@pytest.mark.asyncio
async def test_window_boundaries_accept_submissions(db_session):
    hackathon = await seed_hackathon(db_session, teams={"alpha": {}})
    phase = hackathon.phases[1]

    for instant in (phase.start_time, phase.end_time):
        result = await submit_deliverables(
            "HACK24", "alpha", 1, {"github": "https://example.com"}, db_session, now=instant,
        )
        assert result["phase_index"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("phase, status", [(0, "completed"), (2, "upcoming")])
async def test_closed_phases_reject_submissions(db_session, phase, status):
    await seed_hackathon(db_session, teams={"alpha": {}})

    with pytest.raises(PhaseNotActive) as exc_info:
        await submit_deliverables(
            "HACK24", "alpha", phase, {"github": "https://example.com"}, db_session, now=TEST_NOW,
        )
    assert exc_info.value.status == status


@pytest.mark.asyncio
async def test_resubmission_replaces_deliverables_and_keeps_score(db_session):
    await seed_hackathon(db_session, teams={"alpha": {1: None}})
    await record_score("HACK24", "alpha", 1, 64, db_session)

    result = await submit_deliverables(
        "HACK24", "alpha", 1, {"video": "https://youtu.be/demo"}, db_session,
        now=TEST_NOW + timedelta(hours=2),
    )

    assert result["created"] is False
    submission = find_submission(await _team(db_session, "alpha"), 1)
    assert submission.deliverables == {"video": "https://youtu.be/demo"}
    assert submission.score == 64
    assert submission.submitted_at == TEST_NOW + timedelta(hours=2)


@pytest.mark.asyncio
async def test_submission_fills_bare_scored_record(db_session):
    await seed_hackathon(db_session, teams={"alpha": {}})
    await record_score("HACK24", "alpha", 1, 30, db_session)

    await submit_deliverables(
        "HACK24", "alpha", 1, {"github": "https://github.com/alpha"}, db_session, now=TEST_NOW,
    )

    submission = find_submission(await _team(db_session, "alpha"), 1)
    assert submission.score == 30
    assert submission.deliverables == {"github": "https://github.com/alpha"}


@pytest.mark.asyncio
async def test_unknown_team_and_phase(db_session):
    await seed_hackathon(db_session, teams={"alpha": {}})

    with pytest.raises(TeamNotFound):
        await submit_deliverables("HACK24", "ghost", 1, {"a": "b"}, db_session, now=TEST_NOW)
    with pytest.raises(PhaseNotFound):
        await submit_deliverables("HACK24", "alpha", "Judging", {"a": "b"}, db_session, now=TEST_NOW)
