"""
Unit Tests for the Phase Clock

Lifecycle boundaries, active phase lookup and phase reference resolution.
"""
from datetime import datetime, timedelta

import pytest

from hatchjudge.engine.errors import PhaseNotFound
from hatchjudge.engine.models import HackathonSnapshot, PhaseSnapshot, PhaseStatus
from hatchjudge.engine.phase_clock import (
    active_phase_index,
    check_phase_index,
    phase_status,
    phase_timeline,
    resolve_phase_index,
)

START = datetime(2026, 4, 1, 9, 0, 0)
END = datetime(2026, 4, 3, 18, 0, 0)


def _phase(name="Build", start=START, end=END) -> PhaseSnapshot:
    return PhaseSnapshot(name=name, start_time=start, end_time=end)


def _hackathon() -> HackathonSnapshot:
    return HackathonSnapshot(
        code="CLOCK",
        phases=[
            _phase("Ideation", START - timedelta(days=5), START - timedelta(days=2)),
            _phase("Build", START, END),
            _phase("Demo Day", END + timedelta(days=1), END + timedelta(days=2)),
        ],
    )


# ==========================================
# phase_status
# ==========================================

def test_before_start_is_upcoming():
    assert phase_status(_phase(), START - timedelta(seconds=1)) is PhaseStatus.UPCOMING


def test_start_boundary_is_active():
    assert phase_status(_phase(), START) is PhaseStatus.ACTIVE


def test_inside_window_is_active():
    assert phase_status(_phase(), START + timedelta(hours=5)) is PhaseStatus.ACTIVE


def test_end_boundary_is_active_not_completed():
    assert phase_status(_phase(), END) is PhaseStatus.ACTIVE


def test_after_end_is_completed():
    assert phase_status(_phase(), END + timedelta(microseconds=1)) is PhaseStatus.COMPLETED


def test_statuses_partition_time_without_gaps():
    """Sampling around both boundaries yields exactly one status per instant, in order."""
    instants = [START + timedelta(seconds=offset) for offset in (-2, -1, 0, 1)]
    instants += [END + timedelta(seconds=offset) for offset in (-1, 0, 1, 2)]
    statuses = [phase_status(_phase(), instant) for instant in instants]

    assert statuses == [
        PhaseStatus.UPCOMING, PhaseStatus.UPCOMING,
        PhaseStatus.ACTIVE, PhaseStatus.ACTIVE,
        PhaseStatus.ACTIVE, PhaseStatus.ACTIVE,
        PhaseStatus.COMPLETED, PhaseStatus.COMPLETED,
    ]


def test_status_values_are_lowercase_strings():
    assert PhaseStatus.ACTIVE.value == "active"
    assert PhaseStatus.ACTIVE == "active"


# ==========================================
# active_phase_index / phase_timeline
# ==========================================

def test_active_phase_index_finds_current_phase():
    assert active_phase_index(_hackathon(), START + timedelta(hours=1)) == 1


def test_active_phase_index_none_between_phases():
    assert active_phase_index(_hackathon(), START - timedelta(days=1)) is None


def test_phase_timeline_reports_each_status():
    timeline = phase_timeline(_hackathon(), START)

    assert [row["index"] for row in timeline] == [0, 1, 2]
    assert [row["status"] for row in timeline] == ["completed", "active", "upcoming"]
    assert timeline[1]["name"] == "Build"


# ==========================================
# check_phase_index / resolve_phase_index
# ==========================================

@pytest.mark.parametrize("index", [-1, 3, 99])
def test_out_of_range_index_raises(index):
    with pytest.raises(PhaseNotFound):
        check_phase_index(_hackathon(), index)


def test_bool_is_not_a_phase_index():
    with pytest.raises(PhaseNotFound):
        check_phase_index(_hackathon(), True)


def test_resolve_accepts_index_and_numeric_string():
    hackathon = _hackathon()
    assert resolve_phase_index(hackathon, 2) == 2
    assert resolve_phase_index(hackathon, "1") == 1


def test_resolve_by_name_exact_then_case_insensitive():
    hackathon = _hackathon()
    assert resolve_phase_index(hackathon, "Demo Day") == 2
    assert resolve_phase_index(hackathon, "demo day") == 2


def test_exact_numeric_name_wins_over_index():
    hackathon = HackathonSnapshot(
        code="YEARLY",
        phases=[_phase("2024"), _phase("0"), _phase("Finals")],
    )
    assert resolve_phase_index(hackathon, "2024") == 0
    assert resolve_phase_index(hackathon, "0") == 1
    assert resolve_phase_index(hackathon, "2") == 2
    assert resolve_phase_index(hackathon, 0) == 0


@pytest.mark.parametrize("reference", ["Judging", "-1", "7", "--1", ""])
def test_resolve_unknown_reference_raises(reference):
    with pytest.raises(PhaseNotFound) as exc_info:
        resolve_phase_index(_hackathon(), reference)
    assert exc_info.value.code == "PHASE_NOT_FOUND"


def test_empty_hackathon_has_no_phases():
    with pytest.raises(PhaseNotFound):
        check_phase_index(HackathonSnapshot(code="EMPTY"), 0)
