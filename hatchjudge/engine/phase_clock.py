"""
Phase Clock

Maps a phase's start/end window and the current time to a lifecycle state.
Both boundaries belong to the active window.
"""
import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from hatchjudge.engine.errors import PhaseNotFound
from hatchjudge.engine.models import HackathonSnapshot, PhaseSnapshot, PhaseStatus


_INDEX_PATTERN = re.compile(r"^-?\d+$")


def phase_status(phase: PhaseSnapshot, now: datetime) -> PhaseStatus:
    if now < phase.start_time:
        return PhaseStatus.UPCOMING
    if now > phase.end_time:
        return PhaseStatus.COMPLETED
    return PhaseStatus.ACTIVE


def active_phase_index(hackathon: HackathonSnapshot, now: datetime) -> Optional[int]:
    """First phase (by position) whose window contains ``now``."""
    for index, phase in enumerate(hackathon.phases):
        if phase_status(phase, now) is PhaseStatus.ACTIVE:
            return index
    return None


def phase_timeline(hackathon: HackathonSnapshot, now: datetime) -> List[Dict[str, Any]]:
    return [
        {
            "index": index,
            "name": phase.name,
            "description": phase.description,
            "start_time": phase.start_time,
            "end_time": phase.end_time,
            "status": phase_status(phase, now).value,
            "deliverable_specs": phase.deliverable_specs,
        }
        for index, phase in enumerate(hackathon.phases)
    ]


def check_phase_index(hackathon: HackathonSnapshot, phase_index: int) -> PhaseSnapshot:
    """Return the phase at ``phase_index`` or raise PhaseNotFound."""
    if isinstance(phase_index, bool) or not isinstance(phase_index, int):
        raise PhaseNotFound(phase_index, len(hackathon.phases))
    if phase_index < 0 or phase_index >= len(hackathon.phases):
        raise PhaseNotFound(phase_index, len(hackathon.phases))
    return hackathon.phases[phase_index]


def resolve_phase_index(hackathon: HackathonSnapshot, phase: Union[int, str]) -> int:
    """
    Resolve a phase reference to its zero-based index.

    Accepts an index, a numeric string, or a phase display name. A string
    is matched against names exactly first, so a phase named "2024" wins
    over index 2024; otherwise numeric strings are indexes, and remaining
    references match names case-insensitively.
    """
    if isinstance(phase, int) and not isinstance(phase, bool):
        check_phase_index(hackathon, phase)
        return phase

    reference = str(phase).strip()
    for index, candidate in enumerate(hackathon.phases):
        if candidate.name == reference:
            return index

    if _INDEX_PATTERN.match(reference):
        index = int(reference)
        check_phase_index(hackathon, index)
        return index

    lowered = reference.lower()
    for index, candidate in enumerate(hackathon.phases):
        if candidate.name.lower() == lowered:
            return index
    raise PhaseNotFound(phase, len(hackathon.phases))
