"""
Boundary validation for participant lists.

The generators trust their input; callers run validate_participants first.
"""
from typing import List

from brackets.exceptions import PreconditionError
from brackets.models import Participant

SINGLE_ELIMINATION = 'single_elimination'
GROUP_STAGE = 'group_stage'
FORMATS = (SINGLE_ELIMINATION, GROUP_STAGE)

MIN_PARTICIPANTS = 2
MAX_PARTICIPANTS = 1024
MIN_GROUP_STAGE_PARTICIPANTS = 4


def validate_format(fmt: str) -> str:
    if fmt not in FORMATS:
        raise PreconditionError(f"Unknown format '{fmt}', expected one of: {', '.join(FORMATS)}",
                                field='format')
    return fmt


def validate_participant_count(count, fmt: str = SINGLE_ELIMINATION,
                               min_count: int = MIN_PARTICIPANTS,
                               max_count: int = MAX_PARTICIPANTS) -> int:
    """Check a requested field size. Returns it as an int."""
    try:
        count = int(count)
    except (TypeError, ValueError):
        raise PreconditionError("Participant count must be a whole number", field='count')
    if count < min_count:
        raise PreconditionError(f"At least {min_count} participants are required", field='count')
    if count > max_count:
        raise PreconditionError(f"At most {max_count} participants are allowed", field='count')
    if fmt == GROUP_STAGE and count < MIN_GROUP_STAGE_PARTICIPANTS:
        raise PreconditionError(
            f"Group stage needs at least {MIN_GROUP_STAGE_PARTICIPANTS} participants", field='count')
    return count


def validate_participants(participants: List[Participant], fmt: str = SINGLE_ELIMINATION,
                          min_count: int = MIN_PARTICIPANTS,
                          max_count: int = MAX_PARTICIPANTS) -> List[Participant]:
    """
    Reject participant lists the generators would silently mishandle.

    Checks the field size, that ids are unique and that seeds are positive
    integers forming a dense permutation of 1..N.
    """
    validate_format(fmt)
    validate_participant_count(len(participants), fmt, min_count, max_count)

    ids = set()
    for participant in participants:
        if not participant.id:
            raise PreconditionError("Every participant needs an id", field='participants')
        if participant.id in ids:
            raise PreconditionError(f"Duplicate participant id '{participant.id}'", field='participants')
        ids.add(participant.id)
        if isinstance(participant.seed, bool) or not isinstance(participant.seed, int) or participant.seed < 1:
            raise PreconditionError(
                f"Seed for '{participant.name}' must be a positive integer", field='seed')

    seeds = sorted(p.seed for p in participants)
    if seeds != list(range(1, len(participants) + 1)):
        raise PreconditionError(
            f"Seeds must be unique and cover 1..{len(participants)}", field='seed')

    return participants
