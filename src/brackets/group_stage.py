"""
Group stage generation: balanced groups, round-robin schedules inside each
group, and the knockout skeleton the group qualifiers will play.
"""
from itertools import combinations
from typing import List

from brackets.elimination import build_placeholder_rounds, link_progression
from brackets.exceptions import PreconditionError
from brackets.models import Group, GroupStage, Match, Participant

MAX_GROUPS = 4
PARTICIPANTS_PER_GROUP = 4
DEFAULT_QUALIFIERS_PER_GROUP = 2


def calculate_group_count(num_participants: int) -> int:
    """One group per four entrants, at least one group and never more than MAX_GROUPS."""
    return min(MAX_GROUPS, max(1, num_participants // PARTICIPANTS_PER_GROUP))


def group_label(index: int) -> str:
    return chr(ord('A') + index)


def distribute_into_groups(participants: List[Participant], group_count: int) -> List[Group]:
    """
    Deal participants into groups by list position (index % group_count).

    Group sizes differ by at most one. Seeds are not consulted, so groups are
    balanced in size only, not in strength.
    """
    groups = [Group(name=group_label(i)) for i in range(group_count)]
    for index, participant in enumerate(participants):
        groups[index % group_count].participants.append(participant)
    return groups


def round_robin_matches(group: Group) -> List[Match]:
    """Every pair in the group meets once. All group matches are round 1."""
    matches = []
    for match_number, (p1, p2) in enumerate(combinations(group.participants, 2), start=1):
        matches.append(Match(
            id=f"group-{group.name}-match-{match_number}",
            round=1,
            match_number=match_number,
            participant1=p1,
            participant2=p2,
        ))
    return matches


def generate_knockout_bracket(total_qualifiers: int) -> List[Match]:
    """Empty knockout bracket for the given number of qualifiers, progression linked."""
    if total_qualifiers < 2:
        return []

    first_round = [
        Match(id=f"knockout-1-{i + 1}", round=1, match_number=i + 1)
        for i in range(total_qualifiers // 2)
    ]
    matches = first_round + build_placeholder_rounds(len(first_round), start_round=2, id_prefix="knockout")
    return link_progression(matches)


def generate_group_stage(participants: List[Participant],
                         qualifiers_per_group: int = DEFAULT_QUALIFIERS_PER_GROUP) -> GroupStage:
    """
    Build groups with round-robin schedules and an empty knockout bracket.

    The knockout bracket is sized for qualifiers_per_group entrants from each
    group; who actually qualifies is decided later by group results.
    """
    if not participants:
        raise PreconditionError("At least one participant is required", field='participants')
    if qualifiers_per_group < 1:
        raise PreconditionError("At least one qualifier per group is required",
                                field='qualifiers_per_group')

    group_count = calculate_group_count(len(participants))
    groups = distribute_into_groups(participants, group_count)

    smallest_group = min(len(g.participants) for g in groups)
    if qualifiers_per_group > smallest_group:
        raise PreconditionError(
            f"Cannot take {qualifiers_per_group} qualifiers from a group of {smallest_group}",
            field='qualifiers_per_group')
    if (group_count * qualifiers_per_group) % 2:
        raise PreconditionError(
            f"{group_count} groups x {qualifiers_per_group} qualifiers leaves an odd knockout field",
            field='qualifiers_per_group')

    for group in groups:
        group.matches = round_robin_matches(group)

    knockout = generate_knockout_bracket(group_count * qualifiers_per_group)
    return GroupStage(groups=groups, knockout_bracket=knockout,
                      qualifiers_per_group=qualifiers_per_group)
