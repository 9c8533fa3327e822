"""
Single elimination bracket generation.
"""
import math
from typing import Dict, List

from brackets.exceptions import PreconditionError
from brackets.models import Match, Participant


def round_name(matches_in_round: int) -> str:
    """Get the name of a round based on the number of matches it holds."""
    teams_in_round = matches_in_round * 2
    if teams_in_round == 2:
        return "Final"
    elif teams_in_round == 4:
        return "Semifinal"
    elif teams_in_round == 8:
        return "Quarterfinal"
    else:
        return f"Round of {teams_in_round}"


def calculate_bracket_size(num_participants: int) -> int:
    """Calculate the bracket size (smallest power of 2 >= num_participants)."""
    if num_participants <= 1:
        return 1
    return 2 ** math.ceil(math.log2(num_participants))


def calculate_byes(num_participants: int) -> int:
    """Calculate number of byes needed."""
    return calculate_bracket_size(num_participants) - num_participants


def calculate_rounds(num_participants: int) -> int:
    """Number of rounds needed to get from the first round to the final."""
    return int(math.log2(calculate_bracket_size(num_participants)))


def sort_by_seed(participants: List[Participant]) -> List[Participant]:
    """Stable ascending sort by seed; the lowest seed number is the top-ranked entrant."""
    return sorted(participants, key=lambda p: p.seed)


def build_placeholder_rounds(first_round_count: int, start_round: int, id_prefix: str) -> List[Match]:
    """
    Build empty matches for every round after the one holding first_round_count matches.

    Each round has ceil(previous / 2) matches; generation stops once a round
    with a single match (the final) has been produced.
    """
    matches = []
    current_count = first_round_count
    round_number = start_round

    while current_count > 1:
        next_count = math.ceil(current_count / 2)
        for i in range(next_count):
            matches.append(Match(
                id=f"{id_prefix}-{round_number}-{i + 1}",
                round=round_number,
                match_number=i + 1,
            ))
        current_count = next_count
        round_number += 1

    return matches


def rounds_of(matches: List[Match]) -> Dict[int, List[Match]]:
    """Group matches by round, each round ordered by match number."""
    rounds = {}
    for match in matches:
        rounds.setdefault(match.round, []).append(match)
    for round_matches in rounds.values():
        round_matches.sort(key=lambda m: m.match_number)
    return dict(sorted(rounds.items()))


def link_progression(matches: List[Match]) -> List[Match]:
    """
    Set next_match_id on every match.

    Match i (0-based, by match number) of round r feeds match i // 2 of round r + 1.
    Matches in the last round keep next_match_id = None.
    """
    rounds = rounds_of(matches)
    round_numbers = list(rounds.keys())
    for idx, round_number in enumerate(round_numbers):
        if idx + 1 >= len(round_numbers):
            for match in rounds[round_number]:
                match.next_match_id = None
            continue
        next_round = rounds[round_numbers[idx + 1]]
        for i, match in enumerate(rounds[round_number]):
            match.next_match_id = next_round[i // 2].id if i // 2 < len(next_round) else None
    return matches


def feeder_slot(match: Match, matches: List[Match]) -> int:
    """Return which slot (1 or 2) of the next match the winner of this match fills."""
    round_matches = rounds_of(matches)[match.round]
    index = next(i for i, m in enumerate(round_matches) if m.id == match.id)
    return 1 if index % 2 == 0 else 2


def generate_single_elimination_bracket(participants: List[Participant]) -> List[Match]:
    """
    Generate a complete single elimination bracket.

    Participants are sorted by seed. The top seeds receive byes until the
    field fills the next power of two; everyone else is paired in sorted
    order (1st remaining vs 2nd remaining, 3rd vs 4th, ...). Byes are
    resolved round 1 matches numbered after the contested ones. Later rounds
    are empty placeholders linked by next_match_id.

    Because byes come last in round 1, the top seeds share a second-round
    match (for 6 entrants seeds 1 and 2 meet in match-2-2). The layout is
    not a classic seeded draw and should not be displayed as one.
    """
    if not participants:
        raise PreconditionError("At least one participant is required", field='participants')

    num_participants = len(participants)
    num_byes = calculate_byes(num_participants)
    if num_participants == 1:
        # A lone entrant has nobody to play and advances as champion
        num_byes = 1

    ordered = sort_by_seed(participants)
    players_with_byes = ordered[:num_byes]
    players_in_first_round = ordered[num_byes:]

    matches = []
    for i in range(0, len(players_in_first_round), 2):
        match_number = len(matches) + 1
        matches.append(Match(
            id=f"match-1-{match_number}",
            round=1,
            match_number=match_number,
            participant1=players_in_first_round[i],
            participant2=players_in_first_round[i + 1],
        ))

    for player in players_with_byes:
        matches.append(Match(
            id=f"match-1-bye-{player.id}",
            round=1,
            match_number=len(matches) + 1,
            participant1=player,
            winner=player,
        ))

    matches.extend(build_placeholder_rounds(len(matches), start_round=2, id_prefix="match"))
    return link_progression(matches)
