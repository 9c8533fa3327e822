"""
Recording results on a generated bracket and moving winners forward.
"""
from typing import List, Optional

from brackets.elimination import feeder_slot, rounds_of
from brackets.exceptions import NotFoundError, PreconditionError, ResultError
from brackets.models import Match, Participant


def find_match(matches: List[Match], match_id: str) -> Match:
    for match in matches:
        if match.id == match_id:
            return match
    raise NotFoundError('Match', match_id)


def _advance(match: Match, matches: List[Match]):
    """Place the winner of match into its slot in the next match."""
    if match.next_match_id is None or match.winner is None:
        return
    next_match = find_match(matches, match.next_match_id)
    if feeder_slot(match, matches) == 1:
        next_match.participant1 = match.winner
    else:
        next_match.participant2 = match.winner

    # Odd-sized rounds leave the last match of the next round with a single feeder
    feeders = [m for m in matches if m.next_match_id == next_match.id]
    if len(feeders) == 1:
        next_match.winner = match.winner
        _advance(next_match, matches)


def advance_byes(matches: List[Match]) -> List[Match]:
    """Move every resolved bye into the match it feeds."""
    for match in matches:
        if match.is_bye:
            _advance(match, matches)
    return matches


def record_result(matches: List[Match], match_id: str, winner_id: str,
                  scores: Optional[List[int]] = None) -> Match:
    """
    Mark winner_id as the winner of match_id and advance them.

    Only matches with both participants known and no winner yet accept a
    result. Returns the updated match.
    """
    match = find_match(matches, match_id)
    if match.is_bye:
        raise ResultError("Bye matches are already resolved", match_id=match_id)
    if match.winner is not None:
        raise ResultError("Match already has a result", match_id=match_id)
    if not match.is_playable:
        raise ResultError("Match is still waiting for its participants", match_id=match_id)

    winner = next((p for p in match.participants if p.id == winner_id), None)
    if winner is None:
        raise ResultError(f"'{winner_id}' is not playing in this match", match_id=match_id)

    match.winner = winner
    if scores is not None:
        match.scores = list(scores)
    _advance(match, matches)
    return match


def fill_knockout(matches: List[Match], qualifiers: List[Participant]) -> List[Match]:
    """
    Seat group qualifiers in the first knockout round, pairing them in order.

    The number of qualifiers must fill the first round exactly.
    """
    first_round = rounds_of(matches).get(1, [])
    if len(qualifiers) != len(first_round) * 2:
        raise PreconditionError(
            f"Knockout bracket seats {len(first_round) * 2} qualifiers, got {len(qualifiers)}",
            field='qualifiers')
    for match in first_round:
        if match.participants:
            raise ResultError("Knockout bracket is already seeded", match_id=match.id)
    for i, match in enumerate(first_round):
        match.participant1 = qualifiers[2 * i]
        match.participant2 = qualifiers[2 * i + 1]
    return matches


def champion(matches: List[Match]):
    """Winner of the final, or None while the bracket is still open."""
    if not matches:
        return None
    rounds = rounds_of(matches)
    final_round = rounds[max(rounds)]
    if len(final_round) != 1:
        return None
    return final_round[0].winner
