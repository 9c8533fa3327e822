"""
Participant creation and seed assignment for the registration flow.
"""
import random
from typing import List, Optional

from brackets.models import Participant


def make_participants(count: int, names: Optional[List[str]] = None) -> List[Participant]:
    """Create count participants seeded 1..count, named from names where given."""
    names = names or []
    participants = []
    for i in range(1, count + 1):
        name = names[i - 1] if i <= len(names) and names[i - 1] else f"Participant {i}"
        participants.append(Participant(id=f"participant-{i}", name=name, seed=i))
    return participants


def reseed(participants: List[Participant]) -> List[Participant]:
    """Return copies of participants with seeds renumbered 1..N in list order."""
    return [Participant(id=p.id, name=p.name, seed=i) for i, p in enumerate(participants, start=1)]


def shuffle_participants(participants: List[Participant], rng: Optional[random.Random] = None) -> List[Participant]:
    """Shuffle the field and assign fresh seeds in the shuffled order."""
    rng = rng or random.Random()
    shuffled = list(participants)
    rng.shuffle(shuffled)
    return reseed(shuffled)
