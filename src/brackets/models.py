class Participant:
    def __init__(self, id, name, seed):
        self.id = id
        self.name = name
        self.seed = seed

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'seed': self.seed}

    def __eq__(self, other):
        if not isinstance(other, Participant):
            return NotImplemented
        return (self.id, self.name, self.seed) == (other.id, other.name, other.seed)

    def __hash__(self):
        return hash((self.id, self.seed))

    def __repr__(self):
        return f"Participant(id={self.id}, name={self.name}, seed={self.seed})"


class Match:
    def __init__(self, id, round, match_number, participant1=None, participant2=None,
                 winner=None, next_match_id=None):
        self.id = id
        self.round = round
        self.match_number = match_number
        self.participant1 = participant1
        self.participant2 = participant2
        self.winner = winner
        self.next_match_id = next_match_id  # None for the final and for group matches
        self.scores = None

    @property
    def participants(self):
        return tuple(p for p in (self.participant1, self.participant2) if p is not None)

    @property
    def is_bye(self):
        return (self.participant1 is not None and self.participant2 is None
                and self.winner is not None and self.winner == self.participant1)

    @property
    def is_placeholder(self):
        return self.participant1 is None and self.participant2 is None

    @property
    def is_playable(self):
        return (self.participant1 is not None and self.participant2 is not None
                and self.winner is None)

    def to_dict(self):
        return {
            'id': self.id,
            'round': self.round,
            'match_number': self.match_number,
            'participant1': self.participant1.to_dict() if self.participant1 else None,
            'participant2': self.participant2.to_dict() if self.participant2 else None,
            'winner': self.winner.to_dict() if self.winner else None,
            'next_match_id': self.next_match_id,
            'scores': list(self.scores) if self.scores else None,
            'is_bye': self.is_bye,
        }

    def __eq__(self, other):
        if not isinstance(other, Match):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return (f"Match(id={self.id}, round={self.round}, match_number={self.match_number}, "
                f"participant1={self.participant1}, participant2={self.participant2}, "
                f"winner={self.winner})")


class Group:
    def __init__(self, name, participants=None, matches=None):
        self.name = name
        self.participants = participants if participants else []
        self.matches = matches if matches else []

    def to_dict(self):
        return {
            'name': self.name,
            'participants': [p.to_dict() for p in self.participants],
            'matches': [m.to_dict() for m in self.matches],
        }

    def __repr__(self):
        return f"Group(name={self.name}, participants={len(self.participants)}, matches={len(self.matches)})"


class GroupStage:
    """Groups with their round-robin schedules plus the knockout skeleton that follows."""

    def __init__(self, groups, knockout_bracket, qualifiers_per_group):
        self.groups = groups
        self.knockout_bracket = knockout_bracket
        self.qualifiers_per_group = qualifiers_per_group

    @property
    def total_qualifiers(self):
        return len(self.groups) * self.qualifiers_per_group

    def to_dict(self):
        return {
            'groups': [g.to_dict() for g in self.groups],
            'knockout_bracket': [m.to_dict() for m in self.knockout_bracket],
            'qualifiers_per_group': self.qualifiers_per_group,
        }

    def __repr__(self):
        return (f"GroupStage(groups={[g.name for g in self.groups]}, "
                f"knockout_matches={len(self.knockout_bracket)})")


def participant_from_dict(data):
    if data is None:
        return None
    return Participant(id=data['id'], name=data['name'], seed=data['seed'])


def match_from_dict(data, participants_by_id=None):
    """Rebuild a Match, resolving participant references through participants_by_id when given."""
    participants_by_id = participants_by_id or {}

    def resolve(ref):
        if ref is None:
            return None
        return participants_by_id.get(ref['id']) or participant_from_dict(ref)

    match = Match(
        id=data['id'],
        round=data['round'],
        match_number=data['match_number'],
        participant1=resolve(data.get('participant1')),
        participant2=resolve(data.get('participant2')),
        winner=resolve(data.get('winner')),
        next_match_id=data.get('next_match_id'),
    )
    if data.get('scores'):
        match.scores = list(data['scores'])
    return match


def group_from_dict(data, participants_by_id=None):
    participants_by_id = participants_by_id or {}
    participants = [participants_by_id.get(p['id']) or participant_from_dict(p)
                    for p in data.get('participants', [])]
    lookup = dict(participants_by_id)
    lookup.update({p.id: p for p in participants})
    matches = [match_from_dict(m, lookup) for m in data.get('matches', [])]
    return Group(name=data['name'], participants=participants, matches=matches)
