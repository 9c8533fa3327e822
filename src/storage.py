"""
YAML-file persistence for tournaments and their generated brackets.

Each tournament lives in <data_dir>/tournaments/<id>.yaml. Writes are
serialised with a FileLock on <data_dir>/.lock.
"""
import glob
import logging
import os
import re
import uuid
from datetime import datetime

import yaml
from filelock import FileLock

from brackets.elimination import generate_single_elimination_bracket
from brackets.exceptions import BracketError, NotFoundError
from brackets.group_stage import DEFAULT_QUALIFIERS_PER_GROUP, generate_group_stage
from brackets.models import group_from_dict, match_from_dict, participant_from_dict
from brackets.progression import advance_byes, champion, fill_knockout, find_match, record_result
from brackets.validation import GROUP_STAGE, MAX_PARTICIPANTS, MIN_PARTICIPANTS, validate_participants

logger = logging.getLogger(__name__)

STATUS_DRAFT = 'draft'
STATUS_IN_PROGRESS = 'in_progress'
STATUS_COMPLETED = 'completed'
TOURNAMENT_ID_PATTERN = re.compile(r'^[0-9a-f]{32}$')
SUMMARY_KEYS = ('id', 'name', 'format', 'status', 'created')


def _tournaments_dir(data_dir: str) -> str:
    return os.path.join(data_dir, 'tournaments')


def _tournament_path(tournament_id: str, data_dir: str) -> str:
    return os.path.join(_tournaments_dir(data_dir), f'{tournament_id}.yaml')


def _lock(data_dir: str) -> FileLock:
    os.makedirs(data_dir, exist_ok=True)
    return FileLock(os.path.join(data_dir, '.lock'), timeout=10)


def check_unique_numbering(matches, label='bracket'):
    """Raise if two matches share a (round, match_number) pair."""
    seen = set()
    for match in matches:
        key = (match['round'], match['match_number'])
        if key in seen:
            raise BracketError(f"Duplicate match {key} in {label}", "DUPLICATE_MATCH")
        seen.add(key)


def _read(path: str) -> dict:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.warning(f'Failed to parse {path}: {e}')
        raise BracketError(f"Tournament file {os.path.basename(path)} is unreadable", "STORAGE_ERROR")


def _write(record: dict, data_dir: str):
    check_unique_numbering(record.get('matches', []))
    for group in record.get('groups', []):
        check_unique_numbering(group['matches'], f"group {group['name']}")
    os.makedirs(_tournaments_dir(data_dir), exist_ok=True)
    with open(_tournament_path(record['id'], data_dir), 'w', encoding='utf-8') as f:
        yaml.dump(record, f, default_flow_style=False, sort_keys=False)


def build_record(name: str, fmt: str, participants, qualifiers_per_group=DEFAULT_QUALIFIERS_PER_GROUP) -> dict:
    """Generate the bracket for participants and wrap it in a storable tournament record."""
    record = {
        'id': uuid.uuid4().hex,
        'name': name,
        'format': fmt,
        'status': STATUS_DRAFT,
        'created': datetime.now().isoformat(),
        'participants': [p.to_dict() for p in participants],
        'groups': [],
        'matches': [],
    }
    if fmt == GROUP_STAGE:
        stage = generate_group_stage(participants, qualifiers_per_group)
        record['qualifiers_per_group'] = qualifiers_per_group
        record['groups'] = [g.to_dict() for g in stage.groups]
        record['matches'] = [m.to_dict() for m in stage.knockout_bracket]
    else:
        matches = advance_byes(generate_single_elimination_bracket(participants))
        record['matches'] = [m.to_dict() for m in matches]
    return record


def create_tournament(name: str, fmt: str, participants, data_dir: str,
                      qualifiers_per_group=DEFAULT_QUALIFIERS_PER_GROUP,
                      min_participants=MIN_PARTICIPANTS, max_participants=MAX_PARTICIPANTS) -> dict:
    """Validate participants, generate their bracket and persist the tournament."""
    if not name or not name.strip():
        raise BracketError("Tournament name is required", "VALIDATION_ERROR")
    validate_participants(participants, fmt, min_participants, max_participants)
    record = build_record(name.strip(), fmt, participants, qualifiers_per_group)
    with _lock(data_dir):
        _write(record, data_dir)
    logger.info(f"Created {fmt} tournament {record['id']} with {len(participants)} participants")
    return record


def load_tournament(tournament_id: str, data_dir: str) -> dict:
    if not TOURNAMENT_ID_PATTERN.match(str(tournament_id)):
        raise NotFoundError('Tournament', tournament_id)
    path = _tournament_path(tournament_id, data_dir)
    if not os.path.exists(path):
        raise NotFoundError('Tournament', tournament_id)
    return _read(path)


def save_tournament(record: dict, data_dir: str):
    with _lock(data_dir):
        _write(record, data_dir)


def list_tournaments(data_dir: str) -> list:
    """Summaries of all stored tournaments, oldest first."""
    summaries = []
    for path in glob.glob(os.path.join(_tournaments_dir(data_dir), '*.yaml')):
        try:
            record = _read(path)
        except BracketError:
            continue
        if not isinstance(record, dict) or any(key not in record for key in SUMMARY_KEYS):
            logger.warning(f'Skipping {path}: not a complete tournament record')
            continue
        summary = {key: record[key] for key in SUMMARY_KEYS}
        summary['participants'] = len(record.get('participants') or [])
        summaries.append(summary)
    summaries.sort(key=lambda s: s['created'])
    return summaries


def delete_tournament(tournament_id: str, data_dir: str):
    with _lock(data_dir):
        load_tournament(tournament_id, data_dir)
        os.remove(_tournament_path(tournament_id, data_dir))
    logger.info(f"Deleted tournament {tournament_id}")


def _participants_by_id(record: dict) -> dict:
    return {p['id']: participant_from_dict(p) for p in record.get('participants', [])}


def record_match_result(tournament_id: str, match_id: str, winner_id: str, data_dir: str,
                        scores=None) -> dict:
    """
    Apply a result to a knockout or group match and persist it.

    Returns the updated match as a dict.
    """
    with _lock(data_dir):
        record = load_tournament(tournament_id, data_dir)
        lookup = _participants_by_id(record)

        matches = [match_from_dict(m, lookup) for m in record.get('matches', [])]
        if any(m.id == match_id for m in matches):
            match = record_result(matches, match_id, winner_id, scores)
            record['matches'] = [m.to_dict() for m in matches]
        else:
            groups = [group_from_dict(g, lookup) for g in record.get('groups', [])]
            group = next((g for g in groups if any(m.id == match_id for m in g.matches)), None)
            if group is None:
                raise NotFoundError('Match', match_id)
            match = record_result(group.matches, match_id, winner_id, scores)
            record['groups'] = [g.to_dict() for g in groups]

        if champion(matches) is not None:
            record['status'] = STATUS_COMPLETED
        else:
            record['status'] = STATUS_IN_PROGRESS
        _write(record, data_dir)

    logger.info(f"Recorded result for {match_id} in {tournament_id}: winner {winner_id}")
    return match.to_dict()


def seat_qualifiers(tournament_id: str, qualifier_ids, data_dir: str) -> dict:
    """Seat group qualifiers, in the given order, into the first knockout round."""
    with _lock(data_dir):
        record = load_tournament(tournament_id, data_dir)
        if record['format'] != GROUP_STAGE:
            raise BracketError("Only group stage tournaments have qualifiers", "VALIDATION_ERROR")
        lookup = _participants_by_id(record)
        missing = [pid for pid in qualifier_ids if pid not in lookup]
        if missing:
            raise NotFoundError('Participant', missing[0])
        matches = [match_from_dict(m, lookup) for m in record['matches']]
        fill_knockout(matches, [lookup[pid] for pid in qualifier_ids])
        record['matches'] = [m.to_dict() for m in matches]
        _write(record, data_dir)
    return record


def get_match(tournament_id: str, match_id: str, data_dir: str) -> dict:
    record = load_tournament(tournament_id, data_dir)
    lookup = _participants_by_id(record)
    matches = [match_from_dict(m, lookup) for m in record.get('matches', [])]
    for group in record.get('groups', []):
        matches.extend(match_from_dict(m, lookup) for m in group['matches'])
    return find_match(matches, match_id).to_dict()
