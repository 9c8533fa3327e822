"""
Flask JSON API for generating tournament brackets and tracking their results.
"""
import os
import yaml
from flask import Flask, jsonify, request

from brackets.elimination import calculate_byes, generate_single_elimination_bracket, round_name, rounds_of
from brackets.exceptions import BracketError, PreconditionError
from brackets.group_stage import DEFAULT_QUALIFIERS_PER_GROUP, generate_group_stage
from brackets.models import participant_from_dict
from brackets.seeding import make_participants, shuffle_participants
from brackets.validation import (
    FORMATS, GROUP_STAGE, MAX_PARTICIPANTS, MIN_PARTICIPANTS, SINGLE_ELIMINATION,
    validate_format, validate_participant_count, validate_participants,
)
from rate_limit import RateLimiter
import storage

app = Flask(__name__)


BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('BRACKET_DATA_DIR', os.path.join(BASE_DIR, 'data'))
SETTINGS_FILE = os.path.join(DATA_DIR, 'settings.yaml')

# Rate limiting for bracket generation and result submissions, keyed by client address
rate_limiter = RateLimiter(
    max_attempts=int(os.environ.get('BRACKET_RATE_LIMIT', 30)),
    window_seconds=int(os.environ.get('BRACKET_RATE_WINDOW', 60)),
)


def get_default_settings() -> dict:
    """Default tournament settings."""
    return {
        'qualifiers_per_group': DEFAULT_QUALIFIERS_PER_GROUP,
        'min_participants': MIN_PARTICIPANTS,
        'max_participants': MAX_PARTICIPANTS,
    }


def load_settings() -> dict:
    """Load settings from YAML, falling back to defaults for anything missing."""
    settings = get_default_settings()
    if not os.path.exists(SETTINGS_FILE):
        return settings
    try:
        with open(SETTINGS_FILE, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        app.logger.warning(f'Failed to parse {SETTINGS_FILE}: {e}')
        return settings
    for key in settings:
        if key in data:
            settings[key] = data[key]
    return settings


def _client_key(scope: str) -> tuple:
    return (request.remote_addr or 'unknown', scope)


def _rate_limited(scope: str) -> bool:
    key = _client_key(scope)
    if rate_limiter.record_attempt(key):
        return False
    app.logger.warning(f'Rate limit exceeded for {key[0]} on {scope}')
    return True


def _too_many_requests():
    return jsonify({'error': 'RATE_LIMITED', 'message': 'Too many requests, try again later'}), 429


def participants_from_request(data: dict, fmt: str, settings: dict) -> list:
    """
    Build the participant list from a request body.

    Accepts either an explicit 'participants' list of {id, name, seed}
    objects, or a 'count' (with optional 'names') for generated entrants.
    'shuffle': true reseeds the field in random order.
    """
    if data.get('participants') is not None:
        raw = data['participants']
        if not isinstance(raw, list):
            raise PreconditionError("'participants' must be a list", field='participants')
        try:
            participants = [participant_from_dict(p) for p in raw]
        except (KeyError, TypeError):
            raise PreconditionError("Each participant needs id, name and seed", field='participants')
    elif data.get('count') is not None:
        count = validate_participant_count(data['count'], fmt,
                                           settings['min_participants'], settings['max_participants'])
        names = data.get('names')
        if names is not None and (not isinstance(names, list)
                                  or not all(isinstance(n, str) for n in names)):
            raise PreconditionError("'names' must be a list of strings", field='names')
        participants = make_participants(count, names)
    else:
        raise PreconditionError("Provide 'participants' or 'count'", field='participants')

    if data.get('shuffle'):
        participants = shuffle_participants(participants)

    return validate_participants(participants, fmt,
                                 settings['min_participants'], settings['max_participants'])


def _qualifiers_per_group(data: dict, settings: dict) -> int:
    value = data.get('qualifiers_per_group', settings['qualifiers_per_group'])
    try:
        return int(value)
    except (TypeError, ValueError):
        raise PreconditionError("qualifiers_per_group must be a whole number", field='qualifiers_per_group')


def bracket_display(matches) -> dict:
    """Matches grouped by round for rendering, with round labels."""
    rounds = rounds_of(matches)
    return {
        'rounds': [
            {
                'round': number,
                'name': round_name(len(round_matches)),
                'matches': [m.to_dict() for m in round_matches],
            }
            for number, round_matches in rounds.items()
        ],
        'total_rounds': len(rounds),
        'total_matches': len(matches),
    }


@app.errorhandler(BracketError)
def handle_bracket_error(error):
    return jsonify(error.to_dict()), error.status_code


@app.route('/api/formats')
def api_formats():
    return jsonify({'formats': list(FORMATS), 'settings': load_settings()})


@app.route('/api/brackets/single-elimination', methods=['POST'])
def api_single_elimination():
    """Generate a single elimination bracket without storing it."""
    if _rate_limited('generate'):
        return _too_many_requests()
    data = request.get_json(silent=True) or {}
    participants = participants_from_request(data, SINGLE_ELIMINATION, load_settings())
    matches = generate_single_elimination_bracket(participants)
    result = bracket_display(matches)
    result['participants'] = [p.to_dict() for p in participants]
    result['byes'] = calculate_byes(len(participants))
    return jsonify(result)


@app.route('/api/brackets/group-stage', methods=['POST'])
def api_group_stage():
    """Generate groups and a knockout skeleton without storing them."""
    if _rate_limited('generate'):
        return _too_many_requests()
    data = request.get_json(silent=True) or {}
    settings = load_settings()
    participants = participants_from_request(data, GROUP_STAGE, settings)
    stage = generate_group_stage(participants, _qualifiers_per_group(data, settings))
    result = stage.to_dict()
    result['knockout'] = bracket_display(stage.knockout_bracket)
    result['total_qualifiers'] = stage.total_qualifiers
    return jsonify(result)


@app.route('/api/tournaments', methods=['GET'])
def api_list_tournaments():
    return jsonify({'tournaments': storage.list_tournaments(DATA_DIR)})


@app.route('/api/tournaments', methods=['POST'])
def api_create_tournament():
    if _rate_limited('generate'):
        return _too_many_requests()
    data = request.get_json(silent=True) or {}
    settings = load_settings()
    fmt = validate_format(data.get('format', SINGLE_ELIMINATION))
    participants = participants_from_request(data, fmt, settings)
    record = storage.create_tournament(
        data.get('name', ''), fmt, participants, DATA_DIR,
        qualifiers_per_group=_qualifiers_per_group(data, settings),
        min_participants=settings['min_participants'],
        max_participants=settings['max_participants'],
    )
    app.logger.info(f"Tournament '{record['name']}' created ({record['id']})")
    return jsonify(record), 201


@app.route('/api/tournaments/<tournament_id>', methods=['GET'])
def api_get_tournament(tournament_id):
    return jsonify(storage.load_tournament(tournament_id, DATA_DIR))


@app.route('/api/tournaments/<tournament_id>', methods=['DELETE'])
def api_delete_tournament(tournament_id):
    storage.delete_tournament(tournament_id, DATA_DIR)
    return jsonify({'success': True})


@app.route('/api/tournaments/<tournament_id>/matches/<match_id>', methods=['GET'])
def api_get_match(tournament_id, match_id):
    return jsonify(storage.get_match(tournament_id, match_id, DATA_DIR))


@app.route('/api/tournaments/<tournament_id>/matches/<match_id>/result', methods=['POST'])
def api_record_result(tournament_id, match_id):
    """Record the winner of a match and advance them through the bracket."""
    if _rate_limited('result'):
        return _too_many_requests()
    data = request.get_json(silent=True) or {}
    winner_id = data.get('winner_id')
    if not winner_id:
        return jsonify({'error': 'VALIDATION_ERROR', 'message': 'Missing winner_id'}), 400

    scores = data.get('scores')
    if scores is not None and (not isinstance(scores, list) or
                               not all(isinstance(s, int) and s >= 0 for s in scores)):
        return jsonify({'error': 'VALIDATION_ERROR', 'message': 'Scores must be non-negative integers'}), 400

    match = storage.record_match_result(tournament_id, match_id, winner_id, DATA_DIR, scores)
    record = storage.load_tournament(tournament_id, DATA_DIR)
    return jsonify({'success': True, 'match': match, 'status': record['status']})


@app.route('/api/tournaments/<tournament_id>/qualifiers', methods=['POST'])
def api_seat_qualifiers(tournament_id):
    """Seat group-stage qualifiers into the knockout bracket."""
    data = request.get_json(silent=True) or {}
    qualifier_ids = data.get('qualifiers')
    if not isinstance(qualifier_ids, list) or not qualifier_ids:
        return jsonify({'error': 'VALIDATION_ERROR', 'message': 'Provide a list of qualifier ids'}), 400
    record = storage.seat_qualifiers(tournament_id, qualifier_ids, DATA_DIR)
    return jsonify(record)


if __name__ == '__main__':
    app.run(debug=os.environ.get('FLASK_DEBUG') == '1')
