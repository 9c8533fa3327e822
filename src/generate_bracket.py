import argparse
import os
import random
import sys

import yaml

from brackets.elimination import generate_single_elimination_bracket, round_name, rounds_of
from brackets.exceptions import BracketError
from brackets.group_stage import DEFAULT_QUALIFIERS_PER_GROUP, generate_group_stage
from brackets.models import Participant
from brackets.seeding import make_participants, shuffle_participants
from brackets.validation import FORMATS, GROUP_STAGE, SINGLE_ELIMINATION, validate_participants


def load_participants(file_path):
    """
    Load participants from YAML.

    The file holds either a list of names (seeded in listed order) or a list
    of {id, name, seed} mappings.
    """
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file) or []

    if not isinstance(data, list):
        raise ValueError("expected a list of names or {id, name, seed} mappings")
    if all(isinstance(entry, str) for entry in data):
        return make_participants(len(data), data)

    participants = []
    for index, entry in enumerate(data, start=1):
        if not isinstance(entry, dict):
            raise ValueError(f"entry {index} is neither a name nor a mapping: {entry!r}")
        participants.append(Participant(
            id=str(entry.get('id', f'participant-{index}')),
            name=entry.get('name', f'Participant {index}'),
            seed=entry.get('seed', index),
        ))
    return participants


def describe(participant):
    if participant is None:
        return "TBD"
    return f"{participant.seed}. {participant.name}"


def format_match(match):
    if match.is_bye:
        return f"{describe(match.participant1)} - BYE"
    return f"{describe(match.participant1)} vs {describe(match.participant2)}"


def print_bracket(matches):
    first_section = True
    for number, round_matches in rounds_of(matches).items():
        if not first_section:
            print()
        print(f"# Round {number} ({round_name(len(round_matches))})")
        for match in round_matches:
            print(f"  M{match.match_number}: {format_match(match)}")
        first_section = False


def print_group_stage(stage):
    for group in stage.groups:
        print(f"# Group {group.name}")
        for match in group.matches:
            print(f"  M{match.match_number}: {format_match(match)}")
        print()
    print(f"# Knockout ({stage.total_qualifiers} qualifiers, {stage.qualifiers_per_group} per group)")
    if stage.knockout_bracket:
        print_bracket(stage.knockout_bracket)
    else:
        print("  No knockout stage.")


def main(argv=None):
    script_dir = os.path.dirname(__file__)
    base_dir = os.path.dirname(script_dir)

    parser = argparse.ArgumentParser(description="Print a tournament bracket for a list of participants.")
    parser.add_argument('participants_file', nargs='?',
                        default=os.path.join(base_dir, 'data', 'participants.yaml'))
    parser.add_argument('--format', choices=FORMATS, default=SINGLE_ELIMINATION)
    parser.add_argument('--qualifiers', type=int, default=DEFAULT_QUALIFIERS_PER_GROUP,
                        help='qualifiers per group for the knockout stage')
    parser.add_argument('--shuffle', action='store_true', help='randomise seeds before generating')
    parser.add_argument('--seed', type=int, default=None, help='random seed used with --shuffle')
    args = parser.parse_args(argv)

    try:
        participants = load_participants(args.participants_file)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: could not read {args.participants_file}: {e}", file=sys.stderr)
        return 1

    if args.shuffle:
        participants = shuffle_participants(participants, random.Random(args.seed))

    try:
        validate_participants(participants, args.format)
        if args.format == GROUP_STAGE:
            print_group_stage(generate_group_stage(participants, args.qualifiers))
        else:
            print_bracket(generate_single_elimination_bracket(participants))
    except BracketError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 2

    return 0


if __name__ == '__main__':
    sys.exit(main())
