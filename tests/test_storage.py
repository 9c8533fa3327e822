"""
Tests for YAML tournament storage.
"""
import pytest
import sys
import os
import yaml

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import storage
from brackets.exceptions import BracketError, NotFoundError, PreconditionError, ResultError
from brackets.models import Participant
from brackets.seeding import make_participants
from brackets.validation import GROUP_STAGE, SINGLE_ELIMINATION


@pytest.fixture
def data_dir(tmp_path):
    return str(tmp_path / "data")


class TestCreateTournament:

    def test_single_elimination_record(self, data_dir, five_participants):
        record = storage.create_tournament("Spring Open", SINGLE_ELIMINATION, five_participants, data_dir)
        assert record['status'] == storage.STATUS_DRAFT
        assert record['format'] == SINGLE_ELIMINATION
        assert len(record['participants']) == 5
        assert len(record['matches']) == 7
        assert record['groups'] == []
        assert os.path.exists(os.path.join(data_dir, 'tournaments', f"{record['id']}.yaml"))

    def test_byes_advanced_on_create(self, data_dir, five_participants):
        record = storage.create_tournament("Spring Open", SINGLE_ELIMINATION, five_participants, data_dir)
        second_round = {m['id']: m for m in record['matches'] if m['round'] == 2}
        assert second_round['match-2-1']['participant2']['seed'] == 1
        assert second_round['match-2-2']['participant1']['seed'] == 2

    def test_group_stage_record(self, data_dir, sixteen_participants):
        record = storage.create_tournament("League", GROUP_STAGE, sixteen_participants, data_dir,
                                           qualifiers_per_group=2)
        assert record['qualifiers_per_group'] == 2
        assert len(record['groups']) == 4
        assert len(record['matches']) == 7

    def test_name_required(self, data_dir, five_participants):
        with pytest.raises(BracketError):
            storage.create_tournament("  ", SINGLE_ELIMINATION, five_participants, data_dir)

    def test_invalid_field_rejected(self, data_dir):
        field = [Participant("a", "A", 1), Participant("b", "B", 1)]
        with pytest.raises(PreconditionError):
            storage.create_tournament("Cup", SINGLE_ELIMINATION, field, data_dir)
        assert storage.list_tournaments(data_dir) == []

    def test_unseatable_qualifier_count_not_stored(self, data_dir):
        with pytest.raises(PreconditionError):
            storage.create_tournament("League", GROUP_STAGE, make_participants(12), data_dir,
                                      qualifiers_per_group=1)
        with pytest.raises(PreconditionError):
            storage.create_tournament("League", GROUP_STAGE, make_participants(4), data_dir,
                                      qualifiers_per_group=7)
        assert storage.list_tournaments(data_dir) == []


class TestLoadAndList:

    def test_roundtrip(self, data_dir, eight_participants):
        record = storage.create_tournament("Cup", SINGLE_ELIMINATION, eight_participants, data_dir)
        assert storage.load_tournament(record['id'], data_dir) == record

    def test_missing(self, data_dir):
        with pytest.raises(NotFoundError):
            storage.load_tournament("0" * 32, data_dir)

    def test_rejects_path_like_ids(self, data_dir):
        with pytest.raises(NotFoundError):
            storage.load_tournament("../settings", data_dir)

    def test_list_sorted_by_creation(self, data_dir, eight_participants):
        first = storage.create_tournament("First", SINGLE_ELIMINATION, eight_participants, data_dir)
        second = storage.create_tournament("Second", SINGLE_ELIMINATION, eight_participants, data_dir)
        listed = storage.list_tournaments(data_dir)
        assert [t['id'] for t in listed] == [first['id'], second['id']]
        assert listed[0]['participants'] == 8

    def test_list_empty_dir(self, data_dir):
        assert storage.list_tournaments(data_dir) == []

    def test_unreadable_file_raises(self, data_dir, eight_participants):
        record = storage.create_tournament("Cup", SINGLE_ELIMINATION, eight_participants, data_dir)
        path = os.path.join(data_dir, 'tournaments', f"{record['id']}.yaml")
        with open(path, 'w', encoding='utf-8') as f:
            f.write("id: [unclosed\n")
        with pytest.raises(BracketError):
            storage.load_tournament(record['id'], data_dir)
        assert storage.list_tournaments(data_dir) == []

    def test_incomplete_record_skipped(self, data_dir, eight_participants, caplog):
        record = storage.create_tournament("Cup", SINGLE_ELIMINATION, eight_participants, data_dir)
        for stub, content in (("a" * 32, {'id': "a" * 32}), ("b" * 32, ["not", "a", "record"])):
            with open(os.path.join(data_dir, 'tournaments', f"{stub}.yaml"), 'w', encoding='utf-8') as f:
                yaml.dump(content, f)
        with caplog.at_level('WARNING', logger='storage'):
            listed = storage.list_tournaments(data_dir)
        assert [t['id'] for t in listed] == [record['id']]
        assert "not a complete tournament record" in caplog.text

    def test_delete(self, data_dir, eight_participants):
        record = storage.create_tournament("Cup", SINGLE_ELIMINATION, eight_participants, data_dir)
        storage.delete_tournament(record['id'], data_dir)
        with pytest.raises(NotFoundError):
            storage.load_tournament(record['id'], data_dir)

    def test_duplicate_numbering_refused(self, data_dir, eight_participants):
        record = storage.create_tournament("Cup", SINGLE_ELIMINATION, eight_participants, data_dir)
        record['matches'][1]['match_number'] = record['matches'][0]['match_number']
        with pytest.raises(BracketError):
            storage.save_tournament(record, data_dir)


class TestResults:

    def test_result_advances_and_persists(self, data_dir, eight_participants):
        record = storage.create_tournament("Cup", SINGLE_ELIMINATION, eight_participants, data_dir)
        match = storage.record_match_result(record['id'], "match-1-1", "participant-2", data_dir, [2, 3])
        assert match['winner']['seed'] == 2
        assert match['scores'] == [2, 3]

        stored = storage.load_tournament(record['id'], data_dir)
        assert stored['status'] == storage.STATUS_IN_PROGRESS
        next_match = next(m for m in stored['matches'] if m['id'] == "match-2-1")
        assert next_match['participant1']['id'] == "participant-2"

    def test_completed_when_final_decided(self, data_dir):
        record = storage.create_tournament("Duel", SINGLE_ELIMINATION, make_participants(2), data_dir)
        storage.record_match_result(record['id'], "match-1-1", "participant-1", data_dir)
        assert storage.load_tournament(record['id'], data_dir)['status'] == storage.STATUS_COMPLETED

    def test_group_match_result(self, data_dir, sixteen_participants):
        record = storage.create_tournament("League", GROUP_STAGE, sixteen_participants, data_dir)
        group_match = record['groups'][0]['matches'][0]
        winner_id = group_match['participant2']['id']
        match = storage.record_match_result(record['id'], group_match['id'], winner_id, data_dir)
        assert match['winner']['id'] == winner_id
        stored = storage.load_tournament(record['id'], data_dir)
        assert stored['groups'][0]['matches'][0]['winner']['id'] == winner_id
        assert stored['status'] == storage.STATUS_IN_PROGRESS

    def test_unknown_match(self, data_dir, eight_participants):
        record = storage.create_tournament("Cup", SINGLE_ELIMINATION, eight_participants, data_dir)
        with pytest.raises(NotFoundError):
            storage.record_match_result(record['id'], "nope", "participant-1", data_dir)

    def test_invalid_winner_leaves_file_untouched(self, data_dir, eight_participants):
        record = storage.create_tournament("Cup", SINGLE_ELIMINATION, eight_participants, data_dir)
        with pytest.raises(ResultError):
            storage.record_match_result(record['id'], "match-1-1", "participant-5", data_dir)
        assert storage.load_tournament(record['id'], data_dir) == record

    def test_get_match(self, data_dir, sixteen_participants):
        record = storage.create_tournament("League", GROUP_STAGE, sixteen_participants, data_dir)
        match = storage.get_match(record['id'], "group-B-match-1", data_dir)
        assert match['round'] == 1
        assert storage.get_match(record['id'], "knockout-3-1", data_dir)['next_match_id'] is None


class TestQualifiers:

    def test_seat_qualifiers(self, data_dir, sixteen_participants):
        record = storage.create_tournament("League", GROUP_STAGE, sixteen_participants, data_dir)
        ids = [p['id'] for g in record['groups'] for p in g['participants'][:2]]
        updated = storage.seat_qualifiers(record['id'], ids, data_dir)
        first = next(m for m in updated['matches'] if m['id'] == "knockout-1-1")
        assert (first['participant1']['id'], first['participant2']['id']) == (ids[0], ids[1])

    def test_single_elimination_has_no_qualifiers(self, data_dir, eight_participants):
        record = storage.create_tournament("Cup", SINGLE_ELIMINATION, eight_participants, data_dir)
        with pytest.raises(BracketError):
            storage.seat_qualifiers(record['id'], ["participant-1", "participant-2"], data_dir)

    def test_unknown_qualifier(self, data_dir, sixteen_participants):
        record = storage.create_tournament("League", GROUP_STAGE, sixteen_participants, data_dir)
        with pytest.raises(NotFoundError):
            storage.seat_qualifiers(record['id'], ["ghost"] * 8, data_dir)
