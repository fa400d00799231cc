import pytest
from sqlalchemy.exc import OperationalError

from duet import db
from duet.models import TurnTally
from duet.services.recording import increment_turn_count
from duet.services.session import PersistenceFailed


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert res.get_json() == {'message': 'Welcome to the Duet turn server!'}


def test_session_state_empty(client):
    res = client.get('/api/session/state')
    assert res.status_code == 200
    assert res.get_json() == {'ready': False, 'current_turn': 1, 'players': []}


def test_turn_count_unknown_user(client):
    res = client.get('/api/turns/nobody')
    assert res.status_code == 200
    assert res.get_json() == {'user_id': 'nobody', 'turn_count': 0}


def test_turn_count_blank_user(client):
    res = client.get('/api/turns/%20%20')
    assert res.status_code == 400


def test_increment_turn_count_creates_and_updates(flask_app):
    assert increment_turn_count('alice') == 1
    assert increment_turn_count('alice') == 2
    tally = TurnTally.query.filter_by(user_profile_id='alice').first()
    assert tally.to_dict() == {'user_id': 'alice', 'turn_count': 2}


def test_increment_turn_count_rolls_back_on_error(flask_app, monkeypatch):
    def _fail():
        raise OperationalError('UPDATE turn_tally', {}, Exception('database is locked'))

    monkeypatch.setattr(db.session, 'commit', _fail)
    with pytest.raises(PersistenceFailed) as info:
        increment_turn_count('alice')
    assert info.value.reason == 'database is locked'
    monkeypatch.undo()
    assert TurnTally.query.filter_by(user_profile_id='alice').first() is None


def test_sql_recorder_counts_turns(flask_app):
    recorder = flask_app.extensions['duet'].gateway
    recorder.record_turn('alice')
    recorder.record_turn('alice')
    assert recorder.turn_count('alice') == 2
    assert recorder.turn_count('bob') == 0


def test_increment_turn_count_ignores_stale_reads(flask_app):
    recorder = flask_app.extensions['duet'].gateway
    recorder.record_turn('alice')
    with flask_app.app_context():
        # This session holds alice's row from before the next increment lands
        stale = TurnTally.query.filter_by(user_profile_id='alice').first()
        assert stale.turn_count == 1
        recorder.record_turn('alice')
        assert increment_turn_count('alice') == 3
    assert recorder.turn_count('alice') == 3


def test_increment_turn_count_retries_when_row_appears(flask_app, monkeypatch):
    recorder = flask_app.extensions['duet'].gateway
    real_execute = db.session.execute
    interleaved = []

    def _execute(statement, *args, **kwargs):
        result = real_execute(statement, *args, **kwargs)
        if not interleaved:
            # Another recording task creates the row right after our update missed it
            interleaved.append(statement)
            recorder.record_turn('alice')
        return result

    monkeypatch.setattr(db.session, 'execute', _execute)
    assert increment_turn_count('alice') == 2
    monkeypatch.undo()
    assert recorder.turn_count('alice') == 2
