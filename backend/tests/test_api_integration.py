"""Save / play / stats round trip against a throwaway sqlite file."""

import os
import tempfile

import pytest
from fastapi.testclient import TestClient

from backend import db
from backend.app.main import app


@pytest.fixture(scope="module")
def client():
    fd, path = tempfile.mkstemp(prefix="dragonscript_test_", suffix=".db")
    os.close(fd)
    previous = os.environ.get('DRAGONSCRIPT_DB_PATH')
    os.environ['DRAGONSCRIPT_DB_PATH'] = path
    db.init_db()
    with TestClient(app) as client:
        yield client
    if previous is None:
        os.environ.pop('DRAGONSCRIPT_DB_PATH', None)
    else:
        os.environ['DRAGONSCRIPT_DB_PATH'] = previous
    try:
        os.remove(path)
    except OSError:
        pass


def test_save_and_play_and_stats(client):
    code = 'knight.move(EAST);\nknight.attack(EAST);'
    save_resp = client.post('/save', json={'title': 'first', 'code': code, 'world': 0, 'level': 0})
    assert save_resp.status_code == 200
    sid = save_resp.json()['script_id']

    scripts = client.get('/scripts').json()
    assert any(s['script_id'] == sid for s in scripts)
    assert client.get('/scripts?world=2').json() == []

    one = client.get(f'/scripts/{sid}').json()
    assert one['code_text'] == code
    assert (one['world'], one['level']) == (0, 0)

    body = client.post('/play', json={'code': code, 'script_id': sid}).json()
    assert body['state'] == 'WON'
    assert body['warnings'] == []

    runs = client.get(f'/stats?script_id={sid}').json()
    assert len(runs) == 1
    assert runs[0]['state'] == 'WON'
    assert runs[0]['actions'] == 2
    assert runs[0]['messages'] == []


def test_failed_play_persists_its_dialog(client):
    client.post('/play', json={'code': 'knight.move(EAST);'})
    runs = client.get('/stats').json()
    lost = [r for r in runs if r['state'] == 'LOST']
    assert lost
    assert lost[0]['messages'][0].startswith("You didn't slay the dragon!")


def test_missing_script(client):
    assert client.get('/scripts/999999').json() == {'error': 'not found'}
