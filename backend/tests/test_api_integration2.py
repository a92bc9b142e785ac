from fastapi.testclient import TestClient

from backend.app.main import app


def test_runs_are_filtered_by_script(tmp_path, monkeypatch):
    monkeypatch.setenv('DRAGONSCRIPT_DB_PATH', str(tmp_path / 'runs.db'))
    with TestClient(app) as client:
        a = client.post('/save', json={'title': 'a', 'code': 'knight.move(EAST);'}).json()['script_id']
        b = client.post('/save', json={'title': 'b', 'code': 'oops(', 'world': 2, 'level': 1}).json()['script_id']

        client.post('/play', json={'code': 'knight.move(EAST);', 'script_id': a})
        client.post('/play', json={'code': 'oops(', 'world': 2, 'level': 1, 'script_id': b})

        runs_a = client.get(f'/stats?script_id={a}').json()
        runs_b = client.get(f'/stats?script_id={b}').json()
        assert [r['state'] for r in runs_a] == ['LOST']
        assert [r['state'] for r in runs_b] == ['ERROR']
        assert (runs_b[0]['world'], runs_b[0]['level']) == (2, 1)
        assert len(client.get('/stats').json()) == 2

        assert [s['title'] for s in client.get('/scripts?world=2').json()] == ['b']
    assert (tmp_path / 'runs.db').exists()
