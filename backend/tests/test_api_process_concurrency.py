import multiprocessing
import os
import random
import time

import pytest

requests = pytest.importorskip("requests")

SCRIPTS = [
    ("knight.move(EAST);\nknight.attack(EAST);", "WON"),
    ("knight.move(EAST);", "LOST"),
    ("knight.move(EAST); knight.move(WEST); knight.move(EAST);", "TOO_MANY_ACTIONS"),
    ("if(knight.isNextTo(EAST, dragon)) {", "ERROR"),
    ("knight.fly(NORTH);", "ERROR"),
]


def _start_server(port: int):
    # run uvicorn in this process hosting the FastAPI app
    import uvicorn
    from backend.app import main

    uvicorn.run(main.app, host="127.0.0.1", port=port, log_level="warning")


def _worker(port: int, n_requests: int, q: multiprocessing.Queue, seed: int):
    random.seed(seed)
    sess = requests.Session()
    for _ in range(n_requests):
        code, expected = random.choice(SCRIPTS)
        try:
            r = sess.post(f"http://127.0.0.1:{port}/play", json={"code": code}, timeout=10)
            q.put((r.status_code, expected, r.json()))
        except Exception as e:
            q.put(("ERR", expected, str(e)))


@pytest.mark.stress
def test_process_level_concurrency_stress():
    port = int(os.getenv("DRAGONSCRIPT_STRESS_PORT", "8001"))
    server = multiprocessing.Process(target=_start_server, args=(port,), daemon=True)
    server.start()

    ready = False
    for _ in range(80):
        try:
            r = requests.get(f"http://127.0.0.1:{port}/docs", timeout=1)
            if r.status_code == 200:
                ready = True
                break
        except requests.RequestException:
            time.sleep(0.125)
    if not ready:
        server.terminate()
        pytest.skip("uvicorn server failed to start")

    n_workers = int(os.getenv("DRAGONSCRIPT_STRESS_WORKERS", "8"))
    n_requests_per_worker = int(os.getenv("DRAGONSCRIPT_STRESS_REQS_PER_WORKER", "10"))
    q: multiprocessing.Queue = multiprocessing.Queue()
    workers = [
        multiprocessing.Process(target=_worker, args=(port, n_requests_per_worker, q, i))
        for i in range(n_workers)
    ]
    for w in workers:
        w.start()
    for w in workers:
        w.join(timeout=30)

    results = []
    while not q.empty():
        results.append(q.get())

    server.terminate()
    server.join(timeout=5)

    expected = n_workers * n_requests_per_worker
    assert len(results) == expected, f"expected {expected} results, got {len(results)}"
    for status, state, body in results:
        assert status == 200, f"bad status: {status}"
        assert body["state"] == state
        assert "renders" in body and "warnings" in body and "errors" in body
