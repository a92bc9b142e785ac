import json
import logging
import os
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path(__file__).parent / 'dragonscript.db'


def db_path() -> Path:
    """Return the sqlite file in use.

    `DRAGONSCRIPT_DB_PATH` overrides the default location; it is read on
    every call so tests can point the app at a temporary file.
    """
    return Path(os.environ.get('DRAGONSCRIPT_DB_PATH') or DEFAULT_DB_PATH)


def get_conn():
    """Return a new sqlite3 connection returning rows as dict-like objects.

    A fresh connection is created per call; plays are short and the app is
    small, so there is no pool.
    """
    conn = sqlite3.connect(str(db_path()))
    conn.row_factory = sqlite3.Row
    return conn


def init_db():
    """Ensure the database file and required tables exist.

    Idempotent and safe to call at application startup.
    """
    db_path().parent.mkdir(parents=True, exist_ok=True)
    conn = get_conn()
    cur = conn.cursor()
    cur.execute('''
    CREATE TABLE IF NOT EXISTS Scripts (
      script_id INTEGER PRIMARY KEY,
      title TEXT NOT NULL,
      code_text TEXT NOT NULL,
      world INTEGER NOT NULL,
      level INTEGER NOT NULL,
      created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    ''')
    cur.execute('''
    CREATE TABLE IF NOT EXISTS Runs (
      run_id INTEGER PRIMARY KEY,
      script_id INTEGER NULL,
      world INTEGER NOT NULL,
      level INTEGER NOT NULL,
      state TEXT NOT NULL,
      actions INTEGER,
      duration_ms INTEGER,
      messages TEXT,
      created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    ''')
    conn.commit()
    conn.close()


def save_script(title: str, code_text: str, world: int, level: int) -> int:
    """Persist a battle plan for a level and return its script_id."""
    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        'INSERT INTO Scripts (title, code_text, world, level) VALUES (?, ?, ?, ?)',
        (title, code_text, world, level),
    )
    script_id = cur.lastrowid
    conn.commit()
    conn.close()
    return script_id


def list_scripts(world: Optional[int] = None) -> List[Dict[str, Any]]:
    """Return saved scripts (without code) ordered by newest first."""
    conn = get_conn()
    cur = conn.cursor()
    if world is not None:
        cur.execute(
            'SELECT script_id, title, world, level, created_at FROM Scripts '
            'WHERE world = ? ORDER BY created_at DESC, script_id DESC',
            (world,),
        )
    else:
        cur.execute(
            'SELECT script_id, title, world, level, created_at FROM Scripts '
            'ORDER BY created_at DESC, script_id DESC'
        )
    rows = cur.fetchall()
    conn.close()
    return [dict(r) for r in rows]


def get_script(script_id: int) -> Optional[Dict[str, Any]]:
    """Fetch a single script by id, returning None if not found."""
    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        'SELECT script_id, title, code_text, world, level, created_at FROM Scripts '
        'WHERE script_id = ?',
        (script_id,),
    )
    row = cur.fetchone()
    conn.close()
    return dict(row) if row else None


def save_run(
    script_id: Optional[int],
    world: int,
    level: int,
    state: str,
    actions: Optional[int],
    duration_ms: Optional[int],
    messages: Optional[List[str]] = None,
) -> int:
    """Persist a play outcome and return its run_id.

    `messages` (the dialog texts shown to the player) is JSON-serialized into
    the `messages` TEXT column. Callers treat failures here as non-fatal.
    """
    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        """
        INSERT INTO Runs (
            script_id, world, level, state, actions, duration_ms, messages
        ) VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (script_id, world, level, state, actions, duration_ms, json.dumps(messages or [])),
    )
    run_id = cur.lastrowid
    conn.commit()
    conn.close()
    return run_id


def list_runs(script_id: Optional[int] = None) -> List[Dict[str, Any]]:
    """List run rows, optionally filtering by script_id.

    Each returned dict has `messages` parsed back into a list.
    """
    conn = get_conn()
    cur = conn.cursor()
    columns = "run_id, script_id, world, level, state, actions, duration_ms, messages, created_at"
    if script_id:
        cur.execute(
            f"SELECT {columns} FROM Runs WHERE script_id = ? ORDER BY created_at DESC, run_id DESC",
            (script_id,),
        )
    else:
        cur.execute(f"SELECT {columns} FROM Runs ORDER BY created_at DESC, run_id DESC")
    rows = cur.fetchall()
    conn.close()
    out = []
    for r in rows:
        d = dict(r)
        try:
            d['messages'] = json.loads(d.get('messages') or '[]')
        except ValueError:
            logger.warning("run %s has corrupt messages JSON", d.get('run_id'))
            d['messages'] = []
        out.append(d)
    return out
