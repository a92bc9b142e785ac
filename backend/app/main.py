"""FastAPI application entrypoints for DragonScript.

Handlers are kept small: each `/play` request builds a fresh `Game` (or a
fresh worker process) so no interpreter state is shared between requests.
Server-side caps are enforced so clients cannot raise the runaway-script
timeout.
"""

import json
import logging
import time
from typing import Any, Dict, Optional

from fastapi import FastAPI
from pydantic import BaseModel

from .. import db
from ..dragonscript.parser import parse
from ..game.game import determine_action_count, play_to_dict
from ..game.levels import WORLDS, get_level
from ..game.subprocess_runner import run_play_in_subprocess

logger = logging.getLogger(__name__)

app = FastAPI(title="DragonScript API", version="0.1")

# Server-side ceilings for per-request settings. Plays run in a worker
# process by default so a script that never terminates is killed.
DEFAULT_SETTINGS: Dict[str, Any] = {
    "use_subprocess": True,
    "timeout_s": 2.0,
    "seed": None,
}
MIN_TIMEOUT_S = 0.5


def _cap_settings(settings: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Enforce server-side caps for per-play tunables.

    Clients may send a `settings` object. `timeout_s` is clamped between
    `MIN_TIMEOUT_S` and the server default and `seed` passes through.
    `use_subprocess` is server-side only; clients cannot turn isolation off.
    """
    safe = dict(DEFAULT_SETTINGS)
    if not settings:
        return safe
    timeout_s = float(settings.get("timeout_s", safe["timeout_s"]))
    safe["timeout_s"] = max(MIN_TIMEOUT_S, min(timeout_s, DEFAULT_SETTINGS["timeout_s"]))
    if settings.get("seed") is not None:
        safe["seed"] = int(settings["seed"])
    return safe


def _errors_for(result: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Map a play summary onto the structured `errors` payload."""
    state = result.get("state")
    if result.get("parse_errors"):
        return {
            "code": "SYNTAX_ERROR",
            "message": result["parse_errors"][0],
            "details": result["parse_errors"],
        }
    if result.get("runtime_error"):
        return {"code": "RUNTIME_ERROR", "message": result["runtime_error"]}
    if state == "TOO_MANY_ACTIONS":
        return {"code": "TOO_MANY_ACTIONS", "message": result.get("message")}
    return None


def _failure(code: str, message: str, start: float) -> Dict[str, Any]:
    return {
        "state": "ERROR",
        "message": message,
        "actions": None,
        "renders": [],
        "warnings": [],
        "duration_ms": int((time.time() - start) * 1000),
        "errors": {"code": code, "message": message},
    }


def _play_in_subprocess(code: str, world: int, level: int, settings: Dict[str, Any]) -> Dict[str, Any]:
    # the CPU rlimit sits past the wall clock so the timeout fires first
    rc, out, err = run_play_in_subprocess(
        code,
        world,
        level,
        seed=settings.get("seed"),
        timeout_s=settings["timeout_s"],
        cpu_seconds=int(settings["timeout_s"]) + 1,
    )
    if rc < 0:
        raise TimeoutError(f"Play exceeded {settings['timeout_s']}s")
    if rc != 0:
        raise RuntimeError(err or f"worker exited with {rc}")
    payload = json.loads(out)
    if payload.get("error"):
        raise RuntimeError(payload["error"])
    return payload["result"]


@app.on_event('startup')
def startup():
    """FastAPI startup event: initialize the database schema."""
    db.init_db()


class PlayRequest(BaseModel):
    """Request body for `/play` and `/check`.

    Fields:
        code: DragonScript source text (the battle plan).
        world, level: indices into the level catalog.
        settings: optional tunables; capped server-side.
        script_id: optional id to associate this play with a saved script.
    """
    code: str
    world: int = 0
    level: int = 0
    settings: Optional[Dict[str, Any]] = None
    script_id: Optional[int] = None


@app.get('/levels')
async def list_levels():
    return [
        {
            "world": w,
            "name": world.name,
            "color": world.color,
            "levels": [
                {"level": i, "actions": lvl.actions, "has_mage": lvl.mage is not None}
                for i, lvl in enumerate(world.levels)
            ],
        }
        for w, world in enumerate(WORLDS)
    ]


@app.get('/levels/{world}/{level}')
async def level_detail(world: int, level: int):
    try:
        return get_level(world, level).to_dict()
    except LookupError as e:
        return {"error": {"code": "LEVEL_NOT_FOUND", "message": str(e)}}


@app.post('/check')
async def check_code(req: PlayRequest):
    """Parse a battle plan without playing it."""
    try:
        limit = get_level(req.world, req.level).actions
    except LookupError as e:
        return {"error": {"code": "LEVEL_NOT_FOUND", "message": str(e)}}
    program, errors = parse(req.code)
    return {
        "errors": errors,
        "program": None if errors else str(program),
        "actions": determine_action_count(req.code),
        "limit": limit,
    }


@app.post('/play')
def play(req: PlayRequest):
    """Play a battle plan against a level.

    Runs in a worker process with a wall-clock timeout unless the server
    disables `use_subprocess`. Exceptions become a SERVER_ERROR (or TIMEOUT)
    payload so callers always get the same shape.
    Finished plays are persisted; persistence failures become warnings.
    """
    start = time.time()
    try:
        level_def = get_level(req.world, req.level)
    except LookupError as e:
        return _failure("LEVEL_NOT_FOUND", str(e), start)

    try:
        capped = _cap_settings(req.settings or {})
        if capped["use_subprocess"]:
            result = _play_in_subprocess(req.code, req.world, req.level, capped)
        else:
            result = play_to_dict(level_def, req.code, capped.get("seed"))
    except TimeoutError as e:
        return _failure("TIMEOUT", str(e), start)
    except Exception as e:
        logger.exception("play failed")
        return _failure("SERVER_ERROR", str(e), start)

    result["errors"] = _errors_for(result)
    result["warnings"] = []
    result["duration_ms"] = int((time.time() - start) * 1000)

    try:
        db.save_run(
            req.script_id,
            req.world,
            req.level,
            result["state"],
            result.get("actions"),
            result["duration_ms"],
            [r["body"] for r in result.get("renders", []) if r.get("type") == "DIALOG"],
        )
    except Exception as e:
        logger.warning("failed to persist run: %s", e)
        result["warnings"].append(f"Failed to persist run: {e}")

    return result


class SaveScriptRequest(BaseModel):
    title: str
    code: str
    world: int = 0
    level: int = 0


@app.post('/save')
async def save_script(req: SaveScriptRequest):
    try:
        script_id = db.save_script(req.title, req.code, req.world, req.level)
    except Exception as e:
        return {'error': str(e)}
    return {'script_id': script_id}


@app.get('/scripts')
async def list_scripts(world: Optional[int] = None):
    return db.list_scripts(world)


@app.get('/scripts/{script_id}')
async def get_script(script_id: int):
    s = db.get_script(script_id)
    if not s:
        return {'error': 'not found'}
    return s


@app.get('/stats')
async def list_stats(script_id: Optional[int] = None):
    return db.list_runs(script_id)
