"""Worker process that plays one script and prints the result as JSON.

Reads a single JSON object from stdin with shape
{"code": "...", "world": 0, "level": 0, "seed": null} and writes
{"result": {...play summary...}, "error": null} to stdout, or
{"result": null, "error": "..."} when the payload or level is bad.

The calling process enforces wall-clock timeouts and resource caps.
"""

import json
import sys
from typing import Any, Dict, Optional, Tuple

from .game import play_to_dict
from .levels import get_level


def handle(payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    try:
        level_def = get_level(int(payload.get("world", 0)), int(payload.get("level", 0)))
    except (LookupError, TypeError, ValueError) as e:
        return None, f"bad_level: {e}"
    return play_to_dict(level_def, str(payload.get("code", "")), payload.get("seed")), None


def main() -> None:
    raw = sys.stdin.read()
    try:
        payload = json.loads(raw)
    except ValueError as e:
        print(json.dumps({"result": None, "error": f"bad_payload: {e}"}))
        sys.exit(1)

    if not isinstance(payload, dict):
        print(json.dumps({"result": None, "error": "bad_payload: expected an object"}))
        sys.exit(1)

    res, err = handle(payload)
    print(json.dumps({"result": res, "error": err}))


if __name__ == "__main__":
    main()
