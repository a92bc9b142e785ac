#!/usr/bin/env python3
"""
Play a DragonScript battle plan from the command line.

Usage (from the repository root):
  python -m scripts.play plan.ds --world 2 --level 0
  python -m scripts.play plan.ds --world 2 --level 1 --subprocess --timeout 1
  python -m scripts.play --solution --world 2 --level 3

Prints the play summary as JSON. Exit status is 0 when the dragon was
slain, 1 otherwise.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from backend.game.game import play_to_dict
from backend.game.levels import get_level
from backend.game.subprocess_runner import run_play_in_subprocess


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Play a DragonScript battle plan")
    p.add_argument("file", nargs="?", help="Script file to play ('-' reads stdin)")
    p.add_argument("--world", type=int, default=0, help="World index in the level catalog")
    p.add_argument("--level", type=int, default=0, help="Level index inside the world")
    p.add_argument("--seed", type=int, default=None, help="Seed for random dragon placement")
    p.add_argument("--solution", action="store_true", help="Play the level's bundled solution")
    p.add_argument("--subprocess", action="store_true", help="Run in a worker process with a timeout")
    p.add_argument("--timeout", type=float, default=2.0, help="Worker timeout in seconds")
    p.add_argument("--renders", action="store_true", help="Include render entries in the output")
    p.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    return p.parse_args(argv)


def read_code(args: argparse.Namespace) -> str:
    if args.solution:
        solution = get_level(args.world, args.level).solution
        if solution is None:
            raise SystemExit(f"Level {args.world}/{args.level} has no bundled solution")
        return solution
    if not args.file:
        raise SystemExit("A script file is required unless --solution is given")
    if args.file == "-":
        return sys.stdin.read()
    return Path(args.file).read_text(encoding="utf-8")


def play(args: argparse.Namespace, code: str) -> Dict[str, Any]:
    if not args.subprocess:
        return play_to_dict(get_level(args.world, args.level), code, args.seed)
    rc, out, err = run_play_in_subprocess(code, args.world, args.level, seed=args.seed, timeout_s=args.timeout)
    if rc == -1:
        return {"state": "ERROR", "message": f"Timed out after {args.timeout}s"}
    if rc != 0:
        return {"state": "ERROR", "message": err.strip()}
    payload = json.loads(out)
    if payload.get("error"):
        return {"state": "ERROR", "message": payload["error"]}
    return payload["result"]


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))
    try:
        get_level(args.world, args.level)
    except LookupError as e:
        raise SystemExit(str(e))

    result = play(args, read_code(args))
    if not args.renders:
        result.pop("renders", None)
    print(json.dumps(result, indent=2))
    return 0 if result.get("state") == "WON" else 1


if __name__ == "__main__":
    sys.exit(main())
