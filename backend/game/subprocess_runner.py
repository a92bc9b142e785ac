"""Run a play inside a short-lived worker process.

The evaluator has no step budget, so a script such as
``while(not knight.isNextTo(EAST, dragon)) {}`` never ends on its own. This
module is the host-side guard: it launches `_subprocess_worker` (a simple
JSON-over-stdin/stdout protocol), enforces a wall-clock timeout and, on
POSIX, applies CPU-seconds and address-space limits to the child.

`run_play_in_subprocess` returns (returncode, stdout, stderr). A returncode
of -1 means the worker was killed because the timeout expired.

Note: this is not a substitute for container/VM isolation. It bounds
runaway scripts; the language itself cannot reach the host.
"""

import json
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

# repository root, so `python -m backend.game._subprocess_worker` resolves
PROJECT_ROOT = Path(__file__).resolve().parents[2]
WORKER_MODULE = "backend.game._subprocess_worker"


def _make_posix_preexec(cpu_seconds: Optional[int], mem_limit_mb: Optional[int]):
    """Return a preexec_fn applying resource limits on POSIX systems.

    If the `resource` module is unavailable the function is a no-op.
    """
    def preexec():
        try:
            import resource

            if cpu_seconds is not None:
                resource.setrlimit(resource.RLIMIT_CPU, (int(cpu_seconds), int(cpu_seconds)))

            if mem_limit_mb is not None:
                mem_bytes = int(mem_limit_mb) * 1024 * 1024
                resource.setrlimit(resource.RLIMIT_AS, (mem_bytes, mem_bytes))

            try:
                os.setsid()
            except OSError:
                pass
        except ImportError:
            return

    return preexec


def run_play_in_subprocess(
    code: str,
    world: int,
    level: int,
    *,
    seed: Optional[int] = None,
    timeout_s: float = 2,
    cpu_seconds: Optional[int] = 2,
    mem_limit_mb: Optional[int] = 512,
) -> Tuple[int, str, str]:
    """Play `code` on level (`world`, `level`) in the worker process.

    Parameters:
      - timeout_s: wall-clock timeout for the whole operation (seconds).
      - cpu_seconds: optional RLIMIT_CPU (seconds) applied on POSIX.
      - mem_limit_mb: optional RLIMIT_AS (MB) applied on POSIX.

    Returns (returncode, stdout, stderr); (-1, "", "TIMEOUT") on timeout.
    """
    # keep the child's environment minimal; PATH lets the interpreter find
    # shared libraries
    env = {"PATH": os.environ.get("PATH", "")}

    popen_kwargs = dict(
        args=[sys.executable, "-m", WORKER_MODULE],
        cwd=str(PROJECT_ROOT),
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        env=env,
        close_fds=True,
    )
    if os.name != "nt":
        popen_kwargs["preexec_fn"] = _make_posix_preexec(cpu_seconds, mem_limit_mb)

    proc = subprocess.Popen(**popen_kwargs)

    payload = json.dumps({"code": code, "world": world, "level": level, "seed": seed})
    try:
        out, err = proc.communicate(payload, timeout=timeout_s)
    except subprocess.TimeoutExpired:
        logger.warning("play worker exceeded %.2fs; killed", timeout_s)
        proc.kill()
        proc.communicate()
        return -1, "", "TIMEOUT"

    return proc.returncode, out or "", err or ""
