# vme/common/probe/ffprobe_helpers.py
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
import json
import shlex
import subprocess

from vme.common.logging import get_logger
from vme.domain.errors import ProbeExecutionError, ProbeParseError
logger = get_logger(__name__)

def build_ffprobe_cmd(
    input_path: str | Path,
    extra_args: Iterable[str] | None = None,
    *,
    ffprobe_bin: str = "ffprobe",
    log_level: str = "error",
) -> List[str]:
    """
    Build an ffprobe command that emits the format block and every stream as JSON.
    """
    if isinstance(input_path, Path):
        input_path = str(input_path)
    base = [
        ffprobe_bin,
        "-v", log_level,
        "-show_streams",
        "-show_format",
        "-print_format", "json",
        "--",  # Stop option parsing in case of weird filenames
        input_path,
    ]
    if extra_args:
        # Insert before "--" so they are still read as options
        base = base[:-2] + list(extra_args) + base[-2:]
    return base

def run_ffprobe(cmd: List[str], timeout: Optional[float] = None) -> Dict[str, Any]:
    """
    Execute ffprobe and return its parsed JSON document.
    Raises ProbeExecutionError when the tool cannot run or fails, and
    ProbeParseError when stdout is not a JSON object.
    """
    logger.debug("ffprobe cmd: %s", " ".join(shlex.quote(p) for p in cmd))
    try:
        cp = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,  # rc handled below so stderr is attached
        )
    except subprocess.TimeoutExpired as e:
        raise ProbeExecutionError(f"ffprobe timed out after {timeout}s", stderr=str(e)) from e
    except OSError as e:
        raise ProbeExecutionError(f"failed to execute {cmd[0]}", stderr=str(e)) from e

    if cp.returncode != 0:
        raise ProbeExecutionError("ffprobe failed", stderr=cp.stderr, rc=cp.returncode)

    try:
        data = json.loads(cp.stdout or "")
    except json.JSONDecodeError as e:
        logger.debug("unparseable ffprobe output: %r", (cp.stdout or "")[:200])
        raise ProbeParseError(f"ffprobe produced invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ProbeParseError("ffprobe output is not a JSON object")
    return data
