# vme/services/probe/ffprobe_adapter.py
from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from vme.common.logging import get_logger
from vme.common.probe.ffprobe_helpers import build_ffprobe_cmd, run_ffprobe
from vme.common.settings import get_settings
from vme.domain.entities.probe import RawFormat, RawProbeResult, RawStream
from vme.domain.errors import ProbeExecutionError, ProbeParseError
from vme.domain.ports.probe import MediaProbePort

logger = get_logger(__name__)


class FFprobeAdapter(MediaProbePort):
    """
    Infrastructure adapter implementing MediaProbePort using `ffprobe`.
    One call, no retry: a failed probe ends the extraction.
    """

    def __init__(self, ffprobe_bin: Optional[str] = None, timeout_sec: Optional[int] = None):
        cfg = get_settings().ffprobe
        candidate = ffprobe_bin or cfg.bin or "ffprobe"
        # bare names are looked up on PATH; explicit paths must exist
        resolved = shutil.which(candidate)
        if not resolved:
            raise ProbeExecutionError(
                f"{candidate} not found or not executable; install ffmpeg or set VME_FFPROBE__BIN."
            )

        self.ffprobe_bin = resolved
        self.timeout_sec = timeout_sec if timeout_sec is not None else cfg.timeout_sec
        self.log_level = cfg.log_level

    # ---- Port API -------------------------------------------------------------
    def probe(self, path: Path) -> RawProbeResult:
        if not path:
            raise ProbeExecutionError("No path provided to probe().")

        cmd = build_ffprobe_cmd(path, ffprobe_bin=self.ffprobe_bin, log_level=self.log_level)
        data = run_ffprobe(cmd, timeout=self.timeout_sec)
        result = parse_ffprobe_json(data)
        logger.debug(
            "probed %s: format=%s streams=%d tags=%d",
            path, result.format.format_name, len(result.streams), len(result.format.tags),
        )
        return result


# ---- Parsing helpers ----------------------------------------------------------
def parse_ffprobe_json(data: Mapping[str, Any]) -> RawProbeResult:
    """
    Map an ffprobe JSON document (format + streams) onto RawProbeResult.
    Safe to call in unit tests with fixture JSON.
    """
    if not isinstance(data, Mapping):
        raise ProbeParseError("ffprobe output is not a JSON object")

    fmt = data.get("format")
    if not isinstance(fmt, Mapping):
        raise ProbeParseError("ffprobe output has no 'format' object")

    streams = data.get("streams")
    if streams is None:
        streams = []
    if not isinstance(streams, list):
        raise ProbeParseError("ffprobe 'streams' is not a list")

    return RawProbeResult(
        format=RawFormat(
            filename=_text(fmt, "filename"),
            duration=_text(fmt, "duration"),
            size=_text(fmt, "size"),
            bit_rate=_text(fmt, "bit_rate"),
            format_name=_text(fmt, "format_name"),
            tags=_tags(fmt.get("tags")),
        ),
        streams=tuple(_stream(i, s) for i, s in enumerate(streams)),
    )


def _stream(index: int, s: Any) -> RawStream:
    if not isinstance(s, Mapping):
        raise ProbeParseError(f"stream #{index} is not an object")
    return RawStream(
        codec_type=_text(s, "codec_type"),
        codec_name=_text(s, "codec_name"),
        width=_dimension(s, "width", index),
        height=_dimension(s, "height", index),
    )


def _text(obj: Mapping[str, Any], key: str) -> str:
    val = obj.get(key)
    if val is None:
        return ""
    if isinstance(val, (str, int, float)) and not isinstance(val, bool):
        return str(val)
    raise ProbeParseError(f"field {key!r} has unexpected type {type(val).__name__}")


def _dimension(obj: Mapping[str, Any], key: str, index: int) -> Optional[int]:
    val = obj.get(key)
    if val is None:
        return None
    if isinstance(val, bool) or not isinstance(val, int):
        raise ProbeParseError(f"stream #{index} {key!r} is not an integer: {val!r}")
    return val


def _tags(raw: Any) -> Dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ProbeParseError("format 'tags' is not an object")
    out: Dict[str, str] = {}
    for k, v in raw.items():
        if v is None:
            continue
        if isinstance(v, (dict, list)):
            raise ProbeParseError(f"tag {k!r} is not a scalar value")
        out[str(k)] = str(v)
    return out
