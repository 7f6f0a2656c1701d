# vme/domain/entities/probe.py
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class RawFormat:
    """
    The `format` block of an ffprobe run, kept as close to the tool's output
    as possible. Numeric values stay textual; "" means ffprobe omitted them.
    """
    filename: str = ""
    duration: str = ""
    size: str = ""
    bit_rate: str = ""
    format_name: str = ""
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # read-only view so a frozen result cannot be altered through its tags
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))


@dataclass(frozen=True)
class RawStream:
    codec_type: str = ""
    codec_name: str = ""
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass(frozen=True)
class RawProbeResult:
    """Framework-free result of one ffprobe call. Lives only for one extraction."""
    format: RawFormat = field(default_factory=RawFormat)
    streams: Tuple[RawStream, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "streams", tuple(self.streams))
