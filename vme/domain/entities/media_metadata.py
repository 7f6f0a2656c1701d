# vme/domain/entities/media_metadata.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class MetadataTag:
    name: str
    value: str


@dataclass(frozen=True)
class StreamInfo:
    index: int
    type: str
    codec: str
    resolution: str = ""  # "WIDTHxHEIGHT" for video streams only

    def __post_init__(self):
        if self.index < 0:
            raise ValueError("stream index must be >= 0")


@dataclass(frozen=True)
class FileInfo:
    filename: str  # base name, no directory
    size: str
    format: str


@dataclass(frozen=True)
class MovieInfo:
    title: str = ""
    duration: str = ""
    tags: Tuple[MetadataTag, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "tags", tuple(self.tags))


@dataclass(frozen=True)
class TrackInfo:
    bit_rate: str = ""
    streams: Tuple[StreamInfo, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "streams", tuple(self.streams))


@dataclass(frozen=True)
class MediaMetadata:
    """
    Normalized, leveled metadata of one media file.

    `file_info` is always present. `movie_info` and `track_info` are None when
    the extraction level did not ask for them, which keeps "not requested"
    apart from "requested but empty".
    """
    file_info: FileInfo
    movie_info: Optional[MovieInfo] = None
    track_info: Optional[TrackInfo] = None
