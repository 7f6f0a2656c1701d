# vme/domain/policies/normalizer.py
from __future__ import annotations

import posixpath
from typing import List, Mapping, Sequence

from vme.domain.entities.media_metadata import (
    FileInfo,
    MediaMetadata,
    MetadataTag,
    MovieInfo,
    StreamInfo,
    TrackInfo,
)
from vme.domain.entities.probe import RawProbeResult, RawStream
from vme.domain.enums.extraction_level import ExtractionLevel
from vme.domain.policies.tag_taxonomy import TAG_TAXONOMY, TagGroup, recognized_keys


def normalize(
    raw: RawProbeResult,
    level: ExtractionLevel | str,
    taxonomy: Sequence[TagGroup] = TAG_TAXONOMY,
) -> MediaMetadata:
    """
    Domain policy turning a raw probe result into leveled MediaMetadata.
    Pure: no I/O, same input gives an equal result.

    basic    -> file info
    extended -> + movie info (title, duration, taxonomy-ordered tags)
    full     -> + track info (bit rate, per-stream summaries)
    """
    level = ExtractionLevel(level)  # ValueError on anything else

    movie_info = None
    track_info = None
    if level.includes(ExtractionLevel.extended):
        movie_info = _movie_info(raw, taxonomy)
    if level.includes(ExtractionLevel.full):
        track_info = _track_info(raw)

    return MediaMetadata(
        file_info=_file_info(raw),
        movie_info=movie_info,
        track_info=track_info,
    )


def _file_info(raw: RawProbeResult) -> FileInfo:
    fmt = raw.format
    return FileInfo(
        filename=base_name(fmt.filename),
        size=fmt.size,
        format=fmt.format_name,
    )


def _movie_info(raw: RawProbeResult, taxonomy: Sequence[TagGroup]) -> MovieInfo:
    fmt = raw.format
    return MovieInfo(
        title=fmt.tags.get("title") or "",
        duration=fmt.duration,
        tags=tuple(classify_tags(fmt.tags, taxonomy)),
    )


def _track_info(raw: RawProbeResult) -> TrackInfo:
    return TrackInfo(
        bit_rate=raw.format.bit_rate,
        streams=tuple(summarize_stream(i, s) for i, s in enumerate(raw.streams)),
    )


def classify_tags(raw_tags: Mapping[str, str], taxonomy: Sequence[TagGroup] = TAG_TAXONOMY) -> List[MetadataTag]:
    """Keep recognized tags, ordered by taxonomy group then key; raw map order is irrelevant."""
    out: List[MetadataTag] = []
    for key in recognized_keys(taxonomy):
        value = raw_tags.get(key)
        if value is not None:
            out.append(MetadataTag(name=key, value=value))
    return out


def summarize_stream(index: int, stream: RawStream) -> StreamInfo:
    resolution = ""
    if stream.codec_type == "video":
        resolution = format_resolution(stream.width, stream.height)
    return StreamInfo(
        index=index,
        type=stream.codec_type,
        codec=stream.codec_name,
        resolution=resolution,
    )


def format_resolution(width: int | None, height: int | None) -> str:
    # ffprobe omits dimensions for some video streams; render them as 0
    return f"{width or 0}x{height or 0}"


def base_name(filename: str) -> str:
    # ffprobe echoes the path it was given; strip either separator style
    return posixpath.basename(filename.replace("\\", "/")) if filename else ""
