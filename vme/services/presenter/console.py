# vme/services/presenter/console.py
from __future__ import annotations

import sys
from typing import List, Optional, Sequence, TextIO

from vme.domain.entities.media_metadata import MediaMetadata
from vme.domain.enums.extraction_level import ExtractionLevel
from vme.domain.policies.tag_taxonomy import TAG_TAXONOMY, TagGroup, group_tags

GREEN = "\033[32m"
YELLOW = "\033[33m"
CYAN = "\033[36m"
BRIGHT_CYAN = "\033[96m"
RESET = "\033[0m"


def paint(text: str, code: str, color: bool) -> str:
    return f"{code}{text}{RESET}" if color else text


def render_metadata(
    metadata: MediaMetadata,
    level: ExtractionLevel | str,
    *,
    color: bool = True,
    taxonomy: Sequence[TagGroup] = TAG_TAXONOMY,
) -> str:
    """
    Human-readable report of `metadata`, gated by `level` the same way the
    normalizer gates population. Values are shown as ffprobe reported them,
    with fixed unit suffixes and no conversion.
    """
    level = ExtractionLevel(level)
    lines: List[str] = []

    fi = metadata.file_info
    lines.append(paint("----- File Information -----", GREEN, color))
    lines.append("")
    lines.append(f"Filename: {fi.filename}")
    lines.append(f"Size: {fi.size} bytes")
    lines.append(f"Format: {fi.format}")

    movie = metadata.movie_info
    if level.includes(ExtractionLevel.extended) and movie is not None:
        lines.append("")
        lines.append(paint("----- Movie Information -----", YELLOW, color))
        lines.append("")
        if movie.title:
            lines.append(f"Title: {movie.title}")
        lines.append(f"Duration: {movie.duration} seconds")

        for group, tags in group_tags(movie.tags, taxonomy):
            lines.append("")
            lines.append(paint(f"{group.name}:", CYAN, color))
            for tag in tags:
                lines.append(f"  {tag.name}: {tag.value}")

    track = metadata.track_info
    if level.includes(ExtractionLevel.full) and track is not None:
        lines.append("")
        lines.append(paint("----- Track Information -----", BRIGHT_CYAN, color))
        lines.append("")
        lines.append(f"Bitrate: {track.bit_rate} bits/s")
        for stream in track.streams:
            line = f"{stream.type.upper()} Track - Codec: {stream.codec}"
            if stream.resolution:
                line += f", Resolution: {stream.resolution}"
            lines.append("")
            lines.append(line)

    return "\n".join(lines) + "\n"


def display_metadata(
    metadata: MediaMetadata,
    level: ExtractionLevel | str,
    *,
    stream: Optional[TextIO] = None,
    color: bool = True,
) -> None:
    out = stream or sys.stdout
    out.write(render_metadata(metadata, level, color=color))
    out.flush()
