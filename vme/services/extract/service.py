# vme/services/extract/service.py
from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

from vme.common.logging import get_logger
from vme.domain.entities.media_metadata import MediaMetadata
from vme.domain.enums.extraction_level import ExtractionLevel
from vme.domain.policies.normalizer import normalize
from vme.domain.ports.probe import MediaProbePort
from vme.services.probe.ffprobe_adapter import FFprobeAdapter

logger = get_logger(__name__)


class MetadataExtractor:
    """
    Probe one file and normalize the result at the requested level.
    The probe adapter is created lazily so a missing ffprobe surfaces at
    extraction time, after argument validation.
    """

    def __init__(self, probe: Optional[MediaProbePort] = None):
        self._probe = probe

    @property
    def probe(self) -> MediaProbePort:
        if self._probe is None:
            self._probe = FFprobeAdapter()
        return self._probe

    def extract(self, path: Path | str, level: ExtractionLevel | str = ExtractionLevel.basic) -> MediaMetadata:
        level = ExtractionLevel(level)
        abs_path = Path(path).expanduser().absolute()
        started = time.perf_counter()
        raw = self.probe.probe(abs_path)
        metadata = normalize(raw, level)
        logger.debug("extracted %s at level %s in %.3fs", abs_path, level, time.perf_counter() - started)
        return metadata
