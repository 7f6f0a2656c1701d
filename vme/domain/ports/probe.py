from __future__ import annotations
from pathlib import Path
from typing import Protocol
from vme.domain.entities.probe import RawProbeResult

class MediaProbePort(Protocol):
    def probe(self, path: Path) -> RawProbeResult: ...
