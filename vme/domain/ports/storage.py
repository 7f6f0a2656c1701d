from __future__ import annotations
from pathlib import Path
from typing import Optional, Protocol

class ObjectStorePort(Protocol):
    def upload(self, local_path: Path, key: str) -> None: ...

    def download(self, key: str, dest_dir: Optional[Path] = None) -> Path: ...
