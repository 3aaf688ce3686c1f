from __future__ import annotations

from pathlib import Path
from typing import Union

from route_planner.sources.base import DocumentSource


class FileSource(DocumentSource):
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @property
    def label(self) -> str:
        return str(self.path)

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()
