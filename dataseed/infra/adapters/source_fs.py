from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from ..contracts import DefinitionSource
from ..errors import NotFoundError
from ..models import RawDefinition

DEFAULT_PATTERNS = ("*.json",)


class FolderDefinitionSource(DefinitionSource):
    """DefinitionSource reading one step definition per file from a folder.

    Files are listed in sorted name order so discovery is deterministic. The file
    path is used as the source identifier in load errors.
    """

    def __init__(self, folder: Path, patterns: Sequence[str] = DEFAULT_PATTERNS):
        self.folder = Path(folder)
        self.patterns = tuple(patterns) or DEFAULT_PATTERNS

    def list_files(self) -> List[Path]:
        if not self.folder.is_dir():
            raise NotFoundError(f"Data seed folder not found: {self.folder}")
        seen = set()
        out: List[Path] = []
        for pattern in self.patterns:
            for p in self.folder.glob(pattern):
                if p.is_file() and p not in seen:
                    seen.add(p)
                    out.append(p)
        return sorted(out, key=lambda p: p.name)

    def iter_definitions(self) -> Iterator[RawDefinition]:
        for p in self.list_files():
            # Leading BOM dropped; undecodable bytes become U+FFFD.
            yield RawDefinition(source_id=str(p), content=p.read_text(encoding="utf-8-sig", errors="replace"))

    def describe(self) -> dict:
        return {"class": self.__class__.__name__, "folder": str(self.folder), "patterns": list(self.patterns)}


class InMemoryDefinitionSource(DefinitionSource):
    """DefinitionSource over definitions already held in memory."""

    def __init__(self, definitions: Iterable[RawDefinition] = ()):
        self.definitions: List[RawDefinition] = list(definitions)

    def add(self, source_id: str, content: str) -> None:
        self.definitions.append(RawDefinition(source_id=source_id, content=content))

    def iter_definitions(self) -> Iterator[RawDefinition]:
        return iter(list(self.definitions))

    def describe(self) -> dict:
        return {"class": self.__class__.__name__, "definitions": len(self.definitions)}
