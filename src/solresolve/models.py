#!/usr/bin/env python3
"""Immutable records produced by the resolver."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class LibraryInfo:
    """Provenance of a file that belongs to an installed library.

    Attributes:
        name: Library name, e.g. ``"@openzeppelin/contracts"``.
        version: Version declared in the library's ``package.json``.
    """

    name: str
    version: str


@dataclass(frozen=True)
class FileContent:
    """Text of a source file together with what the parser found in it.

    Attributes:
        raw_content: The file's bytes decoded as UTF-8, untouched.
        imports: Import strings, in source order.
        version_pragmas: Version pragma expressions, in source order.
    """

    raw_content: str
    imports: Tuple[str, ...] = ()
    version_pragmas: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ResolvedFile:
    """A source file located on disk, with its content and provenance.

    Two resolutions of the same source name against the same filesystem
    state compare equal.

    Attributes:
        source_name: Canonical slash-separated name of the file.
        absolute_path: Where the file lives on disk.
        content: Raw text plus parsed imports and version pragmas.
        last_modification_date: The file's status-change time (ctime). Renames
            and permission changes update it, content-only timestamps don't
            see them.
        library: Library the file was resolved from, or None for project files.
    """

    source_name: str
    absolute_path: str
    content: FileContent
    last_modification_date: datetime
    library: Optional[LibraryInfo] = None

    @property
    def is_library(self) -> bool:
        """Whether the file was resolved from an installed library."""
        return self.library is not None

    def get_versioned_name(self) -> str:
        """Source name qualified with the library version, if any.

        Example:
            >>> file.get_versioned_name()
            'lib/x/y.sol@v1.2.3'
        """
        if self.library is None:
            return self.source_name
        return f"{self.source_name}@v{self.library.version}"

    def to_dict(self, include_content: bool = False) -> Dict[str, Any]:
        """Export as a JSON-serializable dictionary.

        Args:
            include_content: Also include the raw file text.
        """
        data: Dict[str, Any] = {
            "source_name": self.source_name,
            "versioned_name": self.get_versioned_name(),
            "absolute_path": self.absolute_path,
            "last_modification_date": self.last_modification_date.isoformat(),
            "library": (
                {"name": self.library.name, "version": self.library.version}
                if self.library is not None
                else None
            ),
            "imports": list(self.content.imports),
            "version_pragmas": list(self.content.version_pragmas),
        }
        if include_content:
            data["raw_content"] = self.content.raw_content
        return data


# Resolved files keyed by source name
ResolvedFilesMap = Dict[str, ResolvedFile]
