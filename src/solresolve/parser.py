#!/usr/bin/env python3
"""Extraction of imports and version pragmas from Solidity sources.

The resolver only needs the :class:`Parser` protocol. :class:`SolidityParser`
is the default implementation: a regex scanner that never fails, so a file
with syntax errors still resolves and the compiler gets to report them.

Example:
    >>> parser = SolidityParser()
    >>> parsed = parser.parse('pragma solidity ^0.5.0;\\nimport "./A.sol";', "/p/B.sol")
    >>> parsed.imports, parsed.version_pragmas
    (('./A.sol',), ('^0.5.0',))
"""

import hashlib
import re
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Protocol, Tuple

DEFAULT_CACHE_SIZE = 1024


@dataclass(frozen=True)
class ParsedContent:
    """What a parser found in a source file.

    Attributes:
        imports: Import strings in source order, exactly as written.
        version_pragmas: ``pragma solidity`` expressions in source order.
    """

    imports: Tuple[str, ...] = ()
    version_pragmas: Tuple[str, ...] = ()


class Parser(Protocol):
    """Anything able to pull imports and version pragmas out of source text.

    Implementations must be total (never raise on malformed text) and
    deterministic.
    """

    def parse(self, raw_content: str, absolute_path: str) -> ParsedContent:
        ...


# String literals are matched so comment markers inside them are left alone.
_COMMENT_OR_STRING_RE = re.compile(
    r'"(?:\\.|[^"\\\n])*"'
    r"|'(?:\\.|[^'\\\n])*'"
    r"|//[^\n]*"
    r"|/\*.*?\*/",
    re.DOTALL,
)

# import "p"; import "p" as X; import * as X from "p"; import {A} from "p";
_IMPORT_RE = re.compile(
    r"\bimport\s+(?:[^;\"']*?\bfrom\s+)?(?:\"([^\"]*)\"|'([^']*)')",
)

_PRAGMA_RE = re.compile(r"\bpragma\s+solidity\s+([^;]+);")


def strip_comments(source: str) -> str:
    """Blank out comments, keeping string literals and line numbers intact."""

    def _replace(match: "re.Match") -> str:
        text = match.group(0)
        if text.startswith("//") or text.startswith("/*"):
            return re.sub(r"[^\n]", " ", text)
        return text

    return _COMMENT_OR_STRING_RE.sub(_replace, source)


def compute_content_hash(content: str) -> str:
    """Compute a hash of content for change detection.

    Args:
        content: The text content to hash.

    Returns:
        The hex MD5 digest of the UTF-8 encoded content.
    """
    return hashlib.md5(content.encode()).hexdigest()


class SolidityParser:
    """Regex-based :class:`Parser` for Solidity files.

    Results are memoized per absolute path and content hash, so resolving
    the same unchanged file repeatedly only scans it once. The memo keeps
    the ``max_entries`` most recently used results.

    Attributes:
        cache_size: Number of memoized results.
    """

    def __init__(self, max_entries: int = DEFAULT_CACHE_SIZE):
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.max_entries = max_entries
        self._cache: "OrderedDict[Tuple[str, str], ParsedContent]" = OrderedDict()
        self._lock = threading.Lock()

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def parse(self, raw_content: str, absolute_path: str) -> ParsedContent:
        """Find the imports and version pragmas of a file.

        Args:
            raw_content: Full text of the file.
            absolute_path: Path of the file, used as part of the cache key.

        Returns:
            ParsedContent with whatever could be recognised.
        """
        key = (absolute_path, compute_content_hash(raw_content))
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                self._cache.move_to_end(key)
                return cached

        parsed = self._scan(raw_content)

        with self._lock:
            self._cache[key] = parsed
            self._cache.move_to_end(key)
            while len(self._cache) > self.max_entries:
                self._cache.popitem(last=False)
        return parsed

    def _scan(self, raw_content: str) -> ParsedContent:
        code = strip_comments(raw_content)

        imports = []
        for match in _IMPORT_RE.finditer(code):
            double_quoted, single_quoted = match.groups()
            imports.append(double_quoted if double_quoted is not None else single_quoted)

        pragmas = [" ".join(m.group(1).split()) for m in _PRAGMA_RE.finditer(code)]

        return ParsedContent(imports=tuple(imports), version_pragmas=tuple(pragmas))
