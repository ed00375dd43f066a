#!/usr/bin/env python3
"""Path helpers shared by the resolver.

Source names are always slash-separated, whatever the host platform uses.
Everything in this module works lexically except :func:`true_case_path`,
which walks the filesystem to recover the on-disk casing of a path.

Example:
    >>> normalize_path("contracts/./token/../Token.sol")
    'contracts/Token.sol'
    >>> is_relative_import("../lib/Math.sol")
    True
    >>> get_uri_scheme("https://example.com/Token.sol")
    'https'
"""

import os
import re
from pathlib import Path
from typing import List, Optional, Union

NODE_MODULES = "node_modules"

# Anything of the form "<letters>://"; the letters may be empty.
_URI_SCHEME_RE = re.compile(r"([a-zA-Z]*)://")


def to_slash(path: str) -> str:
    """Replace the host separator with forward slashes."""
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    return path


def normalize_path(path: str) -> str:
    """Lexically normalize a path and return it slash-separated.

    Collapses ``.`` and ``..`` segments and duplicate separators without
    touching the filesystem. Inputs that cannot be normalized are returned
    unchanged, so callers can detect them by comparing against the input.

    Args:
        path: Any path-like string.

    Returns:
        The canonical slash-separated form of ``path``.
    """
    try:
        return to_slash(os.path.normpath(path))
    except (TypeError, ValueError):
        return path


def is_relative_import(imported: str) -> bool:
    """Whether an import string is explicitly relative (``./`` or ``../``)."""
    return imported.startswith("./") or imported.startswith("../")


def get_uri_scheme(value: str) -> Optional[str]:
    """Return the URI scheme found in ``value``, or None if there is none.

    Any occurrence of ``://`` counts; the scheme is the run of letters
    immediately before it and may be an empty string.
    """
    match = _URI_SCHEME_RE.search(value)
    if match is None:
        return None
    return match.group(1)


def contains_segment(path: str, segment: str) -> bool:
    """Whether ``segment`` appears as a whole segment of a slash path."""
    return segment in path.split("/")


def strip_through_node_modules(path: str) -> Optional[str]:
    """Drop everything up to and including the first ``node_modules`` segment.

    Only a whole segment counts, so ``my_node_modules/`` is left alone.

    Returns:
        The remainder of the path, or None if it doesn't go through
        a ``node_modules`` directory.
    """
    segments = path.split("/")
    # The last segment is the file itself, never a directory to go through.
    for index, segment in enumerate(segments[:-1]):
        if segment == NODE_MODULES:
            return "/".join(segments[index + 1 :])
    return None


def _match_entry(directory: Path, name: str) -> Optional[str]:
    """Find the directory entry matching ``name``, preferring exact case."""
    entries = os.listdir(directory)
    if name in entries:
        return name

    folded = name.casefold()
    matches = sorted(entry for entry in entries if entry.casefold() == folded)
    return matches[0] if matches else None


def true_case_path(relative_path: str, base_dir: Union[str, Path]) -> Optional[str]:
    """Find the real on-disk casing of ``relative_path`` inside ``base_dir``.

    Each segment is matched against the actual directory listing, so the
    result is the same on case-sensitive and case-insensitive filesystems.
    When several entries differ only by case, an exact match wins.

    Args:
        relative_path: Slash-separated path relative to ``base_dir``.
        base_dir: Directory the lookup starts from. Its own casing is taken
            as given.

    Returns:
        The slash-separated relative path with its true casing, or None if
        no entry matches, even ignoring case.

    Raises:
        OSError: If a directory along the way can't be listed for reasons
            other than not existing (e.g. permissions).
    """
    current = Path(base_dir)
    found: List[str] = []

    for segment in relative_path.split("/"):
        if segment in ("", "."):
            continue
        if not current.is_dir():
            return None

        entry = _match_entry(current, segment)
        if entry is None:
            return None

        found.append(entry)
        current = current / entry

    return "/".join(found)
