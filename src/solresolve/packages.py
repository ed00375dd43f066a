#!/usr/bin/env python3
"""Locating installed libraries and reading their metadata.

Libraries are npm packages installed under ``node_modules`` directories.
A library is found the way Node finds packages: look for
``node_modules/<name>/package.json`` in the start directory and every
parent, then in the directories listed in ``NODE_PATH``.

Example:
    >>> finder = NodeModulesFinder()
    >>> finder.find_package("@openzeppelin/contracts", "/my/project")
    PosixPath('/my/project/node_modules/@openzeppelin/contracts/package.json')
"""

import json
import logging
import os
from pathlib import Path
from typing import List, Optional, Protocol, Union

from .paths import NODE_MODULES

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"
SCOPE_MARKER = "@"

# The toolchain's own library. Projects using a global installation of the
# toolchain don't have it in their node_modules, so it is also shipped here.
TOOLCHAIN_LIBRARY = "@nomiclabs/buidler"
TOOLCHAIN_LIBRARY_ROOT = Path(__file__).resolve().parent / "builtin"


class PackageFinder(Protocol):
    """Locates the ``package.json`` of an installed library."""

    def find_package(self, name: str, from_dir: Union[str, Path]) -> Optional[Path]:
        ...


def get_library_name(source_name: str) -> str:
    """Extract the library name from a library source name.

    The library name is the first segment of the source name, or the first
    two for scoped packages (``@scope/name``).

    Example:
        >>> get_library_name("@openzeppelin/contracts/token/ERC20.sol")
        '@openzeppelin/contracts'
        >>> get_library_name("lib/x/y.sol")
        'lib'
    """
    segments = source_name.split("/")
    if source_name.startswith(SCOPE_MARKER):
        return "/".join(segments[:2])
    return segments[0]


def library_root(package_json: Union[str, Path], library_name: str) -> Path:
    """Directory that library source names are relative to.

    That is the directory holding the installed package tree: the
    ``package.json`` directory climbed once per segment of the library name.

    Example:
        >>> library_root("/p/node_modules/@scope/lib/package.json", "@scope/lib")
        PosixPath('/p/node_modules')
    """
    root = Path(package_json).parent
    for _ in library_name.split("/"):
        root = root.parent
    return root


def read_package_version(package_json: Union[str, Path]) -> str:
    """Read the ``version`` declared in a ``package.json``.

    Raises:
        OSError: If the file can't be read.
        ValueError: If the file isn't valid JSON.
    """
    with open(package_json, "r", encoding="utf-8") as f:
        info = json.load(f)
    return str(info.get("version", ""))


class NodeModulesFinder:
    """Finds installed npm packages using Node's lookup rules.

    Search order:
        1. ``<dir>/node_modules/<name>`` for the start directory and each
           of its parents, nearest first
        2. Every directory listed in ``NODE_PATH``
        3. ``extra_paths``, in the given order

    Attributes:
        extra_paths: Additional directories to search last.
    """

    def __init__(self, extra_paths: List[Union[str, Path]] = None):
        self.extra_paths = [Path(p) for p in (extra_paths or [])]

    def candidate_dirs(self, from_dir: Union[str, Path]) -> List[Path]:
        """All directories that may contain the package, in search order."""
        start = Path(from_dir).resolve()
        dirs = []
        for directory in [start, *start.parents]:
            if directory.name == NODE_MODULES:
                continue
            dirs.append(directory / NODE_MODULES)

        node_path = os.environ.get("NODE_PATH", "")
        dirs.extend(Path(p) for p in node_path.split(os.pathsep) if p)
        dirs.extend(self.extra_paths)
        return dirs

    def find_package(self, name: str, from_dir: Union[str, Path]) -> Optional[Path]:
        """Locate the ``package.json`` of package ``name``.

        Args:
            name: Package name, possibly scoped.
            from_dir: Directory the lookup starts from.

        Returns:
            Absolute path of the package's ``package.json``, or None if the
            package isn't installed anywhere on the search path.
        """
        for directory in self.candidate_dirs(from_dir):
            candidate = directory / name / PACKAGE_JSON
            if candidate.is_file():
                logger.debug(f"Found package {name} at {candidate}")
                return candidate.resolve()
        return None

    def __repr__(self) -> str:
        return f"NodeModulesFinder(extra_paths={[str(p) for p in self.extra_paths]})"
