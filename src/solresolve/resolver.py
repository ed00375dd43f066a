#!/usr/bin/env python3
"""Source name resolver for Solidity compilation units.

Turns source names (the identifiers the compiler sees, e.g.
``contracts/Token.sol`` or ``@openzeppelin/contracts/math/SafeMath.sol``) and
import statements into :class:`ResolvedFile` records. This is the one place
where malformed, ambiguous or escaping paths are caught before they reach
the compiler.

Resolution of a source name:
    1. Validate the name syntax (absolute, relative, backslashes, normalized)
    2. Classify it as a project file or a library file
    3. Locate the file, in the project or in the library's installed tree
    4. Check that it exists with exactly the requested casing
    5. Read it, stat it and parse it

Resolution of an import first translates the import string into a source
name relative to the importing file, then resolves that source name.

Example:
    >>> resolver = Resolver('/my/project')
    >>> token = resolver.resolve_source_name('contracts/Token.sol')
    >>> for imported in token.content.imports:
    ...     dep = resolver.resolve_import(token, imported)
    ...     print(dep.get_versioned_name())
    contracts/math/SafeMath.sol
    @openzeppelin/contracts/token/ERC20/IERC20.sol@v3.0.0
"""

import logging
import os
import posixpath
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from .errors import (
    AbsolutePathNotAllowedError,
    BackslashesNotAllowedError,
    IllegalImportError,
    ImportedFileNotFoundError,
    InvalidImportAbsolutePathError,
    InvalidImportBackslashError,
    InvalidImportOutsideOfProjectError,
    InvalidImportProtocolError,
    InvalidImportWrongCasingError,
    LibraryFileNotFoundError,
    LibraryNotInstalledError,
    NotNormalizedError,
    RelativePathNotAllowedError,
    SourceFileNotFoundError,
    WrongCasingError,
)
from .models import FileContent, LibraryInfo, ResolvedFile
from .packages import (
    PACKAGE_JSON,
    TOOLCHAIN_LIBRARY,
    TOOLCHAIN_LIBRARY_ROOT,
    NodeModulesFinder,
    PackageFinder,
    get_library_name,
    library_root,
    read_package_version,
)
from .parser import Parser, SolidityParser
from .paths import (
    NODE_MODULES,
    contains_segment,
    get_uri_scheme,
    is_relative_import,
    normalize_path,
    strip_through_node_modules,
    true_case_path,
)

logger = logging.getLogger(__name__)


class Resolver:
    """Resolves source names and imports into :class:`ResolvedFile` records.

    The resolver holds no mutable state: every call is a pure function of
    the filesystem, so one instance can be shared across threads. Nothing is
    cached; callers that want a cache keep one keyed by source name.

    Attributes:
        project_root: Absolute path of the project.
        parser: Collaborator extracting imports and version pragmas.
        package_finder: Collaborator locating installed libraries.
    """

    def __init__(
        self,
        project_root: Union[str, Path],
        parser: Parser = None,
        package_finder: PackageFinder = None,
    ):
        """Initialize the resolver.

        Args:
            project_root: Path to the project root directory.
            parser: Parser used on every loaded file (default: SolidityParser).
            package_finder: Library lookup (default: NodeModulesFinder).

        Raises:
            ValueError: If the project root doesn't exist.
        """
        self.project_root = Path(project_root).resolve()
        if not self.project_root.exists():
            raise ValueError(f"Root path does not exist: {self.project_root}")

        self.parser = parser if parser is not None else SolidityParser()
        self.package_finder = package_finder if package_finder is not None else NodeModulesFinder()

    def resolve_source_name(self, source_name: str) -> ResolvedFile:
        """Resolve a source name into a ResolvedFile.

        Args:
            source_name: The source name as it would be given to the compiler.

        Returns:
            The resolved file, with ``library`` set if it comes from an
            installed library.

        Raises:
            InvalidSourceNameError: If the name is malformed.
            SourceFileNotFoundError: If a project file doesn't exist.
            LibraryNotInstalledError: If the library isn't installed.
            LibraryFileNotFoundError: If the library lacks the file.
            WrongCasingError: If the file exists with a different casing.
            OSError: On filesystem failures while reading the file.
        """
        self.validate_source_name(source_name)

        if self.is_local_source_name(source_name):
            logger.debug(f"[resolve] {source_name} -> project")
            return self._resolve_local_source_name(source_name)

        logger.debug(f"[resolve] {source_name} -> library")
        return self._resolve_library_source_name(source_name)

    def resolve_import(self, from_file: ResolvedFile, imported: str) -> ResolvedFile:
        """Resolve an import found in an already resolved file.

        Not-found and casing failures are reported against the import
        edge (naming both files) rather than against the source name.

        Args:
            from_file: The file containing the import statement.
            imported: The path in the import statement.

        Returns:
            The imported file.

        Raises:
            InvalidImportError: If the import string is invalid, escapes the
                project, reaches another library by relative path, can't be
                found or has the wrong casing.
            InvalidSourceNameError: If it translates to a malformed source name.
            LibraryNotInstalledError: If it names a library that isn't installed.
            OSError: On filesystem failures while reading the file.
        """
        source_name = self.import_to_source_name(from_file, imported)

        try:
            return self.resolve_source_name(source_name)
        except (SourceFileNotFoundError, LibraryFileNotFoundError) as error:
            logger.debug(f"[import] {imported} from {from_file.source_name}: {error.title}")
            raise ImportedFileNotFoundError(from_file.source_name, imported) from error
        except WrongCasingError as error:
            logger.debug(f"[import] {imported} from {from_file.source_name}: {error.title}")
            raise InvalidImportWrongCasingError(from_file.source_name, imported) from error

    def resolve_imports(self, from_file: ResolvedFile) -> List[ResolvedFile]:
        """Resolve every import of a file, in source order.

        Only direct imports are resolved; the result isn't followed further.
        The first failing import stops the resolution and its error is raised.
        """
        return [self.resolve_import(from_file, imported) for imported in from_file.content.imports]

    def validate_source_name(self, source_name: str) -> None:
        """Check the syntax of a source name.

        Checks run in a fixed order so each problem gets its own error.

        Raises:
            AbsolutePathNotAllowedError: The name is an absolute path.
            RelativePathNotAllowedError: The name starts with ``.``.
            BackslashesNotAllowedError: The name contains ``\\``.
            NotNormalizedError: The name has ``.``/``..`` segments or
                repeated slashes.
        """
        if os.path.isabs(source_name):
            raise AbsolutePathNotAllowedError(source_name)

        if source_name.startswith("."):
            raise RelativePathNotAllowedError(source_name)

        # Checked before normalizing, so a mismatch below can only come from
        # the name not being normalized.
        if "\\" in source_name:
            raise BackslashesNotAllowedError(source_name)

        if normalize_path(source_name) != source_name:
            raise NotNormalizedError(source_name)

    def is_local_source_name(self, source_name: str) -> bool:
        """Whether a source name refers to a file of the project itself.

        Anything going through ``node_modules`` is a library file. Otherwise
        the name is local if a file exists at that path under the project
        root, ignoring case on every filesystem; casing is checked later.
        """
        if contains_segment(source_name, NODE_MODULES):
            return False

        return true_case_path(source_name, self.project_root) is not None

    def import_to_source_name(self, from_file: ResolvedFile, imported: str) -> str:
        """Translate an import string into the source name it refers to.

        Non-relative imports are source names already. Relative imports are
        joined to the importing file's directory and normalized. A local file
        importing through a ``node_modules`` directory gets the direct library
        source name, so every library file has a single source name.

        Args:
            from_file: The file containing the import statement.
            imported: The path in the import statement.

        Returns:
            The canonical source name of the imported file.

        Raises:
            InvalidImportProtocolError: The import uses ``scheme://``.
            InvalidImportBackslashError: The import contains ``\\``.
            InvalidImportAbsolutePathError: The import is an absolute path.
            InvalidImportOutsideOfProjectError: A project file reaches above
                the project root.
            IllegalImportError: A library file reaches outside its library.
        """
        importer = from_file.source_name

        scheme = get_uri_scheme(imported)
        if scheme is not None:
            raise InvalidImportProtocolError(importer, imported, scheme)

        if "\\" in imported:
            raise InvalidImportBackslashError(importer, imported)

        if os.path.isabs(imported):
            raise InvalidImportAbsolutePathError(importer, imported)

        if not is_relative_import(imported):
            source_name = normalize_path(imported)
            logger.debug(f"[import] {imported} from {importer} -> {source_name}")
            return source_name

        source_name = normalize_path(posixpath.join(posixpath.dirname(importer), imported))

        if from_file.library is None:
            direct_name = strip_through_node_modules(source_name)
            if direct_name is not None:
                logger.debug(f"[import] {imported} from {importer} -> {direct_name} (node_modules)")
                return direct_name

            if source_name == ".." or source_name.startswith("../"):
                raise InvalidImportOutsideOfProjectError(importer, imported)
        elif not source_name.startswith(f"{from_file.library.name}/"):
            # Libraries may only reach other libraries by source name.
            raise IllegalImportError(importer, imported)

        logger.debug(f"[import] {imported} from {importer} -> {source_name}")
        return source_name

    def _resolve_local_source_name(self, source_name: str) -> ResolvedFile:
        self._validate_existence_and_casing(source_name, self.project_root, is_library=False)

        absolute_path = self._join(self.project_root, source_name)
        return self._load_file(source_name, absolute_path)

    def _resolve_library_source_name(self, source_name: str) -> ResolvedFile:
        library_name = get_library_name(source_name)
        if library_name == source_name:
            # Nothing after the library name, so it can't be a library file.
            raise LibraryFileNotFoundError(source_name)

        package_json = self._find_library_package(library_name)
        libraries_dir = library_root(package_json, library_name)

        self._validate_existence_and_casing(source_name, libraries_dir, is_library=True)

        version = read_package_version(package_json)
        logger.debug(f"[resolve] {library_name}@{version} at {libraries_dir}")

        return self._load_file(
            source_name,
            self._join(libraries_dir, source_name),
            LibraryInfo(name=library_name, version=version),
        )

    def _find_library_package(self, library_name: str) -> Path:
        """Locate a library's package.json, starting at the project root.

        Raises:
            LibraryNotInstalledError: If the library can't be found.
        """
        package_json = self.package_finder.find_package(library_name, self.project_root)
        if package_json is not None:
            return Path(package_json)

        # A global installation of the toolchain isn't in the project's
        # node_modules, so its own library is taken from this installation.
        if library_name == TOOLCHAIN_LIBRARY:
            fallback = TOOLCHAIN_LIBRARY_ROOT / TOOLCHAIN_LIBRARY / PACKAGE_JSON
            logger.debug(f"[resolve] {library_name} not installed, using {fallback}")
            return fallback

        raise LibraryNotInstalledError(library_name)

    def _validate_existence_and_casing(
        self, source_name: str, from_dir: Path, is_library: bool
    ) -> None:
        """Check that ``source_name`` exists under ``from_dir`` with the same casing.

        Raises:
            SourceFileNotFoundError: No project file matches, ignoring case.
            LibraryFileNotFoundError: No library file matches, ignoring case.
            WrongCasingError: A file matches but with a different casing.
        """
        true_case_name = true_case_path(source_name, from_dir)

        if true_case_name is None:
            if is_library:
                raise LibraryFileNotFoundError(source_name)
            raise SourceFileNotFoundError(source_name)

        if true_case_name != source_name:
            raise WrongCasingError(requested=source_name, actual=true_case_name)

    def _load_file(
        self,
        source_name: str,
        absolute_path: str,
        library: Optional[LibraryInfo] = None,
    ) -> ResolvedFile:
        """Read, stat and parse a file whose existence has been checked.

        Filesystem and decoding errors propagate untouched: at this point
        they mean the environment changed or is broken.
        """
        with open(absolute_path, "rb") as f:
            raw_content = f.read().decode("utf-8")

        stats = os.stat(absolute_path)
        last_modification_date = datetime.fromtimestamp(stats.st_ctime, tz=timezone.utc)

        parsed = self.parser.parse(raw_content, absolute_path)
        content = FileContent(
            raw_content=raw_content,
            imports=tuple(parsed.imports),
            version_pragmas=tuple(parsed.version_pragmas),
        )

        return ResolvedFile(
            source_name=source_name,
            absolute_path=absolute_path,
            content=content,
            last_modification_date=last_modification_date,
            library=library,
        )

    @staticmethod
    def _join(directory: Path, source_name: str) -> str:
        return str(directory.joinpath(*source_name.split("/")))

    def __repr__(self) -> str:
        return f"Resolver({self.project_root})"
