"""solresolve - Source name resolution for Solidity compilation pipelines.

This package turns source names and import statements into concrete,
validated files, catching malformed, ambiguous and escaping paths before
they reach the compiler.

Components:
    - Resolver: Resolves source names and imports into ResolvedFile records
    - ResolvedFile: Immutable record of a located file (path, content, ctime,
      library provenance)
    - SolidityParser: Default extractor of imports and version pragmas
    - NodeModulesFinder: Locates installed libraries the way Node does

Quick Start:
    1. Resolve a project file:
        >>> from solresolve import Resolver
        >>> resolver = Resolver('/path/to/project')
        >>> token = resolver.resolve_source_name('contracts/Token.sol')

    2. Follow its imports:
        >>> for imported in token.content.imports:
        ...     dep = resolver.resolve_import(token, imported)

    3. Handle failures by kind:
        >>> from solresolve import ResolverError
        >>> try:
        ...     resolver.resolve_source_name('contracts/token.sol')
        ... except ResolverError as e:
        ...     print(e.code, e)
        411 Trying to resolve the file contracts/token.sol but its correct case-sensitive name is contracts/Token.sol
"""

from .errors import (
    AbsolutePathNotAllowedError,
    BackslashesNotAllowedError,
    IllegalImportError,
    ImportedFileNotFoundError,
    InvalidImportAbsolutePathError,
    InvalidImportBackslashError,
    InvalidImportError,
    InvalidImportOutsideOfProjectError,
    InvalidImportProtocolError,
    InvalidImportWrongCasingError,
    InvalidSourceNameError,
    LibraryFileNotFoundError,
    LibraryNotInstalledError,
    NotNormalizedError,
    RelativePathNotAllowedError,
    ResolverError,
    SourceFileNotFoundError,
    WrongCasingError,
)
from .models import FileContent, LibraryInfo, ResolvedFile, ResolvedFilesMap
from .packages import NodeModulesFinder, PackageFinder, get_library_name
from .parser import ParsedContent, Parser, SolidityParser, compute_content_hash
from .paths import normalize_path, true_case_path
from .resolver import Resolver

__version__ = "1.0.0"
__license__ = "MIT"


__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Main classes
    "Resolver",
    "ResolvedFile",
    "ResolvedFilesMap",
    "FileContent",
    "LibraryInfo",
    # Collaborators
    "Parser",
    "ParsedContent",
    "SolidityParser",
    "PackageFinder",
    "NodeModulesFinder",
    # Errors
    "ResolverError",
    "InvalidSourceNameError",
    "AbsolutePathNotAllowedError",
    "RelativePathNotAllowedError",
    "BackslashesNotAllowedError",
    "NotNormalizedError",
    "SourceFileNotFoundError",
    "LibraryFileNotFoundError",
    "WrongCasingError",
    "LibraryNotInstalledError",
    "InvalidImportError",
    "InvalidImportProtocolError",
    "InvalidImportBackslashError",
    "InvalidImportAbsolutePathError",
    "InvalidImportOutsideOfProjectError",
    "IllegalImportError",
    "InvalidImportWrongCasingError",
    "ImportedFileNotFoundError",
    # Utilities
    "compute_content_hash",
    "get_library_name",
    "normalize_path",
    "true_case_path",
]
