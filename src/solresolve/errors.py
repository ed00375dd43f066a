#!/usr/bin/env python3
"""Errors raised while resolving source names and imports.

Every failure has its own class and numeric code, and keeps the offending
identifiers as attributes so diagnostics never have to parse messages.

Hierarchy:
    ResolverError
    ├── InvalidSourceNameError        (malformed source names)
    ├── SourceFileNotFoundError
    ├── LibraryFileNotFoundError
    ├── WrongCasingError
    ├── LibraryNotInstalledError
    └── InvalidImportError            (problems with an import edge)

Example:
    >>> try:
    ...     resolver.resolve_source_name("/abs/Token.sol")
    ... except InvalidSourceNameError as e:
    ...     print(e.code, e.name)
    413 /abs/Token.sol
"""


class ResolverError(Exception):
    """Base class for all resolution failures.

    Attributes:
        code: Stable numeric identifier of the error kind.
        title: Short name of the error kind.
    """

    code = 0
    title = "Resolver error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Serializable view of the error, fields included."""
        data = {"code": self.code, "error": type(self).__name__, "message": self.message}
        data.update(
            {key: value for key, value in vars(self).items() if key not in ("message", "args")}
        )
        return data


# Source names


class InvalidSourceNameError(ResolverError):
    """A source name that breaks the source name syntax rules."""

    def __init__(self, name: str, message: str):
        self.name = name
        super().__init__(message)


class AbsolutePathNotAllowedError(InvalidSourceNameError):
    code = 413
    title = "Invalid source name: absolute path"

    def __init__(self, name: str):
        super().__init__(
            name, f"Invalid source name {name}. Expected a source name but found an absolute path."
        )


class RelativePathNotAllowedError(InvalidSourceNameError):
    code = 414
    title = "Invalid source name: relative path"

    def __init__(self, name: str):
        super().__init__(
            name, f"Invalid source name {name}. Source names can't be relative paths."
        )


class BackslashesNotAllowedError(InvalidSourceNameError):
    code = 415
    title = "Invalid source name: backslashes"

    def __init__(self, name: str):
        super().__init__(
            name,
            f"Invalid source name {name}. Source names must use / instead of \\, "
            f"even on Windows.",
        )


class NotNormalizedError(InvalidSourceNameError):
    code = 416
    title = "Invalid source name: not normalized"

    def __init__(self, name: str):
        super().__init__(
            name,
            f"Invalid source name {name}. Source names must be normalized "
            f"(no '.' or '..' segments, no repeated slashes).",
        )


# Existence and casing


class SourceFileNotFoundError(ResolverError):
    """No file matches the source name inside the project."""

    code = 400
    title = "File not found"

    def __init__(self, file: str):
        self.file = file
        super().__init__(f"File {file} doesn't exist. Check that the path is correct.")


class LibraryFileNotFoundError(ResolverError):
    """The library is installed but doesn't contain the requested file."""

    code = 402
    title = "Library file not found"

    def __init__(self, file: str):
        self.file = file
        super().__init__(
            f"File {file} doesn't exist in its library. "
            f"Check that the installed library version contains it."
        )


class WrongCasingError(ResolverError):
    """The file exists, but with a different casing than the one requested."""

    code = 411
    title = "Wrong source name casing"

    def __init__(self, requested: str, actual: str):
        self.requested = requested
        self.actual = actual
        super().__init__(
            f"Trying to resolve the file {requested} but its correct "
            f"case-sensitive name is {actual}"
        )


class LibraryNotInstalledError(ResolverError):
    code = 401
    title = "Library not installed"

    def __init__(self, library: str):
        self.library = library
        super().__init__(f"Library {library} is not installed. Try installing it using npm.")


# Import edges


class InvalidImportError(ResolverError):
    """An import statement that can't be followed.

    Attributes:
        importer: Source name of the file containing the import.
        imported: The import string as written.
    """

    def __init__(self, importer: str, imported: str, message: str):
        self.importer = importer
        self.imported = imported
        super().__init__(message)


class InvalidImportProtocolError(InvalidImportError):
    code = 406
    title = "Invalid import protocol"

    def __init__(self, importer: str, imported: str, protocol: str):
        self.protocol = protocol
        super().__init__(
            importer,
            imported,
            f"Invalid import {imported} from {importer}. "
            f"Imports via {protocol}:// are not supported.",
        )


class InvalidImportBackslashError(InvalidImportError):
    code = 407
    title = "Invalid import: backslashes"

    def __init__(self, importer: str, imported: str):
        super().__init__(
            importer,
            imported,
            f"Invalid import {imported} from {importer}. "
            f"Imports must use / instead of \\, even on Windows.",
        )


class InvalidImportAbsolutePathError(InvalidImportError):
    code = 408
    title = "Invalid import: absolute path"

    def __init__(self, importer: str, imported: str):
        super().__init__(
            importer,
            imported,
            f"Invalid import {imported} from {importer}. Imports with absolute paths are not supported.",
        )


class InvalidImportOutsideOfProjectError(InvalidImportError):
    code = 409
    title = "Import outside of the project"

    def __init__(self, importer: str, imported: str):
        super().__init__(
            importer,
            imported,
            f"Invalid import {imported} from {importer}. "
            f"The file being imported is outside of the project.",
        )


class IllegalImportError(InvalidImportError):
    """A library reaching into another library through a relative path."""

    code = 403
    title = "Illegal import"

    def __init__(self, importer: str, imported: str):
        super().__init__(
            importer,
            imported,
            f"Illegal import {imported} from {importer}. Libraries can only import "
            f"other libraries by their source name, not by relative path.",
        )


class InvalidImportWrongCasingError(InvalidImportError):
    code = 410
    title = "Import with wrong casing"

    def __init__(self, importer: str, imported: str):
        super().__init__(
            importer,
            imported,
            f"Trying to import {imported} from {importer}, but it has an incorrect casing.",
        )


class ImportedFileNotFoundError(InvalidImportError):
    code = 412
    title = "Imported file not found"

    def __init__(self, importer: str, imported: str):
        super().__init__(
            importer, imported, f"File {imported}, imported from {importer}, not found."
        )
