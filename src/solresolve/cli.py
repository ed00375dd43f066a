#!/usr/bin/env python3
"""Command-line interface for solresolve.

Subcommands:
    - solresolve resolve: Resolve a source name and describe the file
    - solresolve imports: Resolve a source name and each of its direct imports

Exit codes:
    0  everything resolved
    1  a resolution error (bad name, missing file, wrong casing, ...)
    2  an environment error (unreadable file, bad project root, ...)

Example:
    $ solresolve resolve contracts/Token.sol -r /my/project
    $ solresolve imports contracts/Token.sol -o json --compact
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List

from . import __version__
from .colors import Colors, get_colors
from .errors import ResolverError
from .models import ResolvedFile
from .resolver import Resolver

EXIT_OK = 0
EXIT_RESOLUTION_ERROR = 1
EXIT_ENVIRONMENT_ERROR = 2


def add_resolve_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the arguments shared by all resolution subcommands."""
    parser.add_argument("source_name", help="Source name to resolve (e.g. contracts/Token.sol)")
    parser.add_argument(
        "-r", "--root", default=".", help="Project root directory (default: current directory)"
    )
    parser.add_argument(
        "-o",
        "--output",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--compact", action="store_true", help="Output compact JSON (default: pretty-printed)"
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")


def _dump(data: Any, compact: bool) -> str:
    if compact:
        return json.dumps(data, separators=(",", ":"))
    return json.dumps(data, indent=2)


def _describe_origin(resolved: ResolvedFile, c: Colors) -> str:
    if resolved.library is None:
        return c.dim("(project)")
    return c.yellow(f"{resolved.library.name}@{resolved.library.version}")


def format_resolved(resolved: ResolvedFile, c: Colors) -> str:
    """Render a resolved file as human-readable text."""
    lines = [
        c.bold(c.green(resolved.source_name)),
        f"  path:     {c.cyan(resolved.absolute_path)}",
        f"  library:  {_describe_origin(resolved, c)}",
        f"  modified: {resolved.last_modification_date.isoformat()}",
    ]
    if resolved.content.version_pragmas:
        lines.append(f"  pragmas:  {', '.join(resolved.content.version_pragmas)}")
    lines.append(f"  imports:  {len(resolved.content.imports)}")
    return "\n".join(lines)


def format_error(error: ResolverError, c: Colors) -> str:
    """Render a resolution error as a single line."""
    return f"{c.magenta(f'[{error.code}]')} {c.error(error.title)}: {error}"


def _report_failure(error: Exception, args, c: Colors) -> int:
    if isinstance(error, ResolverError):
        if args.output == "json":
            print(_dump(error.to_dict(), args.compact))
        else:
            print(format_error(error, c), file=sys.stderr)
        return EXIT_RESOLUTION_ERROR

    message = f"{type(error).__name__}: {error}"
    if args.output == "json":
        print(_dump({"error": message}, args.compact))
    else:
        print(c.error(message), file=sys.stderr)
    return EXIT_ENVIRONMENT_ERROR


def run_resolve(args) -> int:
    """Run the resolve command.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Process exit code.
    """
    c = get_colors(args.no_color)

    try:
        resolver = Resolver(args.root)
        resolved = resolver.resolve_source_name(args.source_name)
    except (ResolverError, OSError, ValueError) as e:
        return _report_failure(e, args, c)

    if args.output == "json":
        print(_dump(resolved.to_dict(include_content=args.content), args.compact))
    else:
        print(format_resolved(resolved, c))
        if args.content:
            print()
            print(resolved.content.raw_content)
    return EXIT_OK


def run_imports(args) -> int:
    """Run the imports command.

    Every direct import is resolved on its own; a failing import is
    reported and the rest are still resolved.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Process exit code.
    """
    c = get_colors(args.no_color)

    try:
        resolver = Resolver(args.root)
        resolved = resolver.resolve_source_name(args.source_name)

        edges: List[Dict[str, Any]] = []
        for imported in resolved.content.imports:
            try:
                target = resolver.resolve_import(resolved, imported)
                edges.append({"imported": imported, "resolved": target})
            except ResolverError as e:
                edges.append({"imported": imported, "error": e})
    except (ResolverError, OSError, ValueError) as e:
        return _report_failure(e, args, c)

    failed = any("error" in edge for edge in edges)

    if args.output == "json":
        data = {
            "source_name": resolved.source_name,
            "versioned_name": resolved.get_versioned_name(),
            "imports": [
                {"imported": edge["imported"], "error": edge["error"].to_dict()}
                if "error" in edge
                else {"imported": edge["imported"], **edge["resolved"].to_dict()}
                for edge in edges
            ],
        }
        print(_dump(data, args.compact))
    else:
        print(f"{c.bold(c.green(resolved.source_name))} {_describe_origin(resolved, c)}")
        if not edges:
            print(c.dim("  (no imports)"))
        for edge in edges:
            if "error" in edge:
                print(f"  {c.cyan(edge['imported'])} {format_error(edge['error'], c)}")
            else:
                target = edge["resolved"]
                print(
                    f"  {c.cyan(edge['imported'])} -> {c.green(target.source_name)} "
                    f"{_describe_origin(target, c)}"
                )

    return EXIT_RESOLUTION_ERROR if failed else EXIT_OK


def main():
    """Unified command-line interface for solresolve.

    Usage:
        solresolve resolve SOURCE_NAME [-r ROOT] [-o FORMAT] [--content]
        solresolve imports SOURCE_NAME [-r ROOT] [-o FORMAT]

    Example:
        $ solresolve resolve contracts/Token.sol
        $ solresolve imports @openzeppelin/contracts/token/ERC20/ERC20.sol -o json
    """
    parser = argparse.ArgumentParser(
        prog="solresolve",
        description="Resolve Solidity source names and imports to files",
        epilog="Run 'solresolve <command> --help' for more information on a command.",
    )
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    # solresolve resolve
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve a source name to a file",
        description="Resolve a source name and show where it lives and what it contains.",
        epilog="Example: solresolve resolve contracts/Token.sol -r /my/project",
    )
    add_resolve_arguments(resolve_parser)
    resolve_parser.add_argument(
        "--content", action="store_true", help="Also print the raw file content"
    )

    # solresolve imports
    imports_parser = subparsers.add_parser(
        "imports",
        help="Resolve the direct imports of a file",
        description="Resolve a source name, then every import it contains.",
        epilog="Example: solresolve imports contracts/Token.sol -o json",
    )
    add_resolve_arguments(imports_parser)

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(EXIT_OK)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    if args.command == "resolve":
        sys.exit(run_resolve(args))
    elif args.command == "imports":
        sys.exit(run_imports(args))


if __name__ == "__main__":
    main()
