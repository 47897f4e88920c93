# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the xidl command-line interface."""

import argparse
import sys
from pathlib import Path

from yachalk import chalk

from xidl.compiler.artifact import serialize, write_artifact
from xidl.compiler.build import CompilerError, build_files, parse_file
from xidl.parser.parser import ParseResult
from xidl.workspace.config import CONFIG_FILE_NAME, ConfigError, ProjectConfig, find_sources, load_config

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the xidl CLI."""
    parser = argparse.ArgumentParser(
        prog="xidl",
        description="xidl - IDL lexer and parser",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Report syntax errors in IDL files",
        description="Parse IDL files and print every lexical and syntax error.",
    )
    check_parser.add_argument(
        "paths",
        nargs="*",
        help=f"Files or project directories to check (default: sources listed in ./{CONFIG_FILE_NAME})",
    )

    # dump subcommand
    dump_parser = subparsers.add_parser(
        "dump",
        help="Print the parse tree of an IDL file as JSON",
        description="Parse one IDL file and emit its parse tree as a JSON artifact.",
    )
    dump_parser.add_argument("file", help="IDL file to parse")
    dump_parser.add_argument(
        "-o",
        "--output",
        help="Write the artifact to this path instead of standard output",
    )

    # build subcommand
    build_parser = subparsers.add_parser(
        "build",
        help="Write parse tree artifacts for a project",
        description="Parse all project sources and write artifacts to the configured build directory.",
    )
    build_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Project directory (default: current directory)",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "check":
        return _cmd_check(args)
    if args.command == "dump":
        return _cmd_dump(args)
    if args.command == "build":
        return _cmd_build(args)
    return 0


def _error(message: str) -> None:
    print(f"{chalk.red('Error')}: {message}", file=sys.stderr)


def _load_project(directory: Path) -> ProjectConfig | None:
    """Load the project config of *directory*, printing the error on failure."""
    try:
        return load_config(directory / CONFIG_FILE_NAME)
    except ConfigError as exc:
        _error(str(exc))
        return None


def _print_diagnostics(path: Path, result: ParseResult, limit: int) -> None:
    """Print the diagnostics of one file, at most *limit* of them when limit > 0."""
    shown = result.diagnostics if limit == 0 else result.diagnostics[:limit]
    for diagnostic in shown:
        label = chalk.red(f"{diagnostic.severity.value}:")
        print(f"{path}:{diagnostic.line}:{diagnostic.column}: {label} {diagnostic.message}", file=sys.stderr)
    hidden = len(result.diagnostics) - len(shown)
    if hidden > 0:
        print(f"{path}: {hidden} more error(s) not shown", file=sys.stderr)


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand.

    Sources found through a project directory use that project's
    ``max-diagnostics``. Files named directly use the limit of the project in
    the working directory, whose config is only loaded once such a file has
    errors to print.
    """
    targets: list[tuple[Path, ProjectConfig | None]] = []
    if not args.paths:
        config = _load_project(Path.cwd())
        if config is None:
            return 1
        targets = [(path, config) for path in find_sources(config, Path.cwd())]
    for raw in args.paths:
        path = Path(raw)
        if path.is_dir():
            project_config = _load_project(path)
            if project_config is None:
                return 1
            targets.extend((source, project_config) for source in find_sources(project_config, path))
        elif path.exists():
            targets.append((path, None))
        else:
            _error(f"path '{path}' does not exist.")
            return 1

    if not targets:
        print("No IDL files found.")
        return 0

    print(f"Checking {len(targets)} IDL file(s)...")
    total = 0
    cwd_config: ProjectConfig | None = None
    for path, config in targets:
        try:
            result = parse_file(path)
        except CompilerError as exc:
            _error(str(exc))
            return 1
        if result.error_count == 0:
            continue
        if config is None:
            if cwd_config is None:
                cwd_config = _load_project(Path.cwd())
                if cwd_config is None:
                    return 1
            config = cwd_config
        _print_diagnostics(path, result, config.max_diagnostics)
        total += result.error_count

    if total:
        print(chalk.red(f"Found {total} error(s)."), file=sys.stderr)
        return 1

    print(chalk.green("No issues found."))
    return 0


def _cmd_dump(args: argparse.Namespace) -> int:
    """Handle the dump subcommand."""
    path = Path(args.file)
    try:
        result = parse_file(path)
    except CompilerError as exc:
        _error(str(exc))
        return 1

    _print_diagnostics(path, result, 0)
    if args.output:
        try:
            write_artifact(result.tree, Path(args.output))
        except OSError as exc:
            _error(f"Cannot write artifact '{args.output}': {exc}")
            return 1
        print(f"Wrote {args.output}")
    else:
        print(serialize(result.tree))
    return 1 if result.error_count else 0


def _cmd_build(args: argparse.Namespace) -> int:
    """Handle the build subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.is_dir():
        _error(f"directory '{directory}' does not exist.")
        return 1

    config = _load_project(directory)
    if config is None:
        return 1

    files = find_sources(config, directory)
    if not files:
        print("No IDL files found.")
        return 0

    build_dir = directory / config.build_directory
    print(f"Building {len(files)} IDL file(s) into '{build_dir}'...")
    try:
        results = build_files(files, directory, build_dir)
    except CompilerError as exc:
        _error(str(exc))
        return 1

    failed = 0
    for path, result in results.items():
        if result.error_count:
            failed += 1
            _print_diagnostics(path, result, config.max_diagnostics)

    if failed:
        print(chalk.red(f"{failed} file(s) failed to parse; no artifact written for them."), file=sys.stderr)
        return 1

    print(chalk.green(f"Built {len(results)} artifact(s)."))
    return 0


if __name__ == "__main__":
    main()
