# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the apiscribe command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from apiscribe.cache.index import CacheError
from apiscribe.generator.pipeline import Generator, GeneratorOptions
from apiscribe.output.writer import AssemblyError, format_for_path
from apiscribe.source.loader import SourceLoadError
from apiscribe.workspace.config import OUTPUT_FORMATS, ConfigError, load_project_config

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the apiscribe CLI."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Source root to scan (default: current directory)",
    )
    common.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log output (-v for progress, -vv for debug detail)",
    )

    parser = argparse.ArgumentParser(
        prog="apiscribe",
        description="apiscribe: OpenAPI documents from annotated Python source",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # generate subcommand
    generate_parser = subparsers.add_parser(
        "generate",
        parents=[common],
        help="Generate OpenAPI documents",
        description="Scan the sources and write one or all OpenAPI documents.",
    )
    generate_parser.add_argument("-o", "--output", help="Output file, or directory with --multi")
    generate_parser.add_argument(
        "-f",
        "--format",
        choices=OUTPUT_FORMATS,
        help="Output format (default: from the output extension, else yaml)",
    )
    generate_parser.add_argument("--spec", metavar="NAME", help="Generate only the named document")
    generate_parser.add_argument("--multi", action="store_true", help="Generate every document")
    generate_parser.add_argument("--no-cache", action="store_true", help="Neither read nor write the cache")
    generate_parser.add_argument(
        "--keep-unused", action="store_true", help="Include schemas no operation references"
    )
    generate_parser.add_argument(
        "--inline-enums", action="store_true", help="Inline enumerations instead of referencing them"
    )
    generate_parser.add_argument(
        "--no-default", action="store_true", help="Leave the default document out of --multi output"
    )

    # specs subcommand
    subparsers.add_parser(
        "specs",
        parents=[common],
        help="List the documents the sources produce",
        description="Scan the sources and print the name of every document.",
    )

    # status subcommand
    subparsers.add_parser(
        "status",
        parents=[common],
        help="Show cache statistics and changed files",
        description="Compare the sources against the checksum cache.",
    )

    # clean subcommand
    subparsers.add_parser(
        "clean",
        parents=[common],
        help="Remove the checksum cache",
        description="Delete the cache directory below the source root.",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    _configure_logging(args.verbose)
    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "generate":
        return _cmd_generate(args)
    if args.command == "specs":
        return _cmd_specs(args)
    if args.command == "status":
        return _cmd_status(args)
    if args.command == "clean":
        return _cmd_clean(args)
    return 0


def _load_options(directory: Path) -> GeneratorOptions | None:
    """Options from the project configuration, or None after reporting an error."""
    if not directory.is_dir():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return None
    try:
        config = load_project_config(directory)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None
    return GeneratorOptions.from_config(directory, config)


def _cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate subcommand."""
    directory = Path(args.directory).resolve()
    options = _load_options(directory)
    if options is None:
        return 1

    if args.output:
        options.output = Path(args.output).resolve()
    if args.format:
        options.format = args.format
    elif args.output and Path(args.output).suffix:
        options.format = format_for_path(Path(args.output), options.format or "yaml")
    if args.no_cache:
        options.cache = False
    if args.keep_unused:
        options.clean_unused = False
    if args.inline_enums:
        options.enum_refs = False
    if args.no_default:
        options.no_default = True

    generator = Generator(options)
    try:
        written = generator.generate(document=args.spec, multi=args.multi)
    except (SourceLoadError, CacheError, AssemblyError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if isinstance(exc, CacheError):
            print("Run 'apiscribe clean' to reset the cache.", file=sys.stderr)
        return 1

    for issue in generator.issues:
        print(f"Warning: {issue.source}: {issue.message}")
    for path in written:
        print(f"Wrote {path}")
    return 0


def _cmd_specs(args: argparse.Namespace) -> int:
    """Handle the specs subcommand."""
    directory = Path(args.directory).resolve()
    options = _load_options(directory)
    if options is None:
        return 1
    options.cache = False

    try:
        names = Generator(options).document_names()
    except SourceLoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for name in names:
        print(name)
    return 0


def _cmd_status(args: argparse.Namespace) -> int:
    """Handle the status subcommand."""
    directory = Path(args.directory).resolve()
    options = _load_options(directory)
    if options is None:
        return 1

    generator = Generator(options)
    try:
        changed = generator.changed_files()
        removed = generator.removed_files()
    except (SourceLoadError, CacheError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    stats = generator.cache.stats()
    print(f"Cache: {generator.cache.index_path}")
    print(
        f"  {stats.files} file(s), {stats.schemas} schema(s), "
        f"{stats.routes} route(s), {stats.parameters} parameter set(s)"
    )
    if not changed and not removed:
        print("All sources are up to date.")
        return 0
    for path in changed:
        status = "modified" if generator.cache.get_entry(path) is not None else "new"
        print(f"  {status}: {path}")
    for path in removed:
        print(f"  removed: {path}")
    return 0


def _cmd_clean(args: argparse.Namespace) -> int:
    """Handle the clean subcommand."""
    directory = Path(args.directory).resolve()
    if not directory.is_dir():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    generator = Generator(GeneratorOptions(root=directory))
    if not generator.cache.directory.exists():
        print("No cache to remove.")
        return 0
    try:
        generator.cache.clean()
    except CacheError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Removed {generator.cache.directory}")
    return 0
