"""CLI entrypoints for ci-dokumentor commands."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Sequence

from .concurrency import FileResult, format_failures
from .config import (
    ConfigError,
    DokumentorConfig,
    load_config,
    parse_concurrency,
    parse_link_format,
    parse_sections,
)
from .formatter.base import LinkFormat
from .generator import MappingSectionProvider
from .logging import configure_logging
from .usecases import (
    GenerateDocumentationUseCase,
    MigrateDocumentationUseCase,
    UnknownToolError,
    build_generator_service,
    build_migration_service,
)


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _concurrency_arg(value: str) -> int:
    try:
        return parse_concurrency(value)
    except ConfigError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _add_batch_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "destinations",
        nargs="+",
        type=Path,
        metavar="DEST",
        help="Markdown files to update.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print a unified diff instead of writing the files.",
    )
    parser.add_argument(
        "--concurrency",
        type=_concurrency_arg,
        default=None,
        help="Maximum number of files processed at once (default: 5).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ci-dokumentor",
        description="Embed CI documentation into Markdown files and migrate foreign markers.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("."),
        help="Path to .ci-dokumentor.yml or the directory holding it.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    migrate_parser = subparsers.add_parser(
        "migrate",
        help="Convert another tool's documentation markers to ci-dokumentor sections.",
    )
    _add_verbose_option(migrate_parser, suppress_default=True)
    _add_batch_options(migrate_parser)
    migrate_parser.add_argument(
        "--tool",
        default=None,
        help="Migration tool to use; detected per file when omitted.",
    )
    migrate_parser.add_argument(
        "--scaffold",
        action="store_true",
        default=None,
        help="Append empty markers for every section missing after migration.",
    )

    generate_parser = subparsers.add_parser(
        "generate",
        help="Write sections from a YAML sections file into Markdown files.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_batch_options(generate_parser)
    generate_parser.add_argument(
        "--sections-file",
        type=Path,
        default=None,
        help="YAML mapping of section identifier to Markdown content.",
    )
    generate_parser.add_argument(
        "--section",
        action="append",
        dest="sections",
        default=None,
        metavar="ID",
        help="Only write this section (repeatable).",
    )
    generate_parser.add_argument(
        "--link-format",
        choices=[member.value for member in LinkFormat],
        default=None,
        help="How bare URLs in paragraphs are linked.",
    )

    tools_parser = subparsers.add_parser(
        "tools",
        help="List supported migration tools.",
    )
    _add_verbose_option(tools_parser, suppress_default=True)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for ci-dokumentor commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        parser.exit(1, f"Invalid configuration: {exc}\n")

    if args.command == "tools":
        service = build_migration_service()
        for name in service.supported_tools():
            print(name)
    elif args.command == "migrate":
        results = _run_migrate(parser, args, config)
        _report(parser, results, dry_run=bool(args.dry_run), verb="Migrated")
    elif args.command == "generate":
        results = _run_generate(parser, args, config)
        _report(parser, results, dry_run=bool(args.dry_run), verb="Generated")
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_migrate(
    parser: argparse.ArgumentParser, args: argparse.Namespace, config: DokumentorConfig
) -> List[FileResult]:
    scaffold = config.migration.scaffold if args.scaffold is None else bool(args.scaffold)
    tool = args.tool or config.migration.tool
    concurrency = args.concurrency or config.concurrency
    use_case = MigrateDocumentationUseCase(
        build_migration_service(scaffold=scaffold, link_format=config.formatter.link_format)
    )
    try:
        return asyncio.run(
            use_case.execute(
                args.destinations, tool=tool, dry_run=bool(args.dry_run), concurrency=concurrency
            )
        )
    except UnknownToolError as exc:
        parser.exit(1, f"{exc}\n")


def _run_generate(
    parser: argparse.ArgumentParser, args: argparse.Namespace, config: DokumentorConfig
) -> List[FileResult]:
    sections_file = args.sections_file or config.generate.sections_file
    if sections_file is None:
        parser.exit(1, "generate requires --sections-file or generate.sections_file in the config\n")
    try:
        provider = MappingSectionProvider.from_file(sections_file)
        sections = parse_sections(args.sections) if args.sections else config.generate.sections
        link_format = (
            parse_link_format(args.link_format) if args.link_format else config.formatter.link_format
        )
        use_case = GenerateDocumentationUseCase(build_generator_service(link_format=link_format))
        return asyncio.run(
            use_case.execute(
                args.destinations,
                provider,
                sections=sections or None,
                dry_run=bool(args.dry_run),
                concurrency=args.concurrency or config.concurrency,
            )
        )
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")


def _report(
    parser: argparse.ArgumentParser,
    results: Sequence[FileResult],
    *,
    dry_run: bool,
    verb: str,
) -> None:
    for result in results:
        if not result.success:
            continue
        if dry_run:
            print(f"Changes for {_relativize(result.destination)} (dry-run):")
            print(result.data or "(no diff)")
        else:
            print(f"{verb} {_relativize(result.destination)}")
    summary = format_failures(results)
    if summary:
        parser.exit(1, f"{summary}\nRun with --verbose for more details.\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
