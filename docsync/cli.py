"""CLI entrypoints for docsync commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, SyncConfig, load_config
from .logging import configure_logging
from .pipeline import SyncError, SyncPipeline
from .source_scanner import SourceScanner


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


def _add_path_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also append log records to this file.",
    )
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .docsync.yml or the directory holding it (defaults to current directory).",
    )
    parser.add_argument(
        "--source",
        default=None,
        help="Java source root (defaults to ../src/main/java).",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Reference page output root (defaults to src/content/reference).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsync",
        description="Generate Markdown reference pages from Javadoc comments.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser(
        "sync",
        help="Regenerate all reference pages once.",
    )
    _add_verbose_option(sync_parser, suppress_default=True)
    _add_path_options(sync_parser)

    watch_parser = subparsers.add_parser(
        "watch",
        help="Serve the live-reload endpoint and regenerate pages when sources change.",
    )
    _add_verbose_option(watch_parser, suppress_default=True)
    _add_path_options(watch_parser)
    watch_parser.add_argument("--host", default=None, help="Interface to bind the dev server to.")
    watch_parser.add_argument("--port", type=int, default=None, help="Port for the dev server.")

    return parser


def _resolve_config(args: argparse.Namespace) -> SyncConfig:
    config = load_config(Path(args.config))
    if args.source:
        config.source_root = Path(args.source).expanduser().resolve()
    if args.output:
        config.output_root = Path(args.output).expanduser().resolve()
    return config


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docsync commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=args.log_file,
        label=f"docsync {args.command}",
    )

    try:
        config = _resolve_config(args)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "sync":
        pipeline = SyncPipeline(
            scanner=SourceScanner(extension=config.extension, exclude_paths=config.exclude_paths)
        )
        try:
            result = pipeline.run(config.source_root, config.output_root)
        except SyncError as exc:
            parser.exit(1, f"docsync sync failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Generated {result.generated} reference pages.")
        if result.failures:
            print(f"{len(result.failures)} source file(s) could not be processed; see log output.")
    elif args.command == "watch":
        from .service import run_service

        run_service(config, host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
