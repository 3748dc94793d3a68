"""CLI entrypoints for changegen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .git.history import GitError
from .logging import configure_logging
from .orchestrator import Orchestrator
from .version import MalformedVersionError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Enable verbose logging.",
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


def _add_log_file_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a DEBUG-level log of the run to this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="changegen",
        description="Generate a versioned CHANGELOG.md from conventional commit history.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Create or update the changelog with commits not yet recorded.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_log_file_option(generate_parser)
    generate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the git repository (defaults to current directory).",
    )
    generate_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output changelog file path, relative to the repository (default: CHANGELOG.md).",
    )
    generate_parser.add_argument(
        "-u",
        "--url",
        default=None,
        help="Remote repository URL (e.g., https://github.com/owner/repo).",
    )
    generate_parser.add_argument(
        "-f",
        "--follow",
        nargs="*",
        default=None,
        help="Paths to filter commits by; each path gets its own section.",
    )
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the new changelog sections without writing the file.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the changegen HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_log_file_option(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for changegen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=getattr(args, "log_file", None))

    if args.command == "generate":
        orchestrator = Orchestrator()
        dry_run = bool(getattr(args, "dry_run", False))
        try:
            outcome = orchestrator.run_generate(
                args.path,
                output=args.output,
                url=args.url,
                follow=args.follow,
                dry_run=dry_run,
            )
        except MalformedVersionError as exc:
            parser.exit(1, f"invalid version in changelog: {exc}\n")
        except (GitError, ConfigError) as exc:
            parser.exit(1, f"changegen generate failed: {exc}\nRun with --verbose for more details.\n")
        except OSError as exc:
            parser.exit(1, f"changegen generate failed: {exc}\n")

        if dry_run:
            if outcome.new_content:
                print("Changelog changes (dry-run):")
                print(outcome.new_content, end="")
            else:
                print("Changelog already up to date (dry-run)")
        elif outcome.written:
            for release in outcome.released:
                print(f"{release.title}: {release.entry_count} new entries")
            print(f"Changelog updated at {_relativize(outcome.path)}")
        else:
            print("Changelog already up to date")
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
