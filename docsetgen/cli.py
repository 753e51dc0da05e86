"""CLI entrypoints for docsetgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .logging import configure_logging
from .orchestrator import Orchestrator
from .plugins import PluginExecutionError
from .validators import MissingReferenceError


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


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsetgen",
        description="Assemble a Dash docset from documentation plugins.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write detailed logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Run the configured plugins and write <identifier>.docset.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    build_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project directory containing .docset.yml (defaults to current directory).",
    )
    build_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Explicit configuration file (defaults to <path>/.docset.yml).",
    )
    build_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run plugins and validation without copying plugin content.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docsetgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "build":
        dry_run = bool(getattr(args, "dry_run", False))
        try:
            config = load_config(args.config or Path(args.path))
            result = Orchestrator().run_build(
                args.path,
                config=config,
                dry_run=dry_run,
                cli_args=vars(args),
            )
        except ConfigError as exc:
            parser.exit(1, f"Invalid configuration: {exc}\n")
        except (PluginExecutionError, MissingReferenceError) as exc:
            parser.exit(1, f"docsetgen build failed: {exc}\n")
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except Exception as exc:  # pragma: no cover - defensive guard
            parser.exit(1, f"docsetgen build failed: {exc}\nRun with --verbose for more details.\n")
        rel_path = _relativize(result.layout.base)
        suffix = " (dry-run)" if dry_run else ""
        print(f"Docset created at {rel_path} with {len(result.entries)} entries{suffix}")
        if result.archive is not None:
            print(f"Archive written to {_relativize(result.archive)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
