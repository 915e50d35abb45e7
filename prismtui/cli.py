"""Command-line front door for prismtui.

Parses CLI options, resolves the launcher data directory, and configures
logging. Then dispatches into the interactive dashboard runtime.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from .actions.launch import DEFAULT_LAUNCHER_COMMAND
from .data import LauncherPaths, find_data_dir, load_groups, load_instances
from .errors import DataDirNotFoundError, DataLoadError
from .log_setup import configure_logging
from .runtime import run_app
from .ui_theme import available_theme_names


def resolve_data_dir(explicit: str | None) -> Path:
    """Return ``--data-dir`` when given, else the first discovered location."""
    if explicit is not None:
        path = Path(explicit).expanduser()
        if not path.is_dir():
            raise SystemExit(f"Data directory not found: {path}")
        return path
    try:
        return find_data_dir()
    except DataDirNotFoundError as exc:
        raise SystemExit(f"{exc}. Pass --data-dir or set PRISMLAUNCHER_DATA.") from exc


def list_instances(data_dir: Path) -> str:
    """Render one tab-separated line per instance for ``--list``."""
    paths = LauncherPaths.from_data_dir(data_dir)
    try:
        instances = load_instances(paths.instances_dir, load_groups(paths.groups_path))
    except DataLoadError as exc:
        raise SystemExit(f"Failed to load instances: {exc}") from exc
    out: list[str] = []
    for instance in instances:
        out.append(
            "\t".join(
                (
                    instance.id,
                    instance.name,
                    instance.minecraft_version,
                    instance.mod_loader or "Vanilla",
                    instance.group or "",
                    instance.formatted_playtime_full(),
                )
            )
        )
        out.append("\n")
    return "".join(out)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prismtui",
        description="Terminal dashboard for PrismLauncher instances, accounts, servers, and logs.",
    )
    parser.add_argument("--data-dir", default=None, help="PrismLauncher data directory (default: auto-detect).")
    parser.add_argument(
        "--launcher-command",
        default=DEFAULT_LAUNCHER_COMMAND,
        help=f"Launcher executable used to start instances (default: {DEFAULT_LAUNCHER_COMMAND}).",
    )
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--verbose", action="store_true", help="Write debug messages to the log file.")
    parser.add_argument("--list", action="store_true", help="Print instances and exit without starting the TUI.")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and launch the dashboard.

    ``argv`` is primarily for tests; when omitted ``sys.argv`` is used.
    """
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)
    data_dir = resolve_data_dir(args.data_dir)

    if args.list:
        sys.stdout.write(list_instances(data_dir))
        return

    if not sys.stdin.isatty() or not sys.stdout.isatty():
        raise SystemExit("prismtui needs an interactive terminal; use --list for plain output.")
    run_app(
        data_dir,
        launcher_command=args.launcher_command,
        theme_name=args.theme,
        no_color=args.no_color,
    )


if __name__ == "__main__":
    main()
