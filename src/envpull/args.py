"""Command line grammar for `envpull`."""

from __future__ import annotations

import argparse
from pathlib import Path

from envpull.models import PullOptions

DEFAULT_ENV_FILE = ".env"

HELP = """
  envpull [path]

  Options:

    -h, --help                     Output usage information
    -A FILE, --local-config=FILE   Path to the local `vercel.json` file
    -Q DIR, --global-config=DIR    Path to the global `.vercel` directory
    -d, --debug                    Debug mode [off]
    --env [filename]               The file to write Development Environment Variables to [.env]
    -t TOKEN, --token=TOKEN        Login token
    -y, --yes                      Skip the confirmation prompt

  Examples:

  – Pull the latest Project Settings from the cloud

    $ envpull
    $ envpull ./path-to-project
    $ envpull --env .env.local
    $ envpull ./path-to-project --env .env.local
"""


class ArgumentError(Exception):
    """Raised when the command line cannot be parsed."""


class HelpRequested(Exception):
    """Raised when `--help` is passed."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise ArgumentError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="envpull", add_help=False)
    parser.add_argument("path", nargs="?", default=None)
    parser.add_argument("-h", "--help", action="store_true", dest="help")
    parser.add_argument("-y", "--yes", action="store_true")
    parser.add_argument("-d", "--debug", action="store_true")
    parser.add_argument("--env", default=DEFAULT_ENV_FILE)
    parser.add_argument("-t", "--token", default=None)
    parser.add_argument("-Q", "--global-config", dest="global_config", default=None)
    parser.add_argument("-A", "--local-config", dest="local_config", default=None)
    return parser


def parse_args(argv: list[str], *, cwd: Path | None = None) -> PullOptions:
    """Parse `argv` into options.

    Raises:
        HelpRequested if help was asked for.
        ArgumentError if the arguments are malformed.
    """

    ns = build_parser().parse_args(argv)
    if ns.help:
        raise HelpRequested()

    env_file_root = ns.env.strip()
    if not env_file_root:
        raise ArgumentError("--env requires a non-empty file name")
    if Path(env_file_root).name != env_file_root:
        raise ArgumentError(f"--env must be a file name, not a path: {env_file_root}")

    base = cwd or Path.cwd()
    target_dir = (base / ns.path) if ns.path else base

    return PullOptions(
        cwd=target_dir,
        env_file_root=env_file_root,
        yes=ns.yes,
        debug=ns.debug,
        token=ns.token,
        global_config=Path(ns.global_config).expanduser() if ns.global_config else None,
        local_config=Path(ns.local_config).expanduser() if ns.local_config else None,
    )
