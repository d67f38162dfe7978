"""Dotenv file rendering."""

from __future__ import annotations

from pathlib import Path

CONTENTS_PREFIX = "# Created by Vercel CLI\n"


def _quote(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\r", "\\r")
        .replace("\n", "\\n")
    )
    return f'"{escaped}"'


def render_env_file(env: dict[str, str]) -> str:
    """Render variables as a dotenv file, keys sorted for stable diffs."""

    lines = [f"{key}={_quote(env[key])}" for key in sorted(env)]
    return CONTENTS_PREFIX + "".join(line + "\n" for line in lines)


def was_created_by_cli(path: Path) -> bool:
    """True when `path` starts with the header this tool writes."""

    try:
        with path.open("r", encoding="utf-8") as fh:
            head = fh.read(len(CONTENTS_PREFIX))
    except (OSError, UnicodeDecodeError):
        return False
    return head == CONTENTS_PREFIX


def write_env_file(path: Path, env: dict[str, str]) -> bool:
    """Overwrite `path` with the rendered variables.

    Returns:
        True if the file already existed.
    """

    existed = path.exists()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_env_file(env), encoding="utf-8")
    return existed
