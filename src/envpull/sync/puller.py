"""Download one target's environment variables into a local file."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable, Sequence
from pathlib import Path

from rich.prompt import Confirm

from envpull import output
from envpull.api.client import ApiClient, ApiError
from envpull.models import EnvTarget, Project, PullOptions
from envpull.sync.env_file import was_created_by_cli, write_env_file

logger = logging.getLogger(__name__)

ConfirmOverwrite = Callable[[Path], bool]


def _confirm_overwrite(path: Path) -> bool:
    return Confirm.ask(
        f"Found existing file “{path.name}”. Do you want to overwrite?",
        default=False,
        console=output.console,
    )


def pick_destination(candidates: Sequence[Path]) -> Path | None:
    """Return the first candidate that can hold a file."""

    for candidate in candidates:
        if not candidate.is_dir():
            return candidate
    return None


class EnvPuller:
    """Fetches a target's variables and writes them as a dotenv file.

    Every failure is reported and turned into a nonzero exit code; nothing
    is raised to the caller.
    """

    def __init__(
        self,
        api: ApiClient,
        *,
        confirm_overwrite: ConfirmOverwrite | None = None,
    ) -> None:
        self._api = api
        self._confirm_overwrite = confirm_overwrite or _confirm_overwrite
        # One prompt at a time across concurrently running targets.
        self._prompt_lock = asyncio.Lock()

    async def pull(
        self,
        project: Project,
        target: EnvTarget,
        options: PullOptions,
        destinations: Sequence[Path],
        *,
        team_id: str | None = None,
    ) -> int:
        path = pick_destination(destinations)
        if path is None:
            output.error(
                "No writable destination among: " + ", ".join(str(p) for p in destinations)
            )
            return 1

        display = _display_path(path, options.cwd)
        keep = False
        if not options.yes:
            async with self._prompt_lock:
                keep = await asyncio.to_thread(self._keep_existing, path)
        if keep:
            output.log(f"Aborted. Kept existing {display}")
            return 0

        elapsed = output.stamp()
        output.log(
            f"Downloading `{target.value}` Environment Variables for Project {project.name}"
        )
        try:
            env = await self._api.pull_env(project.id, target, team_id=team_id)
        except ApiError as e:
            output.error(f"Failed to download `{target.value}` Environment Variables: {e}")
            logger.warning(
                "Env download failed",
                extra={"target": target.value, "status": e.status, "path": str(path)},
            )
            return 1

        try:
            existed = await asyncio.to_thread(write_env_file, path, env)
        except OSError as e:
            output.error(f"Could not write {display}: {e}")
            logger.warning("Env file write failed", extra={"path": str(path)})
            return 1

        output.success(
            f"{'Updated' if existed else 'Created'} {display} file {elapsed()}"
        )
        logger.debug(
            "Wrote env file",
            extra={"target": target.value, "path": str(path), "variables": len(env)},
        )
        return 0

    def _keep_existing(self, path: Path) -> bool:
        """Ask before replacing a file the CLI did not write; True keeps it."""

        if not path.exists() or was_created_by_cli(path):
            return False
        return not self._confirm_overwrite(path)


def _display_path(path: Path, cwd: Path) -> str:
    try:
        return os.path.relpath(path, cwd)
    except ValueError:
        return str(path)
