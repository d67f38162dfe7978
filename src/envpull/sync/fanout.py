"""Concurrent per-target environment downloads."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from envpull.link.store import VERCEL_DIR
from envpull.models import EnvTarget, Project, PullOptions, SyncTask

logger = logging.getLogger(__name__)


class TargetPuller(Protocol):
    async def pull(
        self,
        project: Project,
        target: EnvTarget,
        options: PullOptions,
        destinations: Sequence[Path],
        *,
        team_id: str | None = None,
    ) -> int: ...


def build_sync_tasks(env_file_root: str, cwd: Path) -> tuple[SyncTask, ...]:
    """The four downloads of a pull, in the order used to pick the exit code.

    The first task writes development variables to `cwd/<root>`, a location
    kept for older setups; the rest write `cwd/.vercel/<root>.<target>.local`.
    """

    vercel_dir = cwd / VERCEL_DIR
    return (
        SyncTask(
            target=EnvTarget.DEVELOPMENT,
            destinations=(cwd / env_file_root,),
            legacy=True,
        ),
        *(
            SyncTask(
                target=target,
                destinations=(vercel_dir / f"{env_file_root}.{target.value}.local",),
            )
            for target in (EnvTarget.DEVELOPMENT, EnvTarget.PREVIEW, EnvTarget.PRODUCTION)
        ),
    )


def aggregate(results: Sequence[int]) -> int:
    """First nonzero code in task order, or 0 when every task succeeded."""

    for code in results:
        if code != 0:
            return code
    return 0


async def sync_all(
    *,
    env_file_root: str,
    project: Project,
    options: PullOptions,
    cwd: Path,
    team_id: str | None,
    puller: TargetPuller,
) -> int:
    """Run every sync task concurrently and wait for all of them.

    A failing task never cancels its siblings. Results are reduced in task
    order, not completion order.
    """

    tasks = build_sync_tasks(env_file_root, cwd)
    logger.debug(
        "Pulling env files",
        extra={"project": project.name, "team_id": team_id, "tasks": len(tasks)},
    )

    outcomes = await asyncio.gather(
        *(
            puller.pull(project, task.target, options, task.destinations, team_id=team_id)
            for task in tasks
        ),
        return_exceptions=True,
    )

    results: list[int] = []
    for task, outcome in zip(tasks, outcomes, strict=True):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            logger.error(
                "Env pull crashed",
                extra={"target": task.label, "error": repr(outcome)},
            )
            results.append(1)
        else:
            results.append(outcome)

    code = aggregate(results)
    logger.debug("Env pull finished", extra={"results": results, "exit_code": code})
    return code
