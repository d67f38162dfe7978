"""The pull command.

Sequences a run through explicit states:

    PARSING_ARGS -> RESOLVING -> SYNCING -> PERSISTING -> DONE

Any of the first three states may jump straight to DONE with an exit code.
Project settings are only written after every env file was pulled.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import AsyncExitStack
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import ValidationError

from envpull import output
from envpull.api.client import ApiClient
from envpull.args import HELP, ArgumentError, HelpRequested, parse_args
from envpull.config import PullSettings
from envpull.link.resolver import LinkCache, LinkSetupFlow, resolve_link
from envpull.link.setup_flow import LinkSetup
from envpull.link.store import VERCEL_DIR, VERCEL_DIR_PROJECT, ProjectLinkStore
from envpull.logging import configure_logging
from envpull.models import Aborted, Failed, Linked, Org, Project, PullOptions
from envpull.project_settings import write_project_settings
from envpull.sync.fanout import TargetPuller, sync_all
from envpull.sync.puller import EnvPuller

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


class PullState(str, Enum):
    PARSING_ARGS = "parsing_args"
    RESOLVING = "resolving"
    SYNCING = "syncing"
    PERSISTING = "persisting"
    DONE = "done"


ALLOWED_TRANSITIONS: dict[PullState, set[PullState]] = {
    PullState.PARSING_ARGS: {PullState.RESOLVING, PullState.DONE},
    PullState.RESOLVING: {PullState.SYNCING, PullState.DONE},
    PullState.SYNCING: {PullState.PERSISTING, PullState.DONE},
    PullState.PERSISTING: {PullState.DONE},
    PullState.DONE: set(),
}


class IllegalTransitionError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class PullServices:
    """Collaborators used by a run."""

    store: LinkCache
    setup: LinkSetupFlow
    puller: TargetPuller
    persist: Callable[[Path, Project, Org], Path] = write_project_settings


class PullCommand:
    """Runs one pull and returns the process exit code."""

    def __init__(
        self,
        *,
        settings: PullSettings | None = None,
        services: PullServices | None = None,
        cwd: Path | None = None,
    ) -> None:
        self._settings = settings
        self._services = services
        self._cwd = cwd
        self.state = PullState.PARSING_ARGS
        self.exit_code: int | None = None
        self.team_id: str | None = None

    def _transition(self, to: PullState) -> None:
        if to not in ALLOWED_TRANSITIONS[self.state]:
            raise IllegalTransitionError(
                f"Illegal transition: {self.state.value} -> {to.value}"
            )
        logger.debug("Pull state", extra={"from": self.state.value, "to": to.value})
        self.state = to

    def _finish(self, code: int) -> int:
        self._transition(PullState.DONE)
        self.exit_code = code
        return code

    async def run(self, argv: list[str]) -> int:
        try:
            options = parse_args(argv, cwd=self._cwd)
        except HelpRequested:
            output.console.print(HELP, markup=False, highlight=False)
            return self._finish(EXIT_USAGE)
        except ArgumentError as e:
            output.error(str(e))
            return self._finish(EXIT_ERROR)

        if self._services is not None:
            return await self._run(options, self._services)

        try:
            settings = self._settings or _load_settings(options)
            token = settings.resolve_token(options.token)
        except (ValidationError, ValueError) as e:
            output.error(f"Configuration error: {e}")
            return self._finish(EXIT_ERROR)

        configure_logging(settings.log_level, debug=options.debug)

        async with AsyncExitStack() as stack:
            api = await stack.enter_async_context(
                ApiClient(
                    token=token,
                    base_url=settings.api_url,
                    timeout=settings.http_timeout_seconds,
                )
            )
            services = PullServices(
                store=ProjectLinkStore(api),
                setup=LinkSetup(api),
                puller=EnvPuller(api),
            )
            return await self._run(options, services)

    async def _run(self, options: PullOptions, services: PullServices) -> int:
        cwd = options.cwd
        if options.local_config is not None:
            logger.debug("Using local config", extra={"path": str(options.local_config)})

        self._transition(PullState.RESOLVING)
        outcome = await resolve_link(
            cwd=cwd, auto_confirm=options.yes, store=services.store, setup=services.setup
        )
        match outcome:
            case Aborted():
                return self._finish(EXIT_OK)
            case Failed(exit_code=code):
                return self._finish(code)
            case Linked(link=link):
                org, project = link.org, link.project

        # Team scope is fixed here, once, and handed to every download.
        self.team_id = org.team_id
        logger.info(
            "Project linked",
            extra={"org": org.slug, "project": project.name, "team_id": self.team_id},
        )

        self._transition(PullState.SYNCING)
        code = await sync_all(
            env_file_root=options.env_file_root,
            project=project,
            options=options,
            cwd=cwd,
            team_id=self.team_id,
            puller=services.puller,
        )
        if code != 0:
            return self._finish(code)

        self._transition(PullState.PERSISTING)
        elapsed = output.stamp()
        services.persist(cwd, project, org)
        output.success(
            f"Downloaded project settings to {Path(VERCEL_DIR) / VERCEL_DIR_PROJECT} {elapsed()}"
        )
        return self._finish(EXIT_OK)


def _load_settings(options: PullOptions) -> PullSettings:
    if options.global_config is not None:
        return PullSettings(global_config_dir=options.global_config)
    return PullSettings()
