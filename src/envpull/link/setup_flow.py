"""Interactive setup that links an unlinked directory to a project."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from rich.prompt import Confirm, IntPrompt, Prompt

from envpull import output
from envpull.api.client import ApiClient, ApiError
from envpull.link.store import VERCEL_DIR, link_folder
from envpull.models import LinkError, LinkFound, LinkLookup, NotLinked, Org, Project, ProjectLink

logger = logging.getLogger(__name__)

_INVALID_NAME_CHARS = re.compile(r"[^a-z0-9._-]+")


class Prompter(Protocol):
    def confirm(self, message: str, *, default: bool) -> bool: ...

    def text(self, message: str, *, default: str) -> str: ...

    def select(self, message: str, choices: list[str]) -> int: ...


class RichPrompter:
    """Prompts on the terminal through `rich.prompt`."""

    def confirm(self, message: str, *, default: bool) -> bool:
        return Confirm.ask(message, default=default, console=output.console)

    def text(self, message: str, *, default: str) -> str:
        return Prompt.ask(message, default=default, console=output.console)

    def select(self, message: str, choices: list[str]) -> int:
        for idx, choice in enumerate(choices, start=1):
            output.console.print(f"  {idx}) {choice}", markup=False)
        picked = IntPrompt.ask(
            message,
            choices=[str(i) for i in range(1, len(choices) + 1)],
            default=1,
            console=output.console,
        )
        return picked - 1


@dataclass(frozen=True, slots=True)
class _ChosenProject:
    project: Project
    existed: bool


def slugify_project_name(name: str) -> str:
    slug = _INVALID_NAME_CHARS.sub("-", name.lower()).strip("-.")
    return slug[:100] or "project"


class LinkSetup:
    """Walks the user through choosing a scope and a project for `cwd`."""

    def __init__(self, api: ApiClient, *, prompter: Prompter | None = None) -> None:
        self._api = api
        self._prompter = prompter or RichPrompter()

    async def setup_and_link(
        self,
        cwd: Path,
        *,
        auto_confirm: bool,
        success_emoji: str = "link",
        setup_msg: str = "Set up",
    ) -> LinkLookup:
        path = cwd.resolve()
        if not path.is_dir():
            output.error(f"{path} is not a directory")
            return LinkError(exit_code=1)

        try:
            if not auto_confirm and not self._prompter.confirm(
                f"{setup_msg} “{path}”?", default=True
            ):
                output.log("Aborted. Project not set up.")
                return NotLinked()

            org = await self._choose_org(auto_confirm=auto_confirm)
            default_name = slugify_project_name(path.name)
            project = await self._choose_project(
                org, default_name=default_name, auto_confirm=auto_confirm
            )
        except (KeyboardInterrupt, EOFError):
            output.log("Aborted. Project not set up.")
            return NotLinked()
        except ApiError as e:
            output.error(str(e))
            logger.warning("Project setup failed", extra={"status": e.status})
            return LinkError(exit_code=1)

        if project is None:
            output.log("Aborted. Project not set up.")
            return NotLinked()

        try:
            link_folder(path, org, project.project)
        except OSError as e:
            output.error(f"Could not write {VERCEL_DIR} in {path}: {e}")
            return LinkError(exit_code=1)

        output.console.print(
            output.prepend_emoji(
                f"{'Linked' if project.existed else 'Created and linked'} to "
                f"{org.slug}/{project.project.name} (created {VERCEL_DIR})",
                success_emoji,
            ),
            markup=False,
        )
        return LinkFound(link=ProjectLink(org=org, project=project.project))

    async def _choose_org(self, *, auto_confirm: bool) -> Org:
        user = await self._api.get_user()
        if auto_confirm:
            return user

        teams = await self._api.list_teams()
        if not teams:
            return user
        orgs = [user, *teams]
        picked = self._prompter.select(
            "Which scope do you want to use?",
            [f"{o.slug} ({'personal' if not o.is_team else 'team'})" for o in orgs],
        )
        return orgs[picked]

    async def _choose_project(
        self, org: Org, *, default_name: str, auto_confirm: bool
    ) -> _ChosenProject | None:
        if auto_confirm:
            existing = await self._api.find_project(default_name, team_id=org.team_id)
            if existing is not None:
                return _ChosenProject(project=existing, existed=True)
            created = await self._api.create_project(default_name, team_id=org.team_id)
            return _ChosenProject(project=created, existed=False)

        if self._prompter.confirm("Link to existing project?", default=False):
            name = self._prompter.text(
                "What’s the name of your existing project?", default=""
            ).strip()
            if not name:
                return None
            existing = await self._api.find_project(name, team_id=org.team_id)
            if existing is None:
                output.error(f"Project not found: {name}")
                return None
            return _ChosenProject(project=existing, existed=True)

        name = slugify_project_name(
            self._prompter.text("What’s your project’s name?", default=default_name)
        )
        existing = await self._api.find_project(name, team_id=org.team_id)
        if existing is not None:
            output.log(f"Project {name} already exists, linking to it.")
            return _ChosenProject(project=existing, existed=True)
        created = await self._api.create_project(name, team_id=org.team_id)
        return _ChosenProject(project=created, existed=False)

