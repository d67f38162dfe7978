"""Local project link cache (`.vercel/project.json`)."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import ValidationError

from envpull import output
from envpull.api.client import ApiClient, ApiError
from envpull.models import (
    LinkError,
    LinkFound,
    LinkLookup,
    NotLinked,
    Org,
    Project,
    ProjectLink,
    ProjectLinkFile,
)

logger = logging.getLogger(__name__)

VERCEL_DIR = ".vercel"
VERCEL_DIR_PROJECT = "project.json"
VERCEL_DIR_README = "README.txt"

ORG_ID_ENV = "VERCEL_ORG_ID"
PROJECT_ID_ENV = "VERCEL_PROJECT_ID"

_README = """> Why do I have a folder named ".vercel" in my project?
The ".vercel" folder is created when you link a directory to a project.

> What does the "project.json" file contain?
The "project.json" file contains:
- The ID of the project that you linked ("projectId")
- The ID of the user or the team your project is owned by ("orgId")

> Should I commit the ".vercel" folder?
No, you should not share the ".vercel" folder with anyone.
Upon creation, it will be automatically added to your ".gitignore" file.
"""


def project_file(cwd: Path) -> Path:
    return cwd / VERCEL_DIR / VERCEL_DIR_PROJECT


class ProjectLinkStore:
    """Reads and writes the link between a directory and a remote project."""

    def __init__(self, api: ApiClient, *, environ: Mapping[str, str] | None = None) -> None:
        self._api = api
        self._environ = os.environ if environ is None else environ

    def read_link_file(self, cwd: Path) -> ProjectLinkFile | None:
        """Return the stored link identity, or None when the directory is not linked.

        Raises:
            ValueError if the file exists but cannot be parsed.
        """

        path = project_file(cwd)
        if not path.exists():
            return None
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            return ProjectLinkFile.model_validate(raw)
        except (json.JSONDecodeError, ValidationError) as e:
            raise ValueError(f"{path} is not a valid project link file: {e}") from e

    def _link_ids_from_env(self) -> tuple[str, str] | None:
        org_id = (self._environ.get(ORG_ID_ENV) or "").strip()
        project_id = (self._environ.get(PROJECT_ID_ENV) or "").strip()
        if not org_id and not project_id:
            return None
        if not org_id or not project_id:
            raise ValueError(
                f"You specified `{ORG_ID_ENV}` but you forgot to specify `{PROJECT_ID_ENV}`."
                if org_id
                else f"You specified `{PROJECT_ID_ENV}` but you forgot to specify `{ORG_ID_ENV}`."
            )
        return org_id, project_id

    async def get_linked_project(self, cwd: Path) -> LinkLookup:
        try:
            ids = self._link_ids_from_env()
            if ids is None:
                stored = self.read_link_file(cwd)
                if stored is None:
                    logger.debug("Directory is not linked", extra={"cwd": str(cwd)})
                    return NotLinked()
                ids = (stored.org_id, stored.project_id)
        except ValueError as e:
            output.error(str(e))
            return LinkError(exit_code=1)

        org_id, project_id = ids
        try:
            org = await self._api.get_org(org_id)
            project = await self._api.get_project(project_id, team_id=org.team_id)
        except ApiError as e:
            if e.is_not_found:
                output.error(
                    "Could not retrieve Project Settings. To link your Project, "
                    f"remove the `{VERCEL_DIR}` directory and deploy again."
                )
            elif e.is_forbidden:
                output.error(
                    f"Could not retrieve Project Settings for {org_id}: {e.message}. "
                    "Check that your token has access to this scope."
                )
            else:
                output.error(str(e))
            logger.warning(
                "Failed to resolve linked project",
                extra={"org_id": org_id, "project_id": project_id, "status": e.status},
            )
            return LinkError(exit_code=1)

        logger.debug(
            "Resolved linked project", extra={"org": org.slug, "project": project.name}
        )
        return LinkFound(link=ProjectLink(org=org, project=project))


def link_folder(cwd: Path, org: Org, project: Project) -> Path:
    """Write the link file for `cwd` and keep `.vercel` out of git.

    Returns:
        Path of the written link file.
    """

    vercel_dir = cwd / VERCEL_DIR
    vercel_dir.mkdir(parents=True, exist_ok=True)

    readme = vercel_dir / VERCEL_DIR_README
    if not readme.exists():
        readme.write_text(_README, encoding="utf-8")

    path = vercel_dir / VERCEL_DIR_PROJECT
    payload = {"projectId": project.id, "orgId": org.id}
    path.write_text(json.dumps(payload) + "\n", encoding="utf-8")

    _add_to_gitignore(cwd, VERCEL_DIR)
    logger.info("Linked directory", extra={"cwd": str(cwd), "project_id": project.id})
    return path


def _add_to_gitignore(cwd: Path, entry: str) -> bool:
    gitignore = cwd / ".gitignore"
    existing = gitignore.read_text(encoding="utf-8") if gitignore.exists() else ""
    lines = {line.strip().rstrip("/") for line in existing.splitlines()}
    if entry in lines:
        return False

    prefix = "" if not existing or existing.endswith("\n") else "\n"
    gitignore.write_text(existing + prefix + entry + "\n", encoding="utf-8")
    return True
