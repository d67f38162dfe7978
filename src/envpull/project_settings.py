"""Persist the resolved project identity and build settings locally."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from envpull.link.store import project_file
from envpull.models import Org, Project, ProjectLinkFile

logger = logging.getLogger(__name__)


def write_project_settings(cwd: Path, project: Project, org: Org) -> Path:
    """Overwrite `.vercel/project.json` with the project, org and settings.

    Returns:
        Path of the written file.
    """

    record = ProjectLinkFile(project_id=project.id, org_id=org.id, settings=project.settings())
    path = project_file(cwd)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(record.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)
        + "\n",
        encoding="utf-8",
    )
    logger.info("Project settings persisted", extra={"path": str(path), "project": project.id})
    return path
