"""Unit tests for persisting project settings."""

from __future__ import annotations

import json
from pathlib import Path

from envpull.models import Org, Project
from envpull.project_settings import write_project_settings


def test_settings_file_shape(project_dir: Path, project: Project, team_org: Org) -> None:
    path = write_project_settings(project_dir, project, team_org)

    assert path == project_dir / ".vercel" / "project.json"
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw == {
        "projectId": "prj_P1",
        "orgId": "team_T1",
        "settings": {
            "framework": "nextjs",
            "buildCommand": "next build",
            "devCommand": None,
            "installCommand": None,
            "outputDirectory": None,
            "rootDirectory": None,
            "directoryListing": False,
            "nodeVersion": "20.x",
        },
    }


def test_settings_overwrite_is_idempotent(
    project_dir: Path, project: Project, team_org: Org
) -> None:
    path = write_project_settings(project_dir, project, team_org)
    first = path.read_text(encoding="utf-8")

    write_project_settings(project_dir, project, team_org)

    assert path.read_text(encoding="utf-8") == first
