"""Test configuration and fixtures."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable, Sequence
from pathlib import Path

import httpx
import pytest

from envpull.api.client import ApiClient
from envpull.models import EnvTarget, Org, Project, ProjectLink, PullOptions

API_URL = "https://api.test"


@pytest.fixture
def personal_org() -> Org:
    return Org(id="user_123", slug="octo", type="user")


@pytest.fixture
def team_org() -> Org:
    return Org(id="team_T1", slug="acme", type="team")


@pytest.fixture
def project() -> Project:
    return Project.model_validate(
        {
            "id": "prj_P1",
            "name": "web",
            "accountId": "team_T1",
            "framework": "nextjs",
            "buildCommand": "next build",
            "nodeVersion": "20.x",
        }
    )


@pytest.fixture
def team_link(team_org: Org, project: Project) -> ProjectLink:
    return ProjectLink(org=team_org, project=project)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Provide an empty project directory."""
    path = tmp_path / "web"
    path.mkdir()
    return path


@pytest.fixture
def options(project_dir: Path) -> PullOptions:
    return PullOptions(cwd=project_dir, yes=True)


class RecordingPuller:
    """A puller that records every call and returns scripted exit codes.

    `codes` maps a destination file name to its exit code (default 0) and
    `delays` to a sleep in seconds before returning.
    """

    def __init__(
        self,
        codes: dict[str, int] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.codes = codes or {}
        self.delays = delays or {}
        self.calls: list[dict[str, object]] = []
        self.finished: list[str] = []

    async def pull(
        self,
        project: Project,
        target: EnvTarget,
        options: PullOptions,
        destinations: Sequence[Path],
        *,
        team_id: str | None = None,
    ) -> int:
        name = destinations[0].name
        self.calls.append(
            {
                "project": project.id,
                "target": target,
                "destinations": list(destinations),
                "team_id": team_id,
            }
        )
        await asyncio.sleep(self.delays.get(name, 0))
        self.finished.append(name)
        return self.codes.get(name, 0)


@pytest.fixture
def make_puller() -> Callable[..., RecordingPuller]:
    """Build a `RecordingPuller` with scripted exit codes and delays."""

    return RecordingPuller


@pytest.fixture
def recording_puller(make_puller: Callable[..., RecordingPuller]) -> RecordingPuller:
    return make_puller()


Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def make_api() -> Callable[[Handler], ApiClient]:
    """Build an `ApiClient` whose requests are answered by `handler`."""

    def _make(handler: Handler) -> ApiClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return ApiClient(token="test-token", base_url=API_URL, http=http)

    return _make


def write_link_file(cwd: Path, *, org_id: str, project_id: str) -> Path:
    path = cwd / ".vercel" / "project.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"projectId": project_id, "orgId": org_id}), encoding="utf-8")
    return path


@pytest.fixture
def write_link() -> Callable[..., Path]:
    """Write a `.vercel/project.json` link file into a directory."""

    return write_link_file
