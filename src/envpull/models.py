"""Domain models shared by the link, sync and settings layers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

OrgType = Literal["user", "team"]


class EnvTarget(str, Enum):
    DEVELOPMENT = "development"
    PREVIEW = "preview"
    PRODUCTION = "production"


class Org(BaseModel):
    """The account a project belongs to: a personal account or a team."""

    model_config = ConfigDict(frozen=True)

    id: str
    slug: str
    type: OrgType

    @property
    def is_team(self) -> bool:
        return self.type == "team"

    @property
    def team_id(self) -> str | None:
        """Team scope for API requests; personal accounts are unscoped."""

        return self.id if self.is_team else None


class Project(BaseModel):
    """Remote project record, including the build settings we persist locally."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    name: str
    account_id: str | None = Field(default=None, alias="accountId")

    framework: str | None = None
    build_command: str | None = Field(default=None, alias="buildCommand")
    dev_command: str | None = Field(default=None, alias="devCommand")
    install_command: str | None = Field(default=None, alias="installCommand")
    output_directory: str | None = Field(default=None, alias="outputDirectory")
    root_directory: str | None = Field(default=None, alias="rootDirectory")
    directory_listing: bool = Field(default=False, alias="directoryListing")
    node_version: str | None = Field(default=None, alias="nodeVersion")

    def settings(self) -> dict[str, Any]:
        """Build settings in the camelCase shape written to `project.json`."""

        return self.model_dump(
            by_alias=True,
            include={
                "framework",
                "build_command",
                "dev_command",
                "install_command",
                "output_directory",
                "root_directory",
                "directory_listing",
                "node_version",
            },
        )


class ProjectLinkFile(BaseModel):
    """On-disk shape of `.vercel/project.json`."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    project_id: str = Field(alias="projectId", min_length=1)
    org_id: str = Field(alias="orgId", min_length=1)
    settings: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class ProjectLink:
    """A local directory's association with a remote org and project."""

    org: Org
    project: Project


# Results reported by the link cache lookup and by interactive setup.


@dataclass(frozen=True, slots=True)
class LinkFound:
    link: ProjectLink


@dataclass(frozen=True, slots=True)
class NotLinked:
    pass


@dataclass(frozen=True, slots=True)
class LinkError:
    exit_code: int


LinkLookup = LinkFound | NotLinked | LinkError


# Outcome of link resolution as seen by the pull command.


@dataclass(frozen=True, slots=True)
class Linked:
    link: ProjectLink


@dataclass(frozen=True, slots=True)
class Aborted:
    """The user declined to set up a link. Not a failure."""


@dataclass(frozen=True, slots=True)
class Failed:
    exit_code: int


LinkOutcome = Linked | Aborted | Failed


@dataclass(frozen=True, slots=True)
class SyncTask:
    """One per-target download and the file(s) it may write."""

    target: EnvTarget
    destinations: tuple[Path, ...]
    legacy: bool = False

    @property
    def label(self) -> str:
        return f"{self.target.value} (legacy)" if self.legacy else self.target.value


@dataclass(frozen=True, slots=True)
class PullOptions:
    """Parsed command line options for a pull."""

    cwd: Path
    env_file_root: str = ".env"
    yes: bool = False
    debug: bool = False
    token: str | None = None
    global_config: Path | None = None
    local_config: Path | None = None
