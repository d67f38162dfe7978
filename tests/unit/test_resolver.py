"""Unit tests for link resolution."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

from envpull.link.resolver import resolve_link
from envpull.link.setup_flow import LinkSetup
from envpull.link.store import ProjectLinkStore
from envpull.models import (
    Aborted,
    Failed,
    Linked,
    LinkError,
    LinkFound,
    NotLinked,
    ProjectLink,
)


def _collaborators(store_result, setup_result=None) -> tuple[Mock, Mock]:
    store = Mock(spec=ProjectLinkStore)
    store.get_linked_project = AsyncMock(return_value=store_result)
    setup = Mock(spec=LinkSetup)
    setup.setup_and_link = AsyncMock(return_value=setup_result)
    return store, setup


@pytest.mark.asyncio
async def test_existing_link_skips_setup(tmp_path: Path, team_link: ProjectLink) -> None:
    store, setup = _collaborators(LinkFound(link=team_link))

    outcome = await resolve_link(cwd=tmp_path, auto_confirm=False, store=store, setup=setup)

    assert outcome == Linked(link=team_link)
    store.get_linked_project.assert_awaited_once_with(tmp_path)
    setup.setup_and_link.assert_not_called()


@pytest.mark.asyncio
async def test_unlinked_directory_runs_setup(tmp_path: Path, team_link: ProjectLink) -> None:
    store, setup = _collaborators(NotLinked(), LinkFound(link=team_link))

    outcome = await resolve_link(cwd=tmp_path, auto_confirm=True, store=store, setup=setup)

    assert outcome == Linked(link=team_link)
    setup.setup_and_link.assert_awaited_once_with(
        tmp_path, auto_confirm=True, success_emoji="link", setup_msg="Set up"
    )


@pytest.mark.asyncio
async def test_declined_setup_is_aborted(tmp_path: Path) -> None:
    store, setup = _collaborators(NotLinked(), NotLinked())

    outcome = await resolve_link(cwd=tmp_path, auto_confirm=False, store=store, setup=setup)

    assert outcome == Aborted()


@pytest.mark.asyncio
async def test_lookup_error_code_passes_through(tmp_path: Path) -> None:
    store, setup = _collaborators(LinkError(exit_code=17))

    outcome = await resolve_link(cwd=tmp_path, auto_confirm=False, store=store, setup=setup)

    assert outcome == Failed(exit_code=17)
    setup.setup_and_link.assert_not_called()


@pytest.mark.asyncio
async def test_setup_error_code_passes_through(tmp_path: Path) -> None:
    store, setup = _collaborators(NotLinked(), LinkError(exit_code=42))

    outcome = await resolve_link(cwd=tmp_path, auto_confirm=False, store=store, setup=setup)

    assert outcome == Failed(exit_code=42)
