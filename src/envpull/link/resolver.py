"""Resolve the project link for a working directory.

Reuses an existing link when there is one and otherwise falls back to
interactive setup. The result is always exactly one of `Linked`, `Aborted`
or `Failed`; collaborator exit codes are passed through unchanged.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from envpull.models import (
    Aborted,
    Failed,
    Linked,
    LinkError,
    LinkFound,
    LinkLookup,
    LinkOutcome,
    NotLinked,
)

logger = logging.getLogger(__name__)


class LinkCache(Protocol):
    async def get_linked_project(self, cwd: Path) -> LinkLookup: ...


class LinkSetupFlow(Protocol):
    async def setup_and_link(
        self,
        cwd: Path,
        *,
        auto_confirm: bool,
        success_emoji: str = ...,
        setup_msg: str = ...,
    ) -> LinkLookup: ...


async def resolve_link(
    *,
    cwd: Path,
    auto_confirm: bool,
    store: LinkCache,
    setup: LinkSetupFlow,
) -> LinkOutcome:
    lookup = await store.get_linked_project(cwd)

    match lookup:
        case LinkFound(link=link):
            return Linked(link=link)
        case LinkError(exit_code=code):
            return Failed(exit_code=code)
        case NotLinked():
            pass

    logger.debug("No link found; starting setup", extra={"cwd": str(cwd)})
    lookup = await setup.setup_and_link(
        cwd,
        auto_confirm=auto_confirm,
        success_emoji="link",
        setup_msg="Set up",
    )

    match lookup:
        case LinkFound(link=link):
            return Linked(link=link)
        case LinkError(exit_code=code):
            return Failed(exit_code=code)
        case NotLinked():
            return Aborted()

    raise TypeError(f"Unexpected link lookup result: {lookup!r}")
