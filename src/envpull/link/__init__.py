"""Linking a local directory to a remote project."""

from envpull.link.resolver import resolve_link
from envpull.link.setup_flow import LinkSetup, Prompter, RichPrompter
from envpull.link.store import VERCEL_DIR, VERCEL_DIR_PROJECT, ProjectLinkStore, link_folder

__all__ = [
    "VERCEL_DIR",
    "VERCEL_DIR_PROJECT",
    "LinkSetup",
    "ProjectLinkStore",
    "Prompter",
    "RichPrompter",
    "link_folder",
    "resolve_link",
]
