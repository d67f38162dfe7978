"""Pulling environment variables for every deployment target."""

from envpull.sync.fanout import aggregate, build_sync_tasks, sync_all
from envpull.sync.puller import EnvPuller

__all__ = [
    "EnvPuller",
    "aggregate",
    "build_sync_tasks",
    "sync_all",
]
