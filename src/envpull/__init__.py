"""envpull.

Links a local directory to a remote project and pulls its environment
variables for every deployment target:
- configuration loaded from `.env` and the environment
- structured logging
- concurrent per-target downloads with deterministic exit codes
"""

__version__ = "0.1.0"

from envpull.config import PullSettings

__all__ = ["__version__", "PullSettings"]
