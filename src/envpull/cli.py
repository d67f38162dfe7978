"""CLI entrypoint for `envpull`."""

from __future__ import annotations

import asyncio
import logging
import sys

from envpull.pull import EXIT_ERROR, PullCommand

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    try:
        return asyncio.run(PullCommand().run(args))
    except KeyboardInterrupt:
        return EXIT_ERROR
    except Exception:
        logger.exception("Command failed")
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
