"""
CLI entrypoint for the session reaper. The service runs the same sweeps in the
background; use this when REAPER_ENABLED is false, e.g. from cron:

  python -m docvault.reaper          # expire, then delete
  python -m docvault.reaper expire
  python -m docvault.reaper delete

Hourly: 0 * * * * cd /path/to/docvault && .venv/bin/python -m docvault.reaper
"""

import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from docvault.core.database import SessionLocal
from docvault.services.reaper import delete_sweep, expire_sweep
from docvault.services.sessions import SessionRegistry

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Run one expire and/or delete sweep over the session records."""
    parser = argparse.ArgumentParser(description="Expire and delete aged session records.")
    parser.add_argument("sweep", nargs="?", default="all", choices=["expire", "delete", "all"])
    args = parser.parse_args(argv)

    registry = SessionRegistry(SessionLocal)
    try:
        expired = expire_sweep(registry) if args.sweep in ("expire", "all") else 0
        deleted = delete_sweep(registry) if args.sweep in ("delete", "all") else 0
    except SQLAlchemyError as e:
        logger.exception("Session reaper failed: %s", e)
        return 1
    logger.info("Session reaper completed: sessions_expired=%s sessions_deleted=%s", expired, deleted)
    return 0


if __name__ == "__main__":
    sys.exit(main())
