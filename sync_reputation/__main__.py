"""
sync_reputation.__main__ — Entry point for ``python -m sync_reputation``
========================================================================

Commands:
    serve       Run the API with uvicorn on ``api_port`` from config.yaml.
    init-db     Create tables (dev; production uses ``alembic upgrade head``).
    seed-demo   Insert demo businesses spanning every badge tier.
    recompute   Rebuild every cached badge from approved reviews.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from sync_reputation.config import load_config
from sync_reputation.database.engine import create_db_engine, init_db
from sync_reputation.database.seed import seed_demo_data
from sync_reputation.services.reputation_service import recompute_all

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("sync_reputation")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sync_reputation")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("serve", help="run the HTTP API")
    sub.add_parser("init-db", help="create database tables")
    sub.add_parser("seed-demo", help="insert demo businesses and reviews")
    sub.add_parser("recompute", help="recompute every business badge")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    load_dotenv()

    if not os.getenv("DATABASE_URL"):
        logger.critical(
            "DATABASE_URL is not set.  "
            "Copy .env.example → .env and set a valid PostgreSQL URL."
        )
        return 1

    if args.command == "serve":
        import uvicorn

        cfg = load_config()
        logger.info("Starting %s reputation API on port %d…", cfg.app_name, cfg.api_port)
        uvicorn.run("sync_reputation.api.main:app", host="0.0.0.0", port=cfg.api_port)
        return 0

    engine = create_db_engine()
    init_db(engine)
    if args.command == "seed-demo":
        seed_demo_data(engine)
    elif args.command == "recompute":
        changed = recompute_all(engine)
        logger.info("Done — %d badge(s) changed", changed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
