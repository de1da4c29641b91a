#!/usr/bin/env python
"""Upgrade the database to the latest (or a given) alembic revision."""
import argparse
import os
from pathlib import Path

from alembic import command
from alembic.config import Config
from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[1]


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("revision", nargs="?", default="head")
    args = parser.parse_args()

    env_path = REPO_ROOT / ".env"
    if env_path.exists():
        load_dotenv(env_path)
    # Host-run migrations may target a different URL than the service.
    migrations_url = os.getenv("MIGRATIONS_DATABASE_URL")
    if migrations_url:
        os.environ["DATABASE_URL"] = migrations_url

    config = Config(str(REPO_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(REPO_ROOT / "alembic"))
    command.upgrade(config, args.revision)


if __name__ == "__main__":
    main()
