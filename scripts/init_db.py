from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.class_attendance.class_attendance.common.log import configure_logging
from src.class_attendance.class_attendance.database.bootstrap import apply_schema, list_tables

logger = logging.getLogger("class_attendance.scripts.init_db")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create the attendance-list tables in MySQL.")
    parser.add_argument("--schema", type=Path, default=REPO_ROOT / "database" / "schema.sql")
    parser.add_argument("--list-tables", action="store_true", help="only print the tables that exist")
    args = parser.parse_args(argv)

    configure_logging("INFO")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    if not args.list_tables:
        apply_schema(db_config, schema_path=args.schema)
        logger.info("database ready: %s", target)

    for table in list_tables(db_config):
        print(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())
