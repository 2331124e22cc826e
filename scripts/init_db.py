from __future__ import annotations

import importlib
from pathlib import Path

import structlog
from dotenv import load_dotenv

from config import get_settings_module

from cast_portal.common.logging_config import setup_logging
from cast_portal.database.bootstrap import apply_schema, list_tables
from cast_portal.database.connection import DatabaseConnection, DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(level="INFO", json_output=False)

    conn = DatabaseConnection(DBConfig.from_mapping(dict(settings.DB_CONFIG)))
    schema_path = Path(__file__).resolve().parents[1] / "database" / "schema.sql"
    apply_schema(conn, schema_path=schema_path)

    cfg = conn.config
    structlog.get_logger("cast_portal.scripts").info(
        "schema_applied",
        target=f"{cfg.user}@{cfg.host}:{cfg.port}/{cfg.database}",
        tables=len(list_tables(conn)),
    )


if __name__ == "__main__":
    main()
