"""
Configuration for the table query layer.

Values come from the environment, with a local .env file loaded first:

    TABLEQUERY_DRIVER           sqlite | snowflake          (default: sqlite)
    TABLEQUERY_SQLITE_PATH      sqlite database file        (default: tablequery.db)
    TABLEQUERY_TABLES_FILE      table definitions YAML/JSON (default: config/tables.yaml)
    TABLEQUERY_CHARSET_COLLATE  suffix for CREATE TABLE     (default: empty)
    TABLEQUERY_AUTO_CREATE      create configured tables on first use
    TABLEQUERY_LOG_LEVEL        level for the "tablequery" logger
    SNOWFLAKE_DATABASE / SNOWFLAKE_SCHEMA
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass
class Settings:
    driver: str = "sqlite"
    sqlite_path: str = "tablequery.db"
    tables_file: str = "config/tables.yaml"
    charset_collate: str = ""
    auto_create: bool = False
    log_level: str = "WARNING"
    snowflake_database: str = ""
    snowflake_schema: str = ""


def _env_flag(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


def load_settings(*, dotenv: bool = True) -> Settings:
    if dotenv:
        load_dotenv()
    return Settings(
        driver=os.getenv("TABLEQUERY_DRIVER", "sqlite"),
        sqlite_path=os.getenv("TABLEQUERY_SQLITE_PATH", "tablequery.db"),
        tables_file=os.getenv("TABLEQUERY_TABLES_FILE", "config/tables.yaml"),
        charset_collate=os.getenv("TABLEQUERY_CHARSET_COLLATE", ""),
        auto_create=_env_flag("TABLEQUERY_AUTO_CREATE", default=False),
        log_level=os.getenv("TABLEQUERY_LOG_LEVEL", "WARNING"),
        snowflake_database=os.getenv("SNOWFLAKE_DATABASE", ""),
        snowflake_schema=os.getenv("SNOWFLAKE_SCHEMA", ""),
    )


def configure_logging(settings: Settings) -> None:
    """Apply the configured level to the package logger."""
    level = logging.getLevelName(settings.log_level.strip().upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.getLogger("tablequery").setLevel(level)


__all__ = ["Settings", "load_settings", "configure_logging"]
