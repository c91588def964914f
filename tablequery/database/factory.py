from ..config import Settings
from .drivers import Driver, SQLiteDriver


def driver_from_settings(settings: Settings) -> Driver:
    """
    Build the configured driver. MySQL has no entry here: construct
    MySQLDriver with the DB-API connect callable of your choice.
    """
    kind = settings.driver.strip().lower()
    if kind == "sqlite":
        return SQLiteDriver(settings.sqlite_path)
    if kind == "snowflake":
        from .snowflake import SnowflakeDriver

        return SnowflakeDriver(settings.snowflake_database, settings.snowflake_schema)
    raise ValueError(f"Unsupported driver in settings: {settings.driver!r}")
