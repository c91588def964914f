import os, typing as t

from ..query import SNOWFLAKE
from .drivers import Driver, ResultShape


def _load_p8_as_der_bytes(path: str) -> bytes:
    from cryptography.hazmat.primitives import serialization

    with open(path, "rb") as f:
        raw = f.read()
    is_pem = raw.lstrip().startswith(b"-----BEGIN")
    if is_pem:
        key = serialization.load_pem_private_key(raw, password=None)
    else:
        key = serialization.load_der_private_key(raw, password=None)

    # Snowflake needs unencrypted PKCS#8 DER bytes
    return key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def _sf_connect_for(db: str, schema: str, *, role: str | None = None):
    import snowflake.connector

    common = dict(
        account=os.environ["SNOWFLAKE_ACCOUNT"],
        warehouse=os.environ["SNOWFLAKE_WAREHOUSE"],
        database=db,
        schema=schema,
        client_session_keep_alive=True,
        session_parameters={
            "QUERY_TAG": "tablequery",
        },
    )
    if role:
        common["role"] = role

    pkb = _load_p8_as_der_bytes(os.environ["SNOWFLAKE_PRIVATE_KEY_PATH"])
    return snowflake.connector.connect(
        user=os.environ["SNOWFLAKE_USER"],
        private_key=pkb,
        **common
    )


def _split_db_path(path: str, db: str, schema: str) -> tuple[str, str, str]:
    """Accept 1-, 2-, or 3-part names; fill missing parts from the driver."""
    parts = [p.strip().strip('"') for p in path.split(".") if p.strip() != ""]
    if len(parts) == 3:
        return parts[0], parts[1], parts[2]
    if len(parts) == 2:
        return db, parts[0], parts[1]
    if len(parts) == 1:
        return db, schema, parts[0]
    raise RuntimeError(f"Invalid object name: {path!r}")


class SnowflakeDriver(Driver):
    """
    Snowflake over snowflake-connector-python with key-pair authentication.

    Database and schema default to SNOWFLAKE_DATABASE / SNOWFLAKE_SCHEMA.
    Unquoted Snowflake identifiers are stored upper-case, so describe()
    returns upper-case column names.
    """

    dialect = SNOWFLAKE

    def __init__(self, database: str | None = None, schema: str | None = None, *, role: str | None = None):
        self.database = database or os.environ.get("SNOWFLAKE_DATABASE", "")
        self.schema = schema or os.environ.get("SNOWFLAKE_SCHEMA", "")
        if not self.database or not self.schema:
            raise RuntimeError("SNOWFLAKE_DATABASE and SNOWFLAKE_SCHEMA must be set.")
        self.role = role or os.environ.get("SNOWFLAKE_DEFAULT_ROLE") or None
        super().__init__(lambda: _sf_connect_for(self.database, self.schema, role=self.role))

    def describe(self, table: str) -> t.List[str]:
        db, schema, name = _split_db_path(table, self.database, self.schema)
        sql = f"""
        SELECT COLUMN_NAME
        FROM {db.upper()}.INFORMATION_SCHEMA.COLUMNS
        WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s
        ORDER BY ORDINAL_POSITION
        """
        rows = self.query(sql, (schema.upper(), name.upper()), shape=ResultShape.TUPLE)
        return [r[0] for r in rows]

    def table_exists(self, table: str) -> bool:
        db, schema, name = _split_db_path(table, self.database, self.schema)
        sql = f"""
        SELECT COUNT(*)
        FROM {db.upper()}.INFORMATION_SCHEMA.TABLES
        WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s
        """
        rows = self.query(sql, (schema.upper(), name.upper()), shape=ResultShape.TUPLE)
        return bool(rows) and int(rows[0][0]) > 0
