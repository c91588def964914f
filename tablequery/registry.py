import json, logging, typing as t
from pathlib import Path

from jsonschema import Draft7Validator
import yaml

from .config import Settings
from .database import Driver
from .table import Table

log = logging.getLogger("tablequery.registry")

TABLES_SCHEMA: t.Dict[str, t.Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Table definitions",
    "type": "object",
    "properties": {
        "tables": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "table": {"type": "string", "minLength": 1},
                    "create": {
                        "type": "array",
                        "items": {"type": "string", "minLength": 1},
                    },
                },
                "required": ["table"],
            },
        },
    },
    "required": ["tables"],
}


class TableDef(t.TypedDict, total=False):
    table: str
    create: t.List[str]


class TableRegistry:
    """
    Logical table names -> Table handles, from a YAML (or JSON) file:

        tables:
          posts:
            table: posts
            create:
              - "id INTEGER PRIMARY KEY"
              - "title TEXT"

    One handle is cached per logical name. refresh() drops it so the next
    lookup describes the table again.
    """

    def __init__(
        self,
        driver: Driver,
        *,
        path: t.Union[str, Path, None] = None,
        charset_collate: str = "",
        auto_create: bool = False,
    ):
        self.driver = driver
        self.path = Path(path) if path is not None else None
        self.charset_collate = charset_collate
        self.auto_create = auto_create
        self.tables_cfg: t.Dict[str, TableDef] = {}
        self._handles: t.Dict[str, Table] = {}

    @classmethod
    def from_settings(cls, driver: Driver, settings: Settings) -> "TableRegistry":
        reg = cls(
            driver,
            path=settings.tables_file,
            charset_collate=settings.charset_collate,
            auto_create=settings.auto_create,
        )
        reg.load()
        return reg

    def load(self) -> None:
        if self.path is None or not self.path.exists():
            raise RuntimeError(f"Table definitions file not found: {self.path}")
        with self.path.open("r", encoding="utf-8") as f:
            if self.path.suffix.lower() in (".yaml", ".yml"):
                cfg = yaml.safe_load(f)
            else:
                cfg = json.load(f)
        self.load_dict(cfg or {})

    def load_dict(self, cfg: t.Dict[str, t.Any]) -> None:
        Draft7Validator(TABLES_SCHEMA).validate(cfg)
        self.tables_cfg = {name: t.cast(TableDef, dict(v)) for name, v in cfg["tables"].items()}
        self._handles.clear()
        log.info("Loaded %d table definitions", len(self.tables_cfg))

    def names(self) -> t.List[str]:
        return list(self.tables_cfg)

    def table(self, name: str) -> Table:
        if name not in self.tables_cfg:
            raise KeyError(f"Unknown table: {name}")
        cached = self._handles.get(name)
        if cached is not None:
            return cached
        cfg = self.tables_cfg[name]
        if self.auto_create and cfg.get("create"):
            probe = Table(self.driver, cfg["table"], charset_collate=self.charset_collate)
            probe.create_table_if_missing(cfg["create"])
        handle = Table(self.driver, cfg["table"], charset_collate=self.charset_collate)
        self._handles[name] = handle
        return handle

    def refresh(self, name: t.Optional[str] = None) -> None:
        """Forget cached handles (one, or all when name is None)."""
        if name is None:
            self._handles.clear()
        else:
            self._handles.pop(name, None)


__all__ = ["TABLES_SCHEMA", "TableDef", "TableRegistry"]
