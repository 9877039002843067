"""Where the order catalog lives and how its engine is opened."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from .env import env_bool

APP_DIR_NAME: Final[str] = "sheetorders"
DEFAULT_DB_FILENAME: Final[str] = "sheetorders.db"
SQLITE_SCHEME: Final[str] = "sqlite"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def database_path(self, *, ensure: bool = True) -> Path:
        data_dir = self.resolve_data_dir()
        if ensure:
            data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Connection settings handed to ``sqlalchemy.create_engine``."""

    uri: str
    echo: bool = False

    @property
    def is_sqlite(self) -> bool:
        return self.uri.split(":", 1)[0].split("+", 1)[0] == SQLITE_SCHEME

    def engine_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {"echo": self.echo}
        if self.is_sqlite:
            # one engine serves every thread that runs a sync
            options["connect_args"] = {"check_same_thread": False}
        return options


def _xdg_data_home() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    explicit = os.getenv("SHEETORDERS_DATA_DIR")
    data_dir = Path(explicit) if explicit else _xdg_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir.expanduser().resolve())


def get_database_config(
    *, uri: str | None = None, storage: StorageConfig | None = None
) -> DatabaseConfig:
    """Resolve the database URI: explicit argument, ``DATABASE_URI``, then SQLite on disk."""

    echo = env_bool("SHEETORDERS_DB_ECHO", False)
    resolved = uri or os.getenv("DATABASE_URI")
    if resolved:
        return DatabaseConfig(uri=resolved, echo=echo)
    storage_config = storage or get_storage_config()
    return DatabaseConfig(uri=storage_config.database_uri(), echo=echo)
