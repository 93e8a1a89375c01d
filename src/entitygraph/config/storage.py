"""Where the parent graphs are stored."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from .errors import ConfigurationError

DATA_DIR_ENV: Final[str] = "ENTITYGRAPH_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
DATABASE_FILENAME: Final[str] = "entitygraph.db"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    url: URL
    from_env: bool

    @property
    def uri(self) -> str:
        return self.url.render_as_string(hide_password=False)


def _setting(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


def data_dir() -> Path:
    """``$ENTITYGRAPH_DATA_DIR``, else ``$XDG_DATA_HOME/entitygraph``; created if missing."""

    configured = _setting(DATA_DIR_ENV)
    if configured is not None:
        path = Path(configured)
    else:
        data_home = _setting("XDG_DATA_HOME")
        path = Path(data_home) if data_home else Path.home() / ".local" / "share"
        path /= "entitygraph"
    path = path.expanduser().resolve()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_database_config() -> DatabaseConfig:
    """Return the ``$DATABASE_URI`` override, or the SQLite file in ``data_dir()``.

    An override SQLAlchemy cannot parse raises ``ConfigurationError``.
    """

    override = _setting(DATABASE_URI_ENV)
    if override is None:
        return DatabaseConfig(
            url=URL.create("sqlite+pysqlite", database=str(data_dir() / DATABASE_FILENAME)),
            from_env=False,
        )
    try:
        url = make_url(override)
    except ArgumentError as exc:
        raise ConfigurationError(f"Invalid {DATABASE_URI_ENV}: {override!r}") from exc
    return DatabaseConfig(url=url, from_env=True)
