# ♥♥─── Generic Vault ────────────────────────────────────────────────────────────
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, TypeVar

from sqlmodel import Session, col, func, select, create_engine
from sqlalchemy.pool import StaticPool

from questboard.ui import icons
from questboard.core.models import QuestBoardSQLModel
from questboard.custom_logger import log


if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

T_Model = TypeVar("T_Model", bound=QuestBoardSQLModel)
IN_MEMORY_URL = "sqlite://"


def default_database_url() -> str:
    """Return the configured local cache URL, creating its directory on the way."""
    from questboard.config.app_config import app_config

    app_config.storage.ensure_directories_exist()
    return app_config.storage.get_database_url()


# ─── Base Vault ───────────────────────────────────────────────────────────────
class BaseVault[T_Content](ABC):
    """Base class for vault implementations, providing common database operations.

    :param vault_name: The name of this vault instance.
    :param db_url: The database connection URL, the configured cache file when None.
    :param echo: If True, SQLAlchemy will log all generated SQL.
    :ivar engine: The SQLAlchemy engine for database connections.
    """

    def __init__(self, vault_name: str, db_url: str | None = None, echo: bool = False) -> None:
        """Initialize the database engine and create tables if they don't exist."""
        url = db_url or default_database_url()
        if url == IN_MEMORY_URL:
            # in-memory databases live on a single shared connection
            self.engine: Engine = create_engine(url, echo=echo, connect_args={"check_same_thread": False}, poolclass=StaticPool)
        else:
            self.engine = create_engine(url, echo=echo)
        self.vault_name: str = vault_name
        QuestBoardSQLModel.metadata.create_all(self.engine)
        log.debug("{} vault initialized {}", vault_name, icons.DATABASE)

    @abstractmethod
    def save(self, key: str, content: T_Content) -> None:
        """Store ``content`` under ``key``, replacing any previous value."""

    @abstractmethod
    def load(self, key: str) -> T_Content | None:
        """Return the content stored under ``key`` or None."""

    @abstractmethod
    def clear(self, key: str) -> None:
        """Forget the content stored under ``key``."""

    def get_by_id(self, model_cls: type[T_Model], item_id: Any) -> T_Model | None:
        """Retrieve a single item by its primary key (id).

        :param model_cls: The SQLModel class to query.
        :param item_id: The ID of the item to retrieve.
        :returns: The found item or None if not found.
        """
        with Session(self.engine) as session:
            return session.get(model_cls, item_id)

    def exists(self, model_cls: type[T_Model], item_id: Any) -> bool:
        """Check if an item with the given primary key (id) exists."""
        with Session(self.engine) as session:
            stmt = select(col(model_cls.id)).where(col(model_cls.id) == item_id)
            return session.exec(stmt).first() is not None

    def count(self, model_cls: type[T_Model]) -> int:
        """Return the total number of records for a model."""
        with Session(self.engine) as session:
            stmt = select(func.count(col(model_cls.id)))
            return session.exec(stmt).one()

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
