"""Repository backends, selected by name at startup.

Each backend provides one RepositoryFactory; a RepositoryRegistry maps
backend names to factories so callers only deal with a DbConfig.

| backend  | connection_string examples |
|----------|----------------------------|
| `sqlite` | `estax.db`, `:memory:`     |
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from estax.db.repository import TaxRepository
from estax.db.schema import create_schema
from estax.db.seeds import seed_reference_data
from estax.exceptions import UnknownBackendError


@dataclass(frozen=True)
class DbConfig:
    backend: str = "sqlite"
    connection_string: str = ":memory:"


class RepositoryFactory(ABC):
    """Opens a repository for one database backend."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Unique, lowercase identifier for this backend."""
        ...

    @abstractmethod
    def create(self, config: DbConfig) -> TaxRepository:
        """Open (or create) the database and return a ready-to-use repository."""
        ...


class SqliteRepositoryFactory(RepositoryFactory):
    """SQLite backend. Creates the schema and seeds reference data on open."""

    backend_name = "sqlite"

    def create(self, config: DbConfig) -> TaxRepository:
        if config.connection_string != ":memory:":
            Path(config.connection_string).parent.mkdir(parents=True, exist_ok=True)
        conn = create_schema(config.connection_string)
        seed_reference_data(conn)
        return TaxRepository(conn)


class RepositoryRegistry:
    """Registry of RepositoryFactory instances keyed by backend name."""

    def __init__(self) -> None:
        self._factories: dict[str, RepositoryFactory] = {}

    def register(self, factory: RepositoryFactory) -> None:
        """Register a backend. A factory with the same name is replaced."""
        self._factories[factory.backend_name] = factory

    def available_backends(self) -> list[str]:
        return sorted(self._factories)

    def create(self, config: DbConfig) -> TaxRepository:
        factory = self._factories.get(config.backend)
        if factory is None:
            raise UnknownBackendError(config.backend, self.available_backends())
        return factory.create(config)


def default_registry() -> RepositoryRegistry:
    registry = RepositoryRegistry()
    registry.register(SqliteRepositoryFactory())
    return registry
