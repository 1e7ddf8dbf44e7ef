"""Database layer for estax."""

from estax.db.factory import (
    DbConfig,
    RepositoryFactory,
    RepositoryRegistry,
    SqliteRepositoryFactory,
    default_registry,
)
from estax.db.repository import TaxRepository
from estax.db.schema import create_schema
from estax.db.seeds import seed_reference_data

__all__ = [
    "DbConfig",
    "RepositoryFactory",
    "RepositoryRegistry",
    "SqliteRepositoryFactory",
    "TaxRepository",
    "create_schema",
    "default_registry",
    "seed_reference_data",
]
