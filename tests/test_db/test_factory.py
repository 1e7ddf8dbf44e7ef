"""Tests for repository factories and the backend registry."""

from decimal import Decimal

import pytest

from estax.db.factory import (
    DbConfig,
    RepositoryFactory,
    RepositoryRegistry,
    SqliteRepositoryFactory,
    default_registry,
)
from estax.db.repository import TaxRepository
from estax.exceptions import RepositoryError, UnknownBackendError
from estax.models.reference import TaxBracket


class StubFactory(RepositoryFactory):
    backend_name = "stub"

    def __init__(self):
        self.opened = []

    def create(self, config):
        self.opened.append(config.connection_string)
        return SqliteRepositoryFactory().create(DbConfig())


class TestRepositoryRegistry:
    def test_default_registry(self):
        assert default_registry().available_backends() == ["sqlite"]

    def test_unknown_backend(self):
        registry = default_registry()
        with pytest.raises(UnknownBackendError) as exc_info:
            registry.create(DbConfig(backend="postgres", connection_string="db"))
        assert isinstance(exc_info.value, RepositoryError)
        assert exc_info.value.backend == "postgres"
        assert "sqlite" in str(exc_info.value)

    def test_empty_registry(self):
        with pytest.raises(UnknownBackendError, match="none"):
            RepositoryRegistry().create(DbConfig())

    def test_register_dispatches_by_name(self):
        registry = default_registry()
        stub = StubFactory()
        registry.register(stub)
        assert registry.available_backends() == ["sqlite", "stub"]
        repo = registry.create(DbConfig(backend="stub", connection_string="anything"))
        assert isinstance(repo, TaxRepository)
        assert stub.opened == ["anything"]
        repo.close()


class TestSqliteRepositoryFactory:
    def test_in_memory(self):
        repo = SqliteRepositoryFactory().create(DbConfig())
        assert repo.list_tax_years() == [2024, 2025]
        repo.close()

    def test_creates_parent_directories(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "estax.db"
        repo = SqliteRepositoryFactory().create(DbConfig(connection_string=str(db_path)))
        repo.close()
        assert db_path.exists()

    def test_reopen_is_idempotent(self, tmp_path):
        config = DbConfig(connection_string=str(tmp_path / "estax.db"))
        SqliteRepositoryFactory().create(config).close()
        repo = SqliteRepositoryFactory().create(config)
        assert len(repo.list_filing_statuses()) == 5
        assert len(repo.get_tax_brackets(2025, 1)) == 7
        repo.close()

    def test_reopen_keeps_replaced_brackets(self, tmp_path):
        config = DbConfig(connection_string=str(tmp_path / "estax.db"))
        repo = SqliteRepositoryFactory().create(config)
        with repo.transaction():
            repo.delete_tax_brackets(2025, 1)
            repo.insert_tax_bracket(
                TaxBracket(
                    tax_year=2025,
                    filing_status_id=1,
                    min_income=Decimal("0"),
                    tax_rate=Decimal("0.15"),
                    base_tax=Decimal("0"),
                )
            )
        repo.close()

        repo = SqliteRepositoryFactory().create(config)
        brackets = repo.get_tax_brackets(2025, 1)
        assert [(b.min_income, b.max_income, b.tax_rate) for b in brackets] == [
            (Decimal("0"), None, Decimal("0.15"))
        ]
        assert len(repo.get_tax_brackets(2025, 2)) == 7
        repo.close()
