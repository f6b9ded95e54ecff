"""
Tests for TableRecordWriter.

Tests validation and the statements handed to the store.
"""

import pytest
from sqlalchemy import Delete, Insert, Update

from tablesync.core.descriptor.models import ColumnDescriptor, TableDescriptor
from tablesync.core.errors import (
    DescriptorError,
    RecordValidationError,
    UnknownColumnError,
)
from tablesync.crud.writer import TableRecordWriter


# -----------------------------
# Fixtures
# -----------------------------


@pytest.fixture
def writer(store, users_descriptor: TableDescriptor) -> TableRecordWriter:
    return TableRecordWriter(store, users_descriptor)


def params_of(statement) -> dict:
    return dict(statement.compile().params)


# -----------------------------
# Create Tests
# -----------------------------


class TestCreate:
    """Tests for inserts."""

    def test_missing_required_field_rejected_before_store(
        self, writer: TableRecordWriter, store
    ) -> None:
        with pytest.raises(RecordValidationError, match="'name'"):
            writer.create({"email": "x@example.com"})

        assert store.dml == []

    def test_insert_covers_every_declared_column(
        self, writer: TableRecordWriter, store
    ) -> None:
        rowcount = writer.create({"name": "Alice Smith", "email": "alice@example.com"})

        assert rowcount == 1
        (statement,) = store.dml
        assert isinstance(statement, Insert)
        assert str(statement) == (
            "INSERT INTO users (id, name, email) VALUES (:id, :name, :email)"
        )
        assert params_of(statement) == {
            "id": None,
            "name": "Alice Smith",
            "email": "alice@example.com",
        }

    def test_undeclared_fields_ignored(self, writer: TableRecordWriter, store) -> None:
        writer.create({"name": "A", "email": "a@example.com", "nickname": "al"})

        assert "nickname" not in params_of(store.dml[0])


# -----------------------------
# Update Tests
# -----------------------------


class TestUpdate:
    """Tests for updates by primary key."""

    def test_sets_only_supplied_columns(self, writer: TableRecordWriter, store) -> None:
        writer.update("2", {"name": "Updated Name", "email": "new@example.com"})

        (statement,) = store.dml
        assert isinstance(statement, Update)
        assert str(statement) == (
            "UPDATE users SET name=:name, email=:email WHERE id = :id_1"
        )
        assert params_of(statement) == {
            "name": "Updated Name",
            "email": "new@example.com",
            "id_1": "2",
        }

    def test_required_columns_checked_against_whole_descriptor(
        self, writer: TableRecordWriter, store
    ) -> None:
        with pytest.raises(RecordValidationError) as exc_info:
            writer.update("2", {"name": "Only Name"})

        assert exc_info.value.fields == ("email",)
        assert store.dml == []

    def test_empty_update_rejected(self, writer: TableRecordWriter, store) -> None:
        with pytest.raises(RecordValidationError):
            writer.update("2", {})

        assert store.dml == []

    def test_undeclared_column_rejected(self, writer: TableRecordWriter, store) -> None:
        with pytest.raises(UnknownColumnError, match="nickname"):
            writer.update("2", {"name": "A", "email": "a@example.com", "nickname": "x"})

        assert store.dml == []

    def test_nothing_to_update_without_required_columns(self, store) -> None:
        writer = TableRecordWriter(
            store,
            TableDescriptor(name="notes", columns={"id": ColumnDescriptor(type="int")}),
        )

        with pytest.raises(RecordValidationError, match="no fields to update"):
            writer.update(1, {})


# -----------------------------
# Delete Tests
# -----------------------------


class TestDelete:
    """Tests for deletes by primary key."""

    def test_deletes_by_id(self, writer: TableRecordWriter, store) -> None:
        store.rowcount = 0

        assert writer.delete("7") == 0
        (statement,) = store.dml
        assert isinstance(statement, Delete)
        assert str(statement) == "DELETE FROM users WHERE id = :id_1"
        assert params_of(statement) == {"id_1": "7"}

    def test_custom_primary_key(self, store, users_descriptor) -> None:
        writer = TableRecordWriter(store, users_descriptor, primary_key="email")

        writer.delete("a@example.com")

        assert str(store.dml[0]) == "DELETE FROM users WHERE email = :email_1"

    def test_primary_key_must_be_identifier(self, store, users_descriptor) -> None:
        with pytest.raises(DescriptorError):
            TableRecordWriter(store, users_descriptor, primary_key="id; --")


# -----------------------------
# Filters & Schema
# -----------------------------


class TestFiltersAndSchema:
    """Tests for the read-side helpers."""

    def test_prepare_where(self, writer: TableRecordWriter) -> None:
        compiled = writer.prepare_where({"name": "Bob", "ghost": 1})

        assert compiled.to_sql(literal=True) == "name = 'Bob'"
        assert [error.column for error in compiled.errors] == ["ghost"]

    def test_synchronize(self, writer: TableRecordWriter, store) -> None:
        report = writer.synchronize()

        assert report.created
        assert "users" in store.tables
