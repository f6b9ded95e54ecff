"""
Tests for UserRecordWriter.

Tests the users descriptor and the protected-row delete policy.
"""

from unittest.mock import MagicMock

import pytest

from tablesync.core.errors import PermissionDeniedError
from tablesync.core.filter_ast.models import FilterLogic
from tablesync.crud.users import PROTECTED_USER_ID, USER_DESCRIPTOR, UserRecordWriter
from tablesync.crud.writer import RecordWriter


@pytest.fixture
def writer(store) -> UserRecordWriter:
    return UserRecordWriter.for_store(store)


class TestUserDescriptor:
    """Tests for the users table declaration."""

    def test_shape(self) -> None:
        assert USER_DESCRIPTOR.name == "users"
        assert USER_DESCRIPTOR.column_names == ["id", "name", "email"]
        assert USER_DESCRIPTOR.auto_increment_column == "id"
        assert USER_DESCRIPTOR.required_columns == ["name", "email"]

    def test_advisory_flags_and_labels(self) -> None:
        email = USER_DESCRIPTOR.columns["email"]

        assert email.unique
        assert not email.index
        assert email.label == "Email"


class TestProtectedDelete:
    """Tests for the protected-user policy."""

    @pytest.mark.parametrize("record_id", [PROTECTED_USER_ID, 1])
    def test_protected_user_cannot_be_deleted(
        self, writer: UserRecordWriter, store, record_id
    ) -> None:
        with pytest.raises(PermissionDeniedError) as exc_info:
            writer.delete(record_id)

        assert exc_info.value.record_id == record_id
        assert store.dml == []

    def test_other_users_are_deleted(self, writer: UserRecordWriter, store) -> None:
        assert writer.delete("2") == 1
        assert str(store.dml[0]) == "DELETE FROM users WHERE id = :id_1"


class TestDelegation:
    """Tests that everything else falls through to the base writer."""

    @pytest.fixture
    def base(self) -> MagicMock:
        base = MagicMock(spec=RecordWriter)
        base.descriptor = USER_DESCRIPTOR
        return base

    def test_delegates_writes(self, base: MagicMock) -> None:
        writer = UserRecordWriter(base)
        fields = {"name": "A", "email": "a@example.com"}

        writer.create(fields)
        writer.update("3", fields)
        writer.delete("3")

        base.create.assert_called_once_with(fields)
        base.update.assert_called_once_with("3", fields)
        base.delete.assert_called_once_with("3")

    def test_protected_delete_never_reaches_base(self, base: MagicMock) -> None:
        writer = UserRecordWriter(base)

        with pytest.raises(PermissionDeniedError):
            writer.delete("1")

        base.delete.assert_not_called()

    def test_delegates_filters_and_schema(self, base: MagicMock) -> None:
        writer = UserRecordWriter(base)

        writer.prepare_where({"name": "Bob"})
        writer.synchronize()

        assert writer.descriptor is USER_DESCRIPTOR
        base.prepare_where.assert_called_once_with({"name": "Bob"}, FilterLogic.AND)
        base.synchronize.assert_called_once_with()
